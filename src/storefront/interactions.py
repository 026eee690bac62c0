"""Candidate-based click resolution for UI affordances that vary across pages."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Sequence

from storefront.reporting import warn


@dataclass(frozen=True)
class ClickResult:
    clicked: bool
    index: int = -1
    candidate: Any = None
    attempts: int = 0
    errors: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.clicked


def click_first_available(
    candidates: Sequence[Any],
    *,
    force: bool = True,
    timeout_ms: int = 3000,
    interval_ms: int = 100,
) -> ClickResult:
    """Click the first candidate locator that resolves and accepts the click.

    Candidates are tried in priority order on every pass; passes repeat
    until the deadline, with at least one full pass. A candidate only wins
    when its click returned without raising.
    """
    deadline = time.monotonic() + max(0, int(timeout_ms)) / 1000.0
    attempts = 0
    errors: list[str] = []
    while True:
        for index, candidate in enumerate(candidates):
            try:
                if not candidate.count():
                    continue
            except Exception as exc:
                errors.append(f"#{index} count: {type(exc).__name__}: {exc}")
                continue
            attempts += 1
            try:
                candidate.first.click(force=force)
            except Exception as exc:
                errors.append(f"#{index} click: {type(exc).__name__}: {exc}")
                continue
            return ClickResult(
                clicked=True,
                index=index,
                candidate=candidate,
                attempts=attempts,
                errors=tuple(errors[-10:]),
            )
        if time.monotonic() + max(0, int(interval_ms)) / 1000.0 > deadline:
            break
        time.sleep(max(0, int(interval_ms)) / 1000.0)
    return ClickResult(clicked=False, attempts=attempts, errors=tuple(errors[-10:]))


def require_first_available(
    candidates: Sequence[Any],
    description: str,
    *,
    force: bool = True,
    timeout_ms: int = 3000,
    interval_ms: int = 100,
) -> ClickResult:
    result = click_first_available(
        candidates,
        force=force,
        timeout_ms=timeout_ms,
        interval_ms=interval_ms,
    )
    if result.clicked:
        return result
    detail = "; ".join(result.errors[-3:]) or "no candidate matched"
    raise RuntimeError(
        f"Could not click {description}: tried {len(candidates)} candidate(s) "
        f"for {timeout_ms}ms ({detail})"
    )


def try_click_with_fallback(locator: Any) -> bool:
    """Force-click ``locator``; fall back to a DOM click on its element handle."""
    try:
        locator.click(force=True)
        return True
    except Exception:
        pass
    try:
        handle = locator.element_handle()
        if handle is not None:
            handle.evaluate("(el) => el.click()")
            return True
    except Exception:
        pass
    return False


def reveal_card(page: Any, card: Any, *, label: str, settle_ms: int = 500) -> None:
    """Scroll a product card into view and hover it so its overlay renders."""
    try:
        card.scroll_into_view_if_needed()
    except Exception as exc:
        warn(f"Failed to scroll {label} into view: {exc}")
    try:
        card.hover(force=True)
    except Exception as exc:
        warn(f"Failed to hover {label}: {exc}")
    try:
        page.wait_for_timeout(settle_ms)
    except Exception:
        time.sleep(settle_ms / 1000.0)
