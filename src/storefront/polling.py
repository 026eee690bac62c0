"""Poll, retry and stable-read primitives for flaky UI state."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class PollResult:
    ok: bool
    value: Any = None
    attempts: int = 0
    elapsed_ms: int = 0
    last_error: str = ""


def _elapsed_ms(started: float) -> int:
    return int(max(0.0, time.monotonic() - started) * 1000)


def _pause(ms: int) -> None:
    if ms > 0:
        time.sleep(ms / 1000.0)


def poll_until(
    read: Callable[[], T],
    predicate: Callable[[T], bool] = bool,
    *,
    timeout_ms: int = 5000,
    interval_ms: int = 100,
) -> PollResult:
    """Evaluate ``read`` until ``predicate`` accepts its value or time runs out.

    The read always runs at least once. Exceptions raised by the read (or
    the predicate) count as a failed attempt and are retried; the last one
    is kept in ``last_error`` for diagnostics.
    """
    started = time.monotonic()
    deadline = started + max(0, int(timeout_ms)) / 1000.0
    attempts = 0
    last_value: Any = None
    last_error = ""
    while True:
        attempts += 1
        try:
            last_value = read()
            if predicate(last_value):
                return PollResult(
                    ok=True,
                    value=last_value,
                    attempts=attempts,
                    elapsed_ms=_elapsed_ms(started),
                )
        except Exception as exc:
            last_error = f"{type(exc).__name__}: {exc}"
        if time.monotonic() + max(0, int(interval_ms)) / 1000.0 > deadline:
            break
        _pause(interval_ms)
    return PollResult(
        ok=False,
        value=last_value,
        attempts=attempts,
        elapsed_ms=_elapsed_ms(started),
        last_error=last_error,
    )


def wait_until(
    condition: Callable[[], Any],
    *,
    timeout_ms: int = 5000,
    interval_ms: int = 100,
) -> bool:
    return poll_until(condition, timeout_ms=timeout_ms, interval_ms=interval_ms).ok


def sample_stable(
    read: Callable[[], T],
    *,
    samples: int = 3,
    delay_ms: int = 75,
    required_agreement: int = 2,
    fallback: Any = 0,
) -> Any:
    """Read a volatile value until consecutive reads agree.

    Returns the agreed value, otherwise the last value read, otherwise
    ``fallback`` when every read raised.
    """
    needed = max(2, int(required_agreement))
    total = max(needed, int(samples))
    last: Any = _MISSING
    streak = 0
    for index in range(total):
        try:
            current = read()
        except Exception:
            streak = 0
        else:
            if last is not _MISSING and current == last:
                streak += 1
            else:
                last = current
                streak = 1
            if streak >= needed:
                return current
        if index < total - 1:
            _pause(delay_ms)
    return fallback if last is _MISSING else last


def wait_for_stable_value(
    read_stable: Callable[[], T],
    expected: T,
    *,
    timeout_ms: int = 25000,
    required_hits: int = 3,
    interval_ms: int = 150,
    on_error: Callable[[BaseException], None] | None = None,
    on_tick: Callable[[int], None] | None = None,
) -> bool:
    """Wait until ``read_stable`` returns ``expected`` on consecutive polls.

    Any mismatch resets the hit counter; a read that raises does not.
    ``on_error`` runs when a read raises, ``on_tick`` after every poll with
    the elapsed milliseconds.
    """
    needed = max(1, int(required_hits))
    started = time.monotonic()
    deadline = started + max(0, int(timeout_ms)) / 1000.0
    hits = 0
    while True:
        try:
            value = read_stable()
        except Exception as exc:
            if on_error is not None:
                try:
                    on_error(exc)
                except Exception:
                    pass
        else:
            if value == expected:
                hits += 1
                if hits >= needed:
                    return True
            else:
                hits = 0
        if time.monotonic() >= deadline:
            return False
        _pause(interval_ms)
        if on_tick is not None:
            try:
                on_tick(_elapsed_ms(started))
            except Exception:
                pass


def retry(fn: Callable[[], T], attempts: int = 2, delay_ms: int = 150) -> T:
    """Call ``fn`` up to ``attempts`` times; re-raise the last error."""
    total = max(1, int(attempts))
    for _attempt in range(total - 1):
        try:
            return fn()
        except Exception:
            _pause(delay_ms)
    return fn()


def fill_with_retries(
    locator: Any,
    value: str,
    *,
    timeout_ms: int = 4000,
    step_ms: int = 100,
) -> None:
    deadline = time.monotonic() + max(0, int(timeout_ms)) / 1000.0
    while time.monotonic() < deadline:
        try:
            locator.fill(value)
            return
        except Exception:
            pass
        _pause(step_ms)
    # Final attempt surfaces the real error.
    locator.fill(value)


def wait_for_visible_any(
    locators: list[Any],
    *,
    timeout_ms: int = 12000,
    interval_ms: int = 100,
) -> int:
    """Return the index of the first visible locator, or -1 on timeout."""

    def _first_visible() -> int:
        for index, locator in enumerate(locators):
            try:
                if locator.is_visible():
                    return index
            except Exception:
                continue
        return -1

    result = poll_until(
        _first_visible,
        lambda idx: idx >= 0,
        timeout_ms=timeout_ms,
        interval_ms=interval_ms,
    )
    return int(result.value) if result.ok else -1
