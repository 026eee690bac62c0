"""Re-acquire a usable page after the active tab closes or is replaced."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from storefront.common import page_is_closed, safe_count, safe_page_url
from storefront.constants import (
    CHECKOUT_OR_PAYMENT_URL_RE,
    NAME_ON_CARD,
    PAY_BUTTON,
    PLACE_ORDER_NAME,
)


class PageRecoveryError(RuntimeError):
    pass


@dataclass(frozen=True)
class RecoveryTarget:
    description: str
    url_pattern: re.Pattern[str] | None = None
    control_selectors: tuple[str, ...] = ()
    control_roles: tuple[tuple[str, re.Pattern[str]], ...] = field(default_factory=tuple)


PAYMENT_TARGET = RecoveryTarget(
    description="checkout/payment page",
    url_pattern=CHECKOUT_OR_PAYMENT_URL_RE,
    control_selectors=(PAY_BUTTON, NAME_ON_CARD),
    control_roles=(("link", PLACE_ORDER_NAME), ("button", PLACE_ORDER_NAME)),
)


def _context_pages(context: Any) -> list[Any]:
    pages = getattr(context, "pages", None)
    if callable(pages):
        pages = pages()
    return list(pages or [])


def live_pages(context: Any) -> list[Any]:
    """Open pages in opening order, closed ones dropped."""
    try:
        return [p for p in _context_pages(context) if not page_is_closed(p)]
    except Exception:
        return []


def _matches_url(page: Any, target: RecoveryTarget) -> bool:
    if target.url_pattern is None:
        return False
    try:
        return bool(target.url_pattern.search(str(page.url or "")))
    except Exception:
        return False


def _has_controls(page: Any, target: RecoveryTarget) -> bool:
    for selector in target.control_selectors:
        if safe_count(page.locator(selector)) > 0:
            return True
    for role, name in target.control_roles:
        try:
            locator = page.get_by_role(role, name=name)
        except Exception:
            continue
        if safe_count(locator) > 0:
            return True
    return False


def find_recovery_page(context: Any, target: RecoveryTarget, *, exclude: Any = None) -> Any | None:
    """Newest page matching ``target`` by URL first, then by controls."""
    newest_first = [p for p in reversed(live_pages(context)) if p is not exclude]
    for page in newest_first:
        if _matches_url(page, target):
            return page
    for page in newest_first:
        if _has_controls(page, target):
            return page
    return None


def recover_page(context: Any, target: RecoveryTarget, *, exclude: Any = None) -> Any:
    page = find_recovery_page(context, target, exclude=exclude)
    if page is not None:
        return page
    urls = [safe_page_url(p) for p in live_pages(context)]
    listing = ", ".join(urls) if urls else "<none>"
    raise PageRecoveryError(
        f"No open tab matches {target.description}; open tabs: {listing}"
    )


def context_of(page: Any) -> Any | None:
    try:
        return page.context
    except Exception:
        return None
