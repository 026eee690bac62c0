"""Best-effort dismissal of overlays that block further interaction."""

from __future__ import annotations

from typing import Any

from storefront.common import safe_count, safe_is_visible
from storefront.constants import (
    ANY_VISIBLE_MODAL,
    CART_MODAL,
    MODAL_CONTAINER,
    MODAL_DISMISS_NAME,
)


def any_modal_visible(page: Any) -> bool:
    return safe_is_visible(page.locator(CART_MODAL)) or safe_is_visible(
        page.locator(ANY_VISIBLE_MODAL)
    )


def dismiss_any_modal_if_visible(page: Any, *, hide_timeout_ms: int = 7000) -> bool:
    """Close the cart modal or any visible ``.modal``.

    Returns ``False`` without touching the page when no modal is shown.
    Clicks a "Continue Shopping"/"Close" button when one exists, otherwise
    presses Escape, then waits (bounded) for the overlays to hide.
    """
    cart_modal = page.locator(CART_MODAL)
    any_modal = page.locator(ANY_VISIBLE_MODAL)
    if not safe_is_visible(cart_modal) and not safe_is_visible(any_modal):
        return False

    dismiss_button = (
        page.locator(MODAL_CONTAINER)
        .get_by_role("button", name=MODAL_DISMISS_NAME)
        .first
    )
    if safe_count(dismiss_button) > 0:
        try:
            dismiss_button.click()
        except Exception:
            pass
    else:
        try:
            page.keyboard.press("Escape")
        except Exception:
            pass

    for locator in (cart_modal, any_modal):
        try:
            locator.wait_for(state="hidden", timeout=hide_timeout_ms)
        except Exception:
            pass
    return True
