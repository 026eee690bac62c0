"""Add-to-cart loop over a grid of product cards."""

from __future__ import annotations

from typing import Any, Sequence

from storefront.common import collapse_ws
from storefront.constants import ADD_TO_CART_NAME
from storefront.interactions import click_first_available, reveal_card
from storefront.modals import dismiss_any_modal_if_visible
from storefront.reporting import warn


def card_name(card: Any, name_selector: str) -> str:
    try:
        return collapse_ws(card.locator(name_selector).first.text_content())
    except Exception:
        return ""


def add_to_cart_candidates(card: Any, add_selectors: Sequence[str], *, role_fallback: bool = True) -> list[Any]:
    candidates = [card.locator(selector).first for selector in add_selectors]
    if role_fallback:
        candidates.append(card.get_by_role("link", name=ADD_TO_CART_NAME).first)
        candidates.append(card.get_by_role("button", name=ADD_TO_CART_NAME).first)
    return candidates


def add_first_n_from_cards(
    page: Any,
    cards: Any,
    name_selector: str,
    add_selectors: Sequence[str],
    take: int,
    *,
    click_timeout_ms: int = 3000,
    settle_ms: int = 500,
    role_fallback: bool = True,
) -> list[str]:
    """Add up to ``take`` products from ``cards``; return the names added.

    Cards whose add-to-cart control cannot be clicked are skipped with a
    warning and the loop moves on to the next card.
    """
    names: list[str] = []
    try:
        total = int(cards.count())
    except Exception:
        total = 0
    for index in range(total):
        if len(names) >= take:
            break
        card = cards.nth(index)
        label = f"card #{index + 1}"
        reveal_card(page, card, label=label, settle_ms=settle_ms)
        name = card_name(card, name_selector)

        result = click_first_available(
            add_to_cart_candidates(card, add_selectors, role_fallback=role_fallback),
            force=True,
            timeout_ms=click_timeout_ms,
        )
        if not result.clicked:
            warn(f"Could not click add-to-cart for product: {name or label}")
            continue

        dismiss_any_modal_if_visible(page)
        if name:
            names.append(name)
        try:
            page.wait_for_load_state("domcontentloaded")
        except Exception as exc:
            warn(f"Failed to wait for domcontentloaded after adding product: {exc}")
    return names
