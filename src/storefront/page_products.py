"""Products page object: search and add-to-cart from the product grid."""

from __future__ import annotations

import re
from typing import Any

from storefront.assertions import assert_visible
from storefront.common import collapse_ws, partial_regex
from storefront.constants import (
    FEATURES_ITEMS_CARD,
    HEADER,
    INFO_ADD_IN_CARD,
    OVERLAY_ADD_IN_CARD,
    PRODUCT_NAME_IN_CARD,
    SEARCH_BUTTON,
    SEARCH_INPUT,
    SEARCH_INPUT_FALLBACK,
)
from storefront.data import PATHS
from storefront.modals import dismiss_any_modal_if_visible
from storefront.page_base import BasePage, step
from storefront.product_cards import add_first_n_from_cards


class ProductsPage(BasePage):
    def __init__(self, page: Any, config: Any = None) -> None:
        super().__init__(page, config)
        self.main_header = page.locator(HEADER)
        self.products_header = page.get_by_text("All Products", exact=False)
        self.search_input = page.locator(SEARCH_INPUT).or_(page.locator(SEARCH_INPUT_FALLBACK))
        self.search_button = page.locator(SEARCH_BUTTON).or_(
            page.get_by_role("button", name=re.compile("Search", re.IGNORECASE))
        )
        self.searched_products_header = page.get_by_text("Searched Products", exact=False)
        self.product_cards = page.locator(FEATURES_ITEMS_CARD)

    def dismiss_cart_modal_if_visible(self) -> bool:
        return dismiss_any_modal_if_visible(self.page)

    @step("Open the products page")
    def goto(self, path: str = PATHS["products"]) -> None:
        self.setup_ad_guards()
        super().goto(path)
        self.wait_for_ready()
        assert_visible(self.products_header.first)

    @step("Execute a search using the products search box")
    def search(self, query: str) -> None:
        self.dismiss_cart_modal_if_visible()
        assert_visible(self.search_input.first)
        self.search_input.first.fill(query)
        self.dismiss_cart_modal_if_visible()
        assert_visible(self.search_button.first)
        self.search_button.first.click()
        self.wait_for_visible_any(
            [self.searched_products_header.first, self.product_cards.first],
            timeout_ms=7000,
        )

    @step("Assert that search results only contain the expected product name")
    def assert_results_only_contain(self, expected_name: str) -> None:
        count = int(self.product_cards.count())
        if count == 0:
            raise AssertionError("No products found in search results")
        pattern = partial_regex(expected_name)
        for index in range(count):
            actual = collapse_ws(
                self.product_cards.nth(index).locator(PRODUCT_NAME_IN_CARD).first.inner_text()
            )
            if not pattern.search(actual):
                raise AssertionError(
                    f'Unexpected product in results: "{actual}" does not match "{expected_name}"'
                )

    @step("Add first N products to cart from products grid")
    def add_first_n_products_to_cart_from_products_page(self, n: int) -> list[str]:
        self.setup_ad_guards()
        return add_first_n_from_cards(
            self.page,
            self.product_cards,
            PRODUCT_NAME_IN_CARD,
            [OVERLAY_ADD_IN_CARD, INFO_ADD_IN_CARD],
            n,
            role_fallback=False,
        )
