"""Home page object: header checks, category/brand filters and add-to-cart."""

from __future__ import annotations

import re
from typing import Any

from storefront.assertions import assert_cards_contain_only_brands, assert_visible
from storefront.constants import (
    ADD_TO_CART_IN_CARD,
    FEATURES_ITEMS_CARD,
    HEADER,
    PANEL_COLLAPSE,
    PANEL_TITLE,
    PANEL_TITLE_LINK,
    PANELS,
    PRODUCT_NAME_IN_CARD,
    brand_link,
)
from storefront.data import HOME_LINKS, HOME_TITLE_TEXT, PATHS
from storefront.page_base import BasePage, step
from storefront.product_cards import add_first_n_from_cards


class HomePage(BasePage):
    def __init__(self, page: Any, config: Any = None) -> None:
        super().__init__(page, config)
        self.main_header = page.locator(HEADER)
        self.subscription_text = page.get_by_text("Subscription", exact=False)
        self.product_cards = page.locator(FEATURES_ITEMS_CARD)
        self.categories_text = page.get_by_text("Category", exact=False)
        self.brands_text = page.get_by_text("Brands", exact=False)
        self.header_cart_link = self.main_header.get_by_role(
            "link", name=re.compile("Cart", re.IGNORECASE)
        )

    @step("Open the home page")
    def goto(self, path: str = PATHS["home"]) -> None:
        super().goto(path)
        assert_visible(self.main_header)

    @step("Validate the home page has loaded")
    def assert_loaded(self) -> None:
        host = re.escape(self.config.base_url.split("://", 1)[-1])
        self.assert_url_contains(re.compile(host, re.IGNORECASE))
        self.assert_title_contains(HOME_TITLE_TEXT)
        assert_visible(self.main_header)
        assert_visible(self.subscription_text)

    @step("Assert that header contains all expected navigation links")
    def assert_header_contains(self) -> None:
        assert_visible(self.main_header)
        for link_name in HOME_LINKS:
            assert_visible(
                self.main_header.get_by_role("link", name=self.name_regex(link_name)).first
            )

    @step("Open a category from the left menu")
    def open_category(self, parent_category: str, child_category: str | None = None) -> None:
        assert_visible(self.categories_text.first)
        parent_link = self.page.locator(PANEL_TITLE).get_by_role(
            "link", name=re.compile(re.escape(parent_category), re.IGNORECASE)
        )
        assert_visible(parent_link)
        parent_link.click()

        if child_category:
            child_link = self.page.locator(PANEL_COLLAPSE).get_by_role(
                "link", name=re.compile(re.escape(child_category), re.IGNORECASE)
            ).first
            assert_visible(child_link)
            child_link.click()
            self.safe_wait_for_url(re.compile("category_products", re.IGNORECASE), timeout_ms=10000)
            self.safe_wait_for_load_state("domcontentloaded")

        assert_visible(self.product_cards.first)

    @step("Filter products by brand from the left menu")
    def filter_by_brand(self, brand_name: str) -> None:
        assert_visible(self.brands_text.first)
        self.safe_scroll_into_view(self.brands_text.first)

        brands_title = re.compile("brands", re.IGNORECASE)
        brands_panel = self.page.locator(PANELS).filter(
            has=self.page.locator(PANEL_TITLE_LINK, has_text=brands_title)
        )
        collapse = brands_panel.locator(PANEL_COLLAPSE).first
        if not self.safe_is_visible(collapse):
            title_link = brands_panel.locator(PANEL_TITLE_LINK, has_text=brands_title).first
            self.safe_click(title_link)
            self.safe_wait_for(collapse, state="visible", timeout_ms=5000)

        link = self.page.locator(brand_link(brand_name)).first
        assert_visible(link)
        self.safe_scroll_into_view(link)
        link.click(force=True)
        self.safe_wait_for_load_state("domcontentloaded")
        assert_visible(self.product_cards.first)

    @step("Assert that at least one product card is visible")
    def assert_products_visible(self) -> None:
        assert_visible(self.product_cards.first)

    @step("Assert only the specified brand appears in results")
    def assert_only_brand_in_results(self, brand_name: str) -> None:
        assert_cards_contain_only_brands(self.product_cards, [brand_name])

    @step(lambda brand_names: f"Assert only these brands appear in results: {', '.join(brand_names)}")
    def assert_only_brands_in_results(self, brand_names: list[str]) -> None:
        assert_cards_contain_only_brands(self.product_cards, list(brand_names))

    @step("Add first N products to cart")
    def add_first_n_products_to_cart(self, n: int) -> list[str]:
        return add_first_n_from_cards(
            self.page,
            self.product_cards,
            PRODUCT_NAME_IN_CARD,
            [ADD_TO_CART_IN_CARD],
            n,
        )

    @step(lambda brand_name, n: f'Add first {n} products for brand "{brand_name}"')
    def add_first_n_products_by_brand(self, brand_name: str, n: int) -> list[str]:
        """Filter by brand and add the first ``n`` products, returning their names."""
        self.filter_by_brand(brand_name)
        self.assert_products_visible()
        return self.add_first_n_products_to_cart(n)

    @step("Open cart from header")
    def open_cart_from_header(self) -> None:
        self.header_cart_link.first.click()
