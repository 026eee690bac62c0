"""Cart page object: stable item counts, removal, checkout and payment.

Item counts on this page race against in-flight DOM updates, so every count
used for a decision goes through ``sample_stable`` and exact-count waits go
through ``wait_for_stable_value`` with a periodic reload of the cart view.
"""

from __future__ import annotations

import re
from typing import Any

from playwright.sync_api import expect

from storefront.common import collapse_ws, page_is_closed, partial_regex, safe_count, safe_page_url
from storefront.constants import (
    AUTH_URL_RE,
    CARD_NUMBER,
    CART_DELETE_BUTTONS,
    CART_DELETE_IN_ROW,
    CART_PRODUCT_NAME,
    CART_TABLE,
    CHECKOUT_FALLBACK,
    CHECKOUT_LOGIN_MODAL,
    CHECKOUT_OUTCOME_URL_RE,
    CHECKOUT_URL_RE,
    CVC,
    EXPIRY_MONTH,
    EXPIRY_YEAR,
    NAME_ON_CARD,
    ORDER_PLACED_TEXT,
    PAY_BUTTON,
    PLACE_ORDER_NAME,
    VIEW_CART_URL_RE,
)
from storefront.data import PATHS, Payment
from storefront.interactions import try_click_with_fallback
from storefront.page_base import BasePage, step
from storefront.polling import (
    fill_with_retries,
    poll_until,
    retry,
    sample_stable,
    wait_for_stable_value,
    wait_for_visible_any,
    wait_until,
)
from storefront.recovery import PAYMENT_TARGET, PageRecoveryError, context_of, recover_page


class CartPage(BasePage):
    refresh_interval_ms = 1000

    def __init__(self, page: Any, config: Any = None) -> None:
        super().__init__(page, config)
        self.cart_table = page.locator(CART_TABLE)
        self.cart_item_rows = page.locator(f"{CART_TABLE} tbody tr")
        self.product_name_cells = page.locator(CART_PRODUCT_NAME)
        self.visible_product_name_cells = page.locator(f"{CART_PRODUCT_NAME}:visible")
        self.product_rows = page.locator(f"{CART_TABLE} tbody tr:has({CART_PRODUCT_NAME})")
        self.visible_product_rows = page.locator(
            f"{CART_TABLE} tbody tr:has({CART_PRODUCT_NAME}:visible)"
        )
        self.empty_cart_message = page.get_by_text(re.compile("Cart is empty!", re.IGNORECASE))
        self.delete_buttons = page.locator(CART_DELETE_BUTTONS)
        self.x_delete_links = page.get_by_role("link", name=re.compile(r"^x$", re.IGNORECASE))

        proceed = re.compile("proceed to checkout", re.IGNORECASE)
        self.checkout_link = page.get_by_role("link", name=proceed)
        self.checkout_button = page.get_by_role("button", name=proceed)
        self.checkout_fallback = page.locator(CHECKOUT_FALLBACK)

        self.place_order_link = page.get_by_role("link", name=PLACE_ORDER_NAME)
        self.place_order_button = page.get_by_role("button", name=PLACE_ORDER_NAME)

        self.name_on_card_input = page.locator(NAME_ON_CARD)
        self.card_number_input = page.locator(CARD_NUMBER)
        self.cvc_input = page.locator(CVC)
        self.expiry_month_input = page.locator(EXPIRY_MONTH)
        self.expiry_year_input = page.locator(EXPIRY_YEAR)
        self.pay_button = page.locator(PAY_BUTTON)

        self.login_required_text = page.get_by_text(
            re.compile(
                r"register\s*/\s*login|login is required|please login|account to proceed",
                re.IGNORECASE,
            )
        )
        self.login_or_signup_header_text = page.get_by_text(
            re.compile("login to your account|new user signup", re.IGNORECASE)
        )
        self.checkout_login_modal = page.locator(CHECKOUT_LOGIN_MODAL)
        self.register_login_link = page.locator('a[href="/login"]').or_(
            page.get_by_role("link", name=re.compile(r"register\s*/\s*login|register|login", re.IGNORECASE))
        )
        self._last_refresh_tick = -1

    # Internal readers

    def _visible_item_count(self) -> int:
        if page_is_closed(self.page):
            return 0
        try:
            visible = int(self.visible_product_rows.count())
            if visible > 0:
                return visible
            return int(self.product_rows.count())
        except Exception:
            return 0

    def stable_item_count(self, samples: int = 3, delay_ms: int = 75) -> int:
        """Visible row count once two consecutive reads agree."""
        if page_is_closed(self.page):
            return 0
        return int(sample_stable(self._visible_item_count, samples=samples, delay_ms=delay_ms, fallback=0))

    def visible_product_names(self) -> list[str]:
        cells = self.visible_product_name_cells
        if not safe_count(cells):
            cells = self.product_name_cells
        names: list[str] = []
        for index in range(safe_count(cells)):
            cell = cells.nth(index)
            try:
                text = cell.inner_text()
            except Exception:
                try:
                    text = cell.text_content() or ""
                except Exception:
                    text = ""
            name = collapse_ws(text)
            if name:
                names.append(name)
        return names

    def _wait_for_cart_ready_signals(self, timeout_ms: int = 12000) -> bool:
        index = wait_for_visible_any(
            [self.cart_table, self.empty_cart_message.first],
            timeout_ms=timeout_ms,
        )
        return index >= 0

    def ensure_cart_page_ready(self) -> None:
        """Navigate to the cart if needed and wait for the table or the empty message."""
        if page_is_closed(self.page):
            return
        for _attempt in range(3):
            try:
                if not VIEW_CART_URL_RE.search(str(self.page.url or "")):
                    self.page.goto(PATHS["view_cart"], wait_until="domcontentloaded")
            except Exception:
                pass
            self.safe_wait_for_load_state("domcontentloaded")
            if self._wait_for_cart_ready_signals(8000):
                return
            if page_is_closed(self.page):
                return
            self.sleep(150)

    def _refresh_if_due(self, elapsed_ms: int) -> None:
        tick = elapsed_ms // self.refresh_interval_ms
        if tick <= self._last_refresh_tick:
            return
        self._last_refresh_tick = tick
        try:
            self.page.goto(PATHS["view_cart"], wait_until="domcontentloaded")
        except Exception:
            pass
        self.ensure_cart_page_ready()

    def wait_for_count_to_equal(self, expected: int, timeout_ms: int = 25000, required_hits: int = 3) -> bool:
        self.ensure_cart_page_ready()
        self._last_refresh_tick = -1
        return wait_for_stable_value(
            self.stable_item_count,
            expected,
            timeout_ms=timeout_ms,
            required_hits=required_hits,
            interval_ms=150,
            on_error=lambda _exc: self.ensure_cart_page_ready(),
            on_tick=self._refresh_if_due,
        )

    def _count_timeout_error(self, expected: int) -> RuntimeError:
        self.ensure_cart_page_ready()
        current = self.stable_item_count()
        names = self.visible_product_names()
        return RuntimeError(
            f"Timed out waiting for cart to have {expected} items. "
            f"Got {current}. Items: {', '.join(names)}"
        )

    # Public steps

    @step("Open the cart page")
    def goto(self, path: str = PATHS["view_cart"]) -> None:
        super().goto(path)
        self.ensure_cart_page_ready()

    @step("Wait for cart view to be ready")
    def wait_for_cart_ready(self) -> None:
        self.ensure_cart_page_ready()

    @step("Assert products in cart")
    def assert_products_in_cart(self, expected_names: list[str]) -> None:
        self.ensure_cart_page_ready()
        names = self.visible_product_names()
        if not names:

            def _read_names() -> list[str]:
                self.ensure_cart_page_ready()
                return self.visible_product_names()

            names = poll_until(_read_names, timeout_ms=4000, interval_ms=150).value or []
        for expected in expected_names:
            pattern = partial_regex(expected)
            if not any(pattern.search(name) for name in names):
                raise AssertionError(
                    f'Expected to find product containing "{expected}" in cart, '
                    f"but it was not found. Got: {', '.join(names)}"
                )

    @step("Assert cart has at least N items")
    def assert_cart_items_count(self, min_expected: int) -> None:
        self.ensure_cart_page_ready()
        try:
            count = int(self.visible_product_rows.count())
        except Exception:
            self.ensure_cart_page_ready()
            count = int(self.visible_product_rows.count())
        if count < min_expected:
            raise AssertionError(f"Expected at least {min_expected} cart items, found {count}")

    @step("Assert cart is empty")
    def assert_cart_empty(self, timeout_ms: int = 15000) -> None:
        self.ensure_cart_page_ready()

        def _is_empty() -> bool:
            if self.safe_is_visible(self.empty_cart_message.first):
                return True
            return self.stable_item_count() == 0

        if wait_until(_is_empty, timeout_ms=timeout_ms, interval_ms=150):
            return
        remaining = self.stable_item_count()
        raise AssertionError(f"Expected empty cart but found {remaining} item(s).")

    @step("Assert cart has exactly N items")
    def assert_cart_items_exact_count(self, expected: int) -> None:
        if expected == 0:
            self.assert_cart_empty()
            return
        if self.wait_for_count_to_equal(expected, 15000, 3):
            return
        raise self._count_timeout_error(expected)

    @step(lambda expected, timeout_ms=20000: f"Wait until cart has exactly {expected} items")
    def wait_for_cart_items_exact_count(self, expected: int, timeout_ms: int = 20000) -> None:
        if self.wait_for_count_to_equal(expected, timeout_ms, 3):
            return
        raise self._count_timeout_error(expected)

    @step("Get cart items count")
    def get_cart_items_count(self) -> int:
        if page_is_closed(self.page):
            return 0
        self.ensure_cart_page_ready()

        def _read() -> int:
            if page_is_closed(self.page):
                return 0
            return int(self.visible_product_rows.count())

        try:
            return retry(_read, attempts=2, delay_ms=150)
        except Exception:
            return 0

    @step("Remove first cart item matching product name")
    def remove_product_by_name(self, name_fragment: str) -> None:
        self.ensure_cart_page_ready()
        before = self.stable_item_count()
        pattern = partial_regex(name_fragment)
        for index in range(safe_count(self.cart_item_rows)):
            row = self.cart_item_rows.nth(index)
            name_cell = row.locator(CART_PRODUCT_NAME).first
            if not safe_count(name_cell):
                continue
            text = collapse_ws(name_cell.text_content())
            if not pattern.search(text):
                continue
            row.locator(CART_DELETE_IN_ROW).or_(
                row.get_by_role("link", name=re.compile(r"^x$", re.IGNORECASE))
            ).first.click()
            self.safe_wait_for_load_state("domcontentloaded")
            wait_until(
                lambda: self.stable_item_count() <= max(0, before - 1),
                timeout_ms=5000,
                interval_ms=100,
            )
            return
        raise RuntimeError(f"Product not found in cart to remove: {name_fragment}")

    @step("Remove first item from cart")
    def remove_first_item(self) -> None:
        self.ensure_cart_page_ready()
        before = self.stable_item_count()
        if before == 0:
            return
        delete_button = self.delete_buttons.first.or_(self.x_delete_links.first)
        if not safe_count(delete_button):
            return
        try_click_with_fallback(delete_button.first)
        self.wait_for_count_to_equal(max(0, before - 1), 5000, 2)

    @step("Remove all items from cart")
    def remove_all_items(self, max_iterations: int = 50) -> None:
        self.ensure_cart_page_ready()
        if self.safe_is_visible(self.empty_cart_message.first):
            return
        for _iteration in range(max_iterations):
            if safe_count(self.product_rows) == 0:
                break
            delete_button = self.delete_buttons.first.or_(self.x_delete_links.first)
            if not safe_count(delete_button):
                break
            rows_before = safe_count(self.product_rows)
            self.safe_click(delete_button.first, force=True)
            wait_until(lambda: safe_count(self.product_rows) < rows_before, timeout_ms=5000, interval_ms=100)
            self.safe_wait_for_load_state("domcontentloaded")
            if self.safe_is_visible(self.empty_cart_message.first):
                break
        remaining = self.stable_item_count()
        if remaining > 0 and not self.safe_is_visible(self.empty_cart_message.first):
            raise RuntimeError(f"Cart not empty after removal. Remaining items: {remaining}")

    @step("Proceed to checkout from cart")
    def proceed_to_checkout(self, timeout_ms: int = 20000) -> None:
        if safe_count(self.checkout_link):
            self.checkout_link.first.click()
        elif safe_count(self.checkout_button):
            self.checkout_button.first.click()
        else:
            self.checkout_fallback.first.click()

        def _outcome_reached() -> bool:
            if CHECKOUT_OUTCOME_URL_RE.search(str(self.page.url or "")):
                return True
            return any(
                self.safe_is_visible(locator.first)
                for locator in (
                    self.login_or_signup_header_text,
                    self.checkout_login_modal,
                    self.register_login_link,
                )
            )

        wait_until(_outcome_reached, timeout_ms=timeout_ms, interval_ms=150)
        self.safe_wait_for_load_state("networkidle")

    def _recover_payment_page(self) -> Any:
        context = context_of(self.page)
        if context is None:
            raise PageRecoveryError(
                f"No browser context to search for {PAYMENT_TARGET.description}"
            )
        return recover_page(context, PAYMENT_TARGET, exclude=self.page)

    def _adopt(self, page: Any) -> "CartPage":
        return CartPage(page, self.config)

    def _place_order_elsewhere(self, payment: Payment, reason: str, recovered: bool) -> None:
        if recovered:
            raise PageRecoveryError(f"Cannot place order: {reason} (already recovered once)")
        try:
            replacement = self._recover_payment_page()
        except PageRecoveryError as exc:
            raise PageRecoveryError(f"Cannot place order: {reason}. {exc}") from exc
        self._adopt(replacement).place_order(payment, True)

    @step("Place order with payment details")
    def place_order(self, payment: Payment, _recovered: bool = False) -> None:
        """Fill the payment form and submit it.

        If the active tab closed or never showed the payment form, the newest
        tab that looks like checkout/payment is adopted once.
        """
        if page_is_closed(self.page):
            self._place_order_elsewhere(payment, "page is already closed", _recovered)
            return

        trigger = self.place_order_link.or_(self.place_order_button)
        if safe_count(trigger) > 0:
            self.safe_click(trigger.first, force=True)
            self.safe_wait_for_load_state("domcontentloaded")

        if page_is_closed(self.page):
            self._place_order_elsewhere(payment, "page closed after Place Order", _recovered)
            return

        form_index = wait_for_visible_any(
            [self.name_on_card_input, self.card_number_input, self.pay_button],
            timeout_ms=8000,
        )
        if form_index < 0:
            self._place_order_elsewhere(
                payment, f"payment form not visible at {safe_page_url(self.page)}", _recovered
            )
            return

        fill_with_retries(self.name_on_card_input, payment.name_on_card)
        fill_with_retries(self.card_number_input, payment.card_number)
        fill_with_retries(self.cvc_input, payment.cvc)
        fill_with_retries(self.expiry_month_input, payment.expiry_month)
        fill_with_retries(self.expiry_year_input, payment.expiry_year)

        self.pay_button.click()
        expect(self.page.get_by_text(ORDER_PLACED_TEXT, exact=False).first).to_be_visible()

    @step("Assert checkout prompts for login")
    def assert_checkout_requires_login(self, timeout_ms: int = 15000) -> None:
        def _prompted() -> bool:
            url = str(self.page.url or "")
            if AUTH_URL_RE.search(url):
                return True
            if (
                self.safe_is_visible(self.login_or_signup_header_text.first)
                or self.safe_is_visible(self.checkout_login_modal.first)
                or self.safe_is_visible(self.login_required_text.first)
            ):
                return True
            return bool(CHECKOUT_URL_RE.search(url)) and safe_count(self.register_login_link) > 0

        if wait_until(_prompted, timeout_ms=timeout_ms, interval_ms=150):
            return
        raise AssertionError(
            f"Expected checkout to require login, but no prompt was detected. URL: {safe_page_url(self.page)}"
        )
