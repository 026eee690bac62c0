"""Multi-page flows composed from the page objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from storefront.data import PATHS, Payment, QueryItem, RuntimeUser
from storefront.reporting import log_event, step_context, warn

LOGIN_BEFORE_ADD = "before_add"
LOGIN_BEFORE_CHECKOUT = "before_checkout"


@dataclass(frozen=True)
class BrandOrderOptions:
    brands: list[str]
    items_per_brand: int
    payment: Payment
    login: bool = False
    login_at: str = LOGIN_BEFORE_CHECKOUT
    user: RuntimeUser | None = None


def login(auth_page: Any, user: RuntimeUser) -> None:
    with step_context("Login: navigate to login page"):
        auth_page.goto_login()
    with step_context("Login: submit credentials"):
        auth_page.login_existing_user(user.email, user.password)
        log_event("LOGIN", f"user={user.email}")
        if user.name:
            auth_page.assert_logged_in_as(user.name)


def add_first_n_products_for_brands(home_page: Any, brands: Sequence[str], n: int) -> list[str]:
    names: list[str] = []
    with step_context("Arrange: ensure home is loaded"):
        home_page.assert_loaded()
    for brand in brands:
        with step_context(f"Act: add first {n} products for brand: {brand}"):
            names.extend(home_page.add_first_n_products_by_brand(brand, n))
    return names


def open_and_verify_cart(home_page: Any, cart_page: Any, expected_names: Sequence[str]) -> None:
    with step_context("Cart: open from header and verify items"):
        home_page.open_cart_from_header()
        cart_page.wait_for_cart_items_exact_count(len(expected_names), 20000)
        cart_page.assert_products_in_cart(list(expected_names))


def ensure_cart_has_count(products_page: Any, cart_page: Any, expected_count: int, timeout_ms: int = 20000) -> None:
    with step_context(f"Cart: ensure exactly {expected_count} items"):
        products_page.page.goto(PATHS["view_cart"])
        cart_page.wait_for_cart_ready()
        cart_page.wait_for_cart_items_exact_count(expected_count, timeout_ms)


def checkout_and_place_order(cart_page: Any, payment: Payment) -> None:
    """Proceed to checkout and pay; ``place_order`` asserts the confirmation."""
    with step_context("Cart: checkout and place order"):
        cart_page.proceed_to_checkout()
        cart_page.place_order(payment)


def ensure_item_in_cart(products_page: Any, cart_page: Any, name: str, lookup: Sequence[QueryItem]) -> None:
    """Search for ``name`` (mapped through ``lookup`` when known), add it and open the cart."""
    with step_context(f"Cart: ensure item in cart: {name}"):
        lowered = name.lower()
        match = next((item for item in lookup if item.expected_name.lower() == lowered), None)
        query = match.query if match else name
        expected_name = match.expected_name if match else name

        products_page.goto()
        products_page.search(query)
        products_page.assert_results_only_contain(expected_name)
        products_page.add_first_n_products_to_cart_from_products_page(1)
        products_page.page.goto(PATHS["view_cart"])
        cart_page.wait_for_cart_ready()


def run_brand_order_flow(auth_page: Any, home_page: Any, cart_page: Any, options: BrandOrderOptions) -> list[str]:
    """Add products by brand, optionally log in, then check out and pay.

    Returns the product names that were added to the cart.
    """
    if options.login and options.user is None:
        raise ValueError("run_brand_order_flow: user is required when login=True")
    if options.login_at not in (LOGIN_BEFORE_ADD, LOGIN_BEFORE_CHECKOUT):
        raise ValueError(f"run_brand_order_flow: unknown login_at {options.login_at!r}")

    expected: list[str] = []

    with step_context("Arrange: ensure home is loaded"):
        home_page.assert_loaded()

    if options.login and options.login_at == LOGIN_BEFORE_ADD:
        with step_context("Act: login before adding products"):
            login(auth_page, options.user)

    for brand in options.brands:
        with step_context(f"Act: add first {options.items_per_brand} products for brand: {brand}"):
            expected.extend(home_page.add_first_n_products_by_brand(brand, options.items_per_brand))

    if options.login and options.login_at == LOGIN_BEFORE_CHECKOUT:
        with step_context("Act: login before checkout"):
            login(auth_page, options.user)

    with step_context("Assert: open cart and verify selected products are present"):
        home_page.open_cart_from_header()
        try:
            cart_page.wait_for_cart_items_exact_count(len(expected), 15000)
        except RuntimeError as exc:
            warn(str(exc))
        cart_page.assert_products_in_cart(expected)

    with step_context("Checkout: proceed and place order"):
        cart_page.proceed_to_checkout()
        cart_page.place_order(options.payment)

    return expected
