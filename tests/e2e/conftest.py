"""
Page-object fixtures for the live storefront suite.

Built on pytest-playwright: ``page`` and ``context`` come from the plugin,
this module wires the base URL, default timeouts and ad guards.
"""

import os
import re
import time

import pytest
from playwright.sync_api import expect

from storefront.config import SuiteConfig
from storefront.data import generate_signup_user
from storefront.page_auth import AuthPage
from storefront.page_base import BasePage
from storefront.page_cart import CartPage
from storefront.page_home import HomePage
from storefront.page_products import ProductsPage
from storefront.reporting import warn, write_failure_summary


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return
    error = call.excinfo.exconly() if call.excinfo is not None else report.longreprtext
    try:
        write_failure_summary(item.nodeid, error)
    except OSError as exc:
        warn(f"Could not write failure summary for {item.nodeid}: {exc}")


@pytest.fixture(scope="session")
def suite_config():
    return SuiteConfig.from_env()


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args, suite_config):
    expect.set_options(timeout=suite_config.expect_timeout_ms)
    return {
        **browser_context_args,
        "base_url": suite_config.base_url,
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }


@pytest.fixture()
def configured_page(page, suite_config):
    page.set_default_timeout(suite_config.action_timeout_ms)
    page.set_default_navigation_timeout(suite_config.navigation_timeout_ms)
    return page


def _guarded(page_object):
    page_object.setup_ad_guards()
    return page_object


@pytest.fixture()
def base_page(configured_page, suite_config):
    return _guarded(BasePage(configured_page, suite_config))


@pytest.fixture()
def home_page(configured_page, suite_config):
    return _guarded(HomePage(configured_page, suite_config))


@pytest.fixture()
def products_page(configured_page, suite_config):
    return _guarded(ProductsPage(configured_page, suite_config))


@pytest.fixture()
def cart_page(configured_page, suite_config):
    return _guarded(CartPage(configured_page, suite_config))


@pytest.fixture()
def auth_page(configured_page, suite_config):
    return _guarded(AuthPage(configured_page, suite_config))


@pytest.fixture()
def unique_test_suffix(request, worker_index):
    title = re.sub(r"\W+", "-", request.node.name).strip("-")
    return f"{worker_index}-{title}-{int(time.time() * 1000)}"


@pytest.fixture(scope="session")
def worker_index():
    worker = os.getenv("PYTEST_XDIST_WORKER", "gw0")
    digits = re.sub(r"\D", "", worker)
    return int(digits or 0)


@pytest.fixture(scope="session")
def unique_worker_suffix(worker_index):
    return f"w{worker_index}-{int(time.time() * 1000)}"


@pytest.fixture()
def ephemeral_user(auth_page, unique_test_suffix):
    """Sign up a fresh account, yield its credentials and delete it afterwards."""
    signup = generate_signup_user(unique_test_suffix)
    auth_page.goto_signup()
    auth_page.signup_new_user(signup, auto_continue=True)
    user = signup.runtime_user()
    yield user
    try:
        auth_page.delete_account(continue_after=True)
    except Exception as exc:
        warn(f"Could not delete ephemeral account {user.email}: {exc}")
