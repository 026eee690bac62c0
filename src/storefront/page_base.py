"""Base page object: navigation, ad guards, safe wrappers and the ``step`` decorator."""

from __future__ import annotations

import functools
import inspect
import re
import time
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse

from storefront.assertions import assert_title_contains, assert_url_contains
from storefront.common import name_regex, safe_is_visible
from storefront.config import SuiteConfig
from storefront.constants import AD_DOMAINS, AD_GUARD_CSS
from storefront.polling import wait_for_visible_any
from storefront.reporting import step_context

F = TypeVar("F", bound=Callable[..., Any])


def step(name: str | Callable[..., str] | None = None) -> Callable[[F], F]:
    """Wrap a page-object method in a named, logged step.

    ``name`` may be a string, a callable receiving the method arguments
    positionally (without ``self``, defaults filled in), or omitted to use
    the method name.
    """

    def decorator(fn: F) -> F:
        signature = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            if callable(name):
                bound = signature.bind(self, *args, **kwargs)
                bound.apply_defaults()
                resolved = name(*bound.args[1:])
            else:
                resolved = name or fn.__name__
            with step_context(str(resolved)):
                return fn(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def is_ad_request(url: str) -> bool:
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return False
    return any(domain in host for domain in AD_DOMAINS)


class BasePage:
    def __init__(self, page: Any, config: SuiteConfig | None = None) -> None:
        self.page = page
        self.config = config or SuiteConfig.from_env()
        self._ad_guards_configured = False

    def goto(self, path: str = "/") -> None:
        """Navigate relative to the base URL, retrying with a soft reset."""
        attempts = 3
        for attempt in range(attempts):
            try:
                self.page.goto(path, wait_until="domcontentloaded", timeout=15000)
                return
            except Exception:
                if attempt == attempts - 1:
                    raise
                try:
                    self.page.wait_for_timeout(300)
                    if not re.fullmatch(r"/?", path):
                        self.page.goto("/", wait_until="domcontentloaded", timeout=5000)
                except Exception:
                    pass

    def assert_url_contains(self, value: str | re.Pattern[str]) -> None:
        assert_url_contains(self.page, value)

    def assert_title_contains(self, value: str | re.Pattern[str]) -> None:
        assert_title_contains(self.page, value)

    def name_regex(self, name: str) -> re.Pattern[str]:
        return name_regex(name)

    def wait_for_ready(self, *, network_idle: bool = True, timeout_ms: int = 30000) -> None:
        self.safe_wait_for_load_state("domcontentloaded", timeout_ms=timeout_ms)
        if network_idle:
            self.safe_wait_for_load_state("networkidle", timeout_ms=timeout_ms)

    def wait_for_visible_any(self, locators: list[Any], timeout_ms: int = 12000) -> int:
        return wait_for_visible_any(locators, timeout_ms=timeout_ms)

    # Ad guards

    def disable_banner_interception(self) -> None:
        try:
            self.page.add_style_tag(content=AD_GUARD_CSS)
        except Exception:
            pass

    def _route_ads(self, route: Any) -> None:
        if is_ad_request(route.request.url):
            route.abort()
            return
        route.continue_()

    def setup_ad_guards(self) -> None:
        """Block ad networks once per page and hide ad overlays."""
        if not self.config.ad_guards:
            return
        if not self._ad_guards_configured:
            self._ad_guards_configured = True
            try:
                self.page.route("**/*", self._route_ads)
            except Exception:
                pass
            self.page.on("domcontentloaded", lambda _page: self.disable_banner_interception())
        self.disable_banner_interception()

    # Safe wrappers: never raise, report success as a bool.

    def safe_click(self, locator: Any, *, force: bool = False, timeout_ms: int | None = None) -> bool:
        try:
            locator.click(force=force, timeout=timeout_ms)
            return True
        except Exception:
            return False

    def safe_is_visible(self, locator: Any) -> bool:
        return safe_is_visible(locator)

    def safe_wait_for(self, locator: Any, *, state: str = "visible", timeout_ms: int | None = None) -> bool:
        try:
            locator.wait_for(state=state, timeout=timeout_ms)
            return True
        except Exception:
            return False

    def safe_wait_for_load_state(self, state: str = "load", *, timeout_ms: int | None = None) -> bool:
        try:
            self.page.wait_for_load_state(state, timeout=timeout_ms)
            return True
        except Exception:
            return False

    def safe_wait_for_url(self, pattern: str | re.Pattern[str], *, timeout_ms: int | None = None) -> bool:
        try:
            self.page.wait_for_url(pattern, timeout=timeout_ms)
            return True
        except Exception:
            return False

    def safe_scroll_into_view(self, locator: Any) -> bool:
        try:
            locator.scroll_into_view_if_needed()
            return True
        except Exception:
            return False

    def sleep(self, ms: int) -> None:
        """Sleep without the page so closed pages do not raise."""
        time.sleep(max(0, ms) / 1000.0)
