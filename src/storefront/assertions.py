"""Assertion helpers wrapping Playwright's ``expect``."""

from __future__ import annotations

import re
from typing import Any

from playwright.sync_api import expect

from storefront.common import brand_label_regex, safe_is_visible, safe_text


def assert_url_contains(page: Any, value: str | re.Pattern[str], *, timeout_ms: int | None = None) -> None:
    pattern = re.compile(value) if isinstance(value, str) else value
    expect(page).to_have_url(pattern, timeout=timeout_ms)


def assert_title_contains(page: Any, value: str | re.Pattern[str], *, timeout_ms: int | None = None) -> None:
    pattern = re.compile(value, re.IGNORECASE) if isinstance(value, str) else value
    expect(page).to_have_title(pattern, timeout=timeout_ms)


def assert_visible(target: Any, *, timeout_ms: int | None = None) -> None:
    expect(target).to_be_visible(timeout=timeout_ms)


def assert_cards_contain_only_brands(cards: Any, brands: list[str], *, sample: int = 6) -> None:
    """Check the brand label of the first few cards against ``brands``."""
    count = int(cards.count())
    if count <= 0:
        raise AssertionError("Expected at least one product card, found none")
    pattern = brand_label_regex(brands)
    label_re = re.compile(r"Brand\s*:", re.IGNORECASE)
    for index in range(min(sample, count)):
        label = cards.nth(index).get_by_text(label_re).first
        if not safe_is_visible(label):
            continue
        text = safe_text(label)
        if not pattern.search(text):
            raise AssertionError(
                f'Unexpected brand for card #{index + 1}: "{text}" not in [{", ".join(brands)}]'
            )
