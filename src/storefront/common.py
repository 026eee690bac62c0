"""Shared helpers for page objects and interaction modules."""

from __future__ import annotations

import re
from typing import Any


def collapse_ws(value: object) -> str:
    return " ".join(str(value or "").split())


def escape_for_regex(value: str) -> str:
    return re.escape(str(value or ""))


def name_regex(name: str) -> re.Pattern[str]:
    """Case-insensitive, word-bounded pattern for an accessible name."""
    return re.compile(rf"\b{escape_for_regex(name)}\b", flags=re.IGNORECASE)


def partial_regex(text: str, case_insensitive: bool = True) -> re.Pattern[str]:
    flags = re.IGNORECASE if case_insensitive else 0
    return re.compile(escape_for_regex(text), flags=flags)


def brand_label_regex(brands: list[str]) -> re.Pattern[str]:
    alternation = "|".join(escape_for_regex(b) for b in brands)
    return re.compile(rf"Brand\s*:\s*(?:{alternation})", flags=re.IGNORECASE)


def page_is_closed(page: Any | None) -> bool:
    if page is None:
        return True
    checker = getattr(page, "is_closed", None)
    if callable(checker):
        try:
            return bool(checker())
        except Exception:
            return True
    return False


def safe_page_url(page: Any | None) -> str:
    if page_is_closed(page):
        return "<closed>"
    try:
        return str(page.url or "")
    except Exception:
        return "<unknown>"


def safe_count(locator: Any) -> int:
    try:
        return int(locator.count())
    except Exception:
        return 0


def safe_is_visible(locator: Any) -> bool:
    try:
        return bool(locator.is_visible())
    except Exception:
        return False


def safe_text(locator: Any) -> str:
    try:
        return collapse_ws(locator.text_content())
    except Exception:
        return ""
