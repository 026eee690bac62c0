"""Environment-driven configuration for the storefront suite."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "https://automationexercise.com"


@dataclass(frozen=True)
class SuiteConfig:
    base_url: str = DEFAULT_BASE_URL
    action_timeout_ms: int = 20000
    navigation_timeout_ms: int = 60000
    expect_timeout_ms: int = 30000
    results_dir: Path = Path("test-results")
    e2e_enabled: bool = False
    ad_guards: bool = True

    @classmethod
    def from_env(cls) -> "SuiteConfig":
        base_url = str(os.getenv("STOREFRONT_BASE_URL", "") or "").strip() or DEFAULT_BASE_URL
        results_raw = str(os.getenv("STOREFRONT_RESULTS_DIR", "") or "").strip()
        return cls(
            base_url=base_url.rstrip("/"),
            action_timeout_ms=_env_int("STOREFRONT_ACTION_TIMEOUT_MS", 20000, minimum=1000),
            navigation_timeout_ms=_env_int("STOREFRONT_NAVIGATION_TIMEOUT_MS", 60000, minimum=1000),
            expect_timeout_ms=_env_int("STOREFRONT_EXPECT_TIMEOUT_MS", 30000, minimum=500),
            results_dir=Path(results_raw) if results_raw else Path("test-results"),
            e2e_enabled=_env_flag("STOREFRONT_E2E", False),
            ad_guards=_env_flag("STOREFRONT_AD_GUARDS", True),
        )


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = str(os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        value = int(float(raw))
    except ValueError:
        return default
    return max(minimum, value)


def _env_flag(name: str, default: bool) -> bool:
    raw = str(os.getenv(name, "") or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}
