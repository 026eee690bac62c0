"""Step log and artifact helpers for suite runs."""

from __future__ import annotations

import json
import re
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from storefront.config import SuiteConfig


def results_dir() -> Path:
    return SuiteConfig.from_env().results_dir


def step_log_path() -> Path:
    return results_dir() / "steps.log"


def append_log(path: Path, message: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(message.rstrip() + "\n")


def write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def tail_lines(path: Path, count: int) -> list[str]:
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    return lines[-count:]


def _stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def write_failure_summary(test_id: str, error: str, *, tail: int = 40) -> Path:
    """Write ``<results>/failures/<test>.json`` with the error and the step log tail."""
    slug = re.sub(r"[^\w.-]+", "_", test_id).strip("_") or "test"
    path = results_dir() / "failures" / f"{slug}.json"
    write_json(
        path,
        {
            "test": test_id,
            "error": error,
            "recorded_at": _stamp(),
            "steps": tail_lines(step_log_path(), tail),
        },
    )
    return path


def log_event(kind: str, message: str) -> None:
    try:
        append_log(step_log_path(), f"{_stamp()} {kind} {message}")
    except OSError:
        return


def warn(message: str) -> None:
    print(f"[WARN] {message}", flush=True)
    log_event("WARN", message)


@contextmanager
def step_context(name: str) -> Iterator[None]:
    print(f"STEP: {name}", flush=True)
    log_event("START", name)
    started = time.monotonic()
    try:
        yield
    except BaseException as exc:
        elapsed_ms = int((time.monotonic() - started) * 1000)
        log_event("FAIL", f"{name} ({elapsed_ms}ms): {type(exc).__name__}: {exc}")
        raise
    elapsed_ms = int((time.monotonic() - started) * 1000)
    log_event("END", f"{name} ({elapsed_ms}ms)")
