import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from storefront.page_base import step
from storefront.reporting import step_context, step_log_path, tail_lines, warn, write_failure_summary


class _Page:
    @step("Open the cart page")
    def open(self) -> str:
        return "opened"

    @step(lambda brand, n: f'Add first {n} products for brand "{brand}"')
    def add(self, brand: str, n: int) -> int:
        return n

    @step(lambda brands: f"Assert only these brands appear: {', '.join(brands)}")
    def check_brands(self, brand_names: list[str]) -> list[str]:
        return brand_names

    @step(lambda expected, timeout_ms: f"Wait for {expected} items within {timeout_ms}ms")
    def wait_items(self, expected: int, timeout_ms: int = 20000) -> int:
        return expected

    @step()
    def unnamed(self) -> None:
        raise ValueError("selector not found")


class StepLogTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self._env = patch.dict(os.environ, {"STOREFRONT_RESULTS_DIR": self._tmp.name})
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def _log(self) -> list[str]:
        return tail_lines(step_log_path(), 50)

    def test_step_context_logs_start_and_end(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            with step_context("Open the home page"):
                pass
        self.assertIn("STEP: Open the home page", out.getvalue())
        lines = self._log()
        self.assertEqual(len(lines), 2)
        self.assertIn("START Open the home page", lines[0])
        self.assertIn("END Open the home page", lines[1])

    def test_step_context_logs_failure_and_reraises(self) -> None:
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(AssertionError):
                with step_context("Assert cart is empty"):
                    raise AssertionError("2 items left")
        self.assertIn("FAIL Assert cart is empty", self._log()[-1])
        self.assertIn("2 items left", self._log()[-1])

    def test_step_decorator_names(self) -> None:
        page = _Page()
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(page.open(), "opened")
            self.assertEqual(page.add("Polo", 2), 2)
            with self.assertRaises(ValueError):
                page.unnamed()
        printed = out.getvalue()
        self.assertIn("STEP: Open the cart page", printed)
        self.assertIn('STEP: Add first 2 products for brand "Polo"', printed)
        self.assertIn("STEP: unnamed", printed)
        self.assertEqual(_Page.open.__name__, "open")

    def test_step_name_accepts_keyword_calls(self) -> None:
        page = _Page()
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(page.check_brands(brand_names=["Polo", "H&M"]), ["Polo", "H&M"])
            self.assertEqual(page.add(brand="Madame", n=3), 3)
            self.assertEqual(page.wait_items(expected=2), 2)
        printed = out.getvalue()
        self.assertIn("STEP: Assert only these brands appear: Polo, H&M", printed)
        self.assertIn('STEP: Add first 3 products for brand "Madame"', printed)
        self.assertIn("STEP: Wait for 2 items within 20000ms", printed)

    def test_failure_summary_carries_error_and_step_tail(self) -> None:
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(AssertionError):
                with step_context("Assert cart is empty"):
                    raise AssertionError("2 items left")
        path = write_failure_summary(
            "tests/e2e/test_cart_brand_flow.py::test_brand_order[Polo]",
            "AssertionError: 2 items left",
            tail=1,
        )
        self.assertEqual(path.parent, Path(self._tmp.name, "failures"))
        self.assertEqual(path.name, "tests_e2e_test_cart_brand_flow.py_test_brand_order_Polo.json")
        summary = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(summary["error"], "AssertionError: 2 items left")
        self.assertEqual(len(summary["steps"]), 1)
        self.assertIn("FAIL Assert cart is empty", summary["steps"][0])

    def test_warn_prints_and_logs(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            warn("Could not click add-to-cart for product: Blue Top")
        self.assertIn("[WARN] Could not click", out.getvalue())
        self.assertIn("WARN Could not click", self._log()[-1])
        self.assertTrue(Path(self._tmp.name, "steps.log").exists())


if __name__ == "__main__":
    unittest.main()
