import unittest

from storefront.polling import (
    fill_with_retries,
    poll_until,
    retry,
    sample_stable,
    wait_for_stable_value,
    wait_for_visible_any,
    wait_until,
)

from fakes import FakeClock, FakeLocator


def _sequence(*values):
    items = list(values)

    def _read():
        value = items.pop(0) if len(items) > 1 else items[0]
        if isinstance(value, Exception):
            raise value
        return value

    return _read


class PollUntilTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self._patches = self.clock.install("storefront.polling")
        self._patches.__enter__()

    def tearDown(self) -> None:
        self._patches.__exit__(None, None, None)

    def test_returns_first_accepted_value(self) -> None:
        result = poll_until(_sequence(0, 0, 5), lambda v: v > 0, timeout_ms=1000, interval_ms=100)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 5)
        self.assertEqual(result.attempts, 3)

    def test_read_runs_once_even_with_zero_timeout(self) -> None:
        calls = []
        result = poll_until(lambda: calls.append(1) or False, timeout_ms=0)
        self.assertFalse(result.ok)
        self.assertEqual(len(calls), 1)

    def test_read_errors_are_retried_and_reported(self) -> None:
        result = poll_until(_sequence(RuntimeError("boom"), "ready"), timeout_ms=1000)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, "ready")

        failed = poll_until(_sequence(RuntimeError("still broken")), timeout_ms=300, interval_ms=100)
        self.assertFalse(failed.ok)
        self.assertIn("still broken", failed.last_error)
        self.assertGreater(failed.attempts, 1)

    def test_wait_until_times_out_without_raising(self) -> None:
        self.assertFalse(wait_until(lambda: False, timeout_ms=500, interval_ms=100))
        self.assertLessEqual(sum(self.clock.sleeps), 0.5 + 1e-9)


class SampleStableTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self._patches = self.clock.install("storefront.polling")
        self._patches.__enter__()

    def tearDown(self) -> None:
        self._patches.__exit__(None, None, None)

    def test_two_agreeing_reads_win(self) -> None:
        self.assertEqual(sample_stable(_sequence(1, 2, 2, 9)), 2)

    def test_returns_last_read_without_agreement(self) -> None:
        self.assertEqual(sample_stable(_sequence(1, 2, 3), samples=3), 3)

    def test_error_breaks_the_streak(self) -> None:
        reads = []

        def _read():
            reads.append(1)
            if len(reads) == 2:
                raise RuntimeError("detached")
            return 4

        self.assertEqual(sample_stable(_read, samples=3), 4)
        self.assertEqual(len(reads), 3)

    def test_all_errors_return_fallback(self) -> None:
        self.assertEqual(sample_stable(_sequence(RuntimeError("gone")), fallback=-1), -1)


class WaitForStableValueTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self._patches = self.clock.install("storefront.polling")
        self._patches.__enter__()

    def tearDown(self) -> None:
        self._patches.__exit__(None, None, None)

    def test_mismatch_resets_hits(self) -> None:
        reads = []

        def _read():
            values = [2, 2, 1, 2, 2, 2]
            reads.append(1)
            return values[min(len(reads), len(values)) - 1]

        self.assertTrue(wait_for_stable_value(_read, 2, timeout_ms=5000, required_hits=3))
        self.assertEqual(len(reads), 6)

    def test_read_error_keeps_accumulated_hits(self) -> None:
        reads = []
        values = [3, RuntimeError("navigation interrupted"), 3, 3, 3]

        def _read():
            value = values[len(reads)]
            reads.append(value)
            if isinstance(value, Exception):
                raise value
            return value

        self.assertTrue(wait_for_stable_value(_read, 3, timeout_ms=5000, required_hits=3))
        self.assertEqual(len(reads), 4)

    def test_times_out_when_value_never_settles(self) -> None:
        self.assertFalse(wait_for_stable_value(lambda: 1, 2, timeout_ms=600, interval_ms=150))

    def test_error_callback_and_tick_callback(self) -> None:
        errors = []
        ticks = []
        ok = wait_for_stable_value(
            _sequence(RuntimeError("nav"), 3, 3),
            3,
            timeout_ms=5000,
            required_hits=2,
            interval_ms=150,
            on_error=errors.append,
            on_tick=ticks.append,
        )
        self.assertTrue(ok)
        self.assertEqual(len(errors), 1)
        self.assertEqual(len(ticks), 2)
        self.assertLess(ticks[0], ticks[1])


class RetryAndFillTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self._patches = self.clock.install("storefront.polling")
        self._patches.__enter__()

    def tearDown(self) -> None:
        self._patches.__exit__(None, None, None)

    def test_retry_returns_after_transient_failure(self) -> None:
        self.assertEqual(retry(_sequence(ValueError("flaky"), "ok"), attempts=2), "ok")

    def test_retry_reraises_last_error(self) -> None:
        with self.assertRaisesRegex(ValueError, "second"):
            retry(_sequence(ValueError("first"), ValueError("second")), attempts=2)

    def test_fill_retries_until_field_accepts(self) -> None:
        field = FakeLocator("card")
        field.fill_errors = [RuntimeError("not editable"), RuntimeError("not editable")]
        fill_with_retries(field, "4242", timeout_ms=1000, step_ms=100)
        self.assertEqual(field.fills, ["4242"])

    def test_fill_surfaces_error_after_deadline(self) -> None:
        field = FakeLocator("card")
        field.fill_errors = [RuntimeError("detached")] * 20
        with self.assertRaisesRegex(RuntimeError, "detached"):
            fill_with_retries(field, "4242", timeout_ms=300, step_ms=100)


class WaitForVisibleAnyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self._patches = self.clock.install("storefront.polling")
        self._patches.__enter__()

    def tearDown(self) -> None:
        self._patches.__exit__(None, None, None)

    def test_returns_index_of_visible_locator(self) -> None:
        hidden = FakeLocator("table", visible=False)
        broken = FakeLocator("modal", visible=RuntimeError("detached"))
        shown = FakeLocator("empty", visible=True)
        self.assertEqual(wait_for_visible_any([hidden, broken, shown], timeout_ms=500), 2)

    def test_returns_minus_one_on_timeout(self) -> None:
        self.assertEqual(wait_for_visible_any([FakeLocator(visible=False)], timeout_ms=300), -1)


if __name__ == "__main__":
    unittest.main()
