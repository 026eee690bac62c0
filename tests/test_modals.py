import unittest

from storefront.constants import ANY_VISIBLE_MODAL, CART_MODAL, MODAL_CONTAINER
from storefront.modals import any_modal_visible, dismiss_any_modal_if_visible

from fakes import FakeLocator, FakePage


def _page_with_modal(*, dismiss_button: bool) -> tuple[FakePage, FakeLocator]:
    page = FakePage()
    page.locators[CART_MODAL] = FakeLocator(CART_MODAL, visible=True)
    container = FakeLocator(MODAL_CONTAINER)
    button = FakeLocator("continue", count=1 if dismiss_button else 0)
    container.children["role=button"] = button
    page.locators[MODAL_CONTAINER] = container
    return page, button


class DismissModalTests(unittest.TestCase):
    def test_no_modal_is_a_no_op(self) -> None:
        page = FakePage()
        self.assertFalse(any_modal_visible(page))
        self.assertFalse(dismiss_any_modal_if_visible(page))
        self.assertEqual(page.keyboard.pressed, [])
        self.assertEqual(page.locators[CART_MODAL].waits, [])

    def test_clicks_continue_shopping_when_present(self) -> None:
        page, button = _page_with_modal(dismiss_button=True)
        self.assertTrue(dismiss_any_modal_if_visible(page, hide_timeout_ms=1000))
        self.assertEqual(len(button.clicks), 1)
        self.assertEqual(page.keyboard.pressed, [])
        self.assertEqual(page.locators[CART_MODAL].waits, [("hidden", 1000)])

    def test_presses_escape_without_dismiss_button(self) -> None:
        page, button = _page_with_modal(dismiss_button=False)
        self.assertTrue(dismiss_any_modal_if_visible(page))
        self.assertEqual(button.clicks, [])
        self.assertEqual(page.keyboard.pressed, ["Escape"])

    def test_generic_modal_counts_as_visible(self) -> None:
        page = FakePage()
        page.locators[ANY_VISIBLE_MODAL] = FakeLocator(ANY_VISIBLE_MODAL, visible=True)
        self.assertTrue(any_modal_visible(page))


if __name__ == "__main__":
    unittest.main()
