import unittest
from unittest.mock import patch

from storefront.constants import INFO_ADD_IN_CARD, PRODUCT_NAME_IN_CARD
from storefront.product_cards import add_first_n_from_cards, add_to_cart_candidates, card_name

from fakes import FakeLocator, FakePage


class _Card(FakeLocator):
    def __init__(self, name: str, *, clickable: bool = True):
        super().__init__(name)
        self.children[PRODUCT_NAME_IN_CARD] = FakeLocator(PRODUCT_NAME_IN_CARD, text=f"  {name}\n")
        self.add_button = FakeLocator(INFO_ADD_IN_CARD, count=1 if clickable else 0)
        self.children[INFO_ADD_IN_CARD] = self.add_button


class _Cards:
    def __init__(self, cards):
        self._cards = cards

    def count(self) -> int:
        return len(self._cards)

    def nth(self, index: int):
        return self._cards[index]


class ProductCardTests(unittest.TestCase):
    def test_card_name_collapses_whitespace(self) -> None:
        self.assertEqual(card_name(_Card("Blue Top"), PRODUCT_NAME_IN_CARD), "Blue Top")

    def test_role_fallback_adds_link_and_button_candidates(self) -> None:
        card = _Card("Blue Top")
        self.assertEqual(len(add_to_cart_candidates(card, [INFO_ADD_IN_CARD])), 3)
        self.assertEqual(len(add_to_cart_candidates(card, [INFO_ADD_IN_CARD], role_fallback=False)), 1)

    def test_adds_first_n_and_skips_unclickable_cards(self) -> None:
        cards = [_Card("Blue Top"), _Card("Men Tshirt", clickable=False), _Card("Sleeveless Dress"), _Card("Extra")]
        with patch("storefront.product_cards.warn") as warn:
            names = add_first_n_from_cards(
                FakePage(),
                _Cards(cards),
                PRODUCT_NAME_IN_CARD,
                [INFO_ADD_IN_CARD],
                2,
                click_timeout_ms=0,
                settle_ms=0,
                role_fallback=False,
            )
        self.assertEqual(names, ["Blue Top", "Sleeveless Dress"])
        self.assertEqual(cards[3].add_button.clicks, [])
        warn.assert_called_once_with("Could not click add-to-cart for product: Men Tshirt")

    def test_returns_fewer_names_when_grid_is_short(self) -> None:
        names = add_first_n_from_cards(
            FakePage(),
            _Cards([_Card("Blue Top")]),
            PRODUCT_NAME_IN_CARD,
            [INFO_ADD_IN_CARD],
            3,
            click_timeout_ms=0,
            settle_ms=0,
        )
        self.assertEqual(names, ["Blue Top"])


if __name__ == "__main__":
    unittest.main()
