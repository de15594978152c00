from decimal import Decimal

import pytest

from kushalwear.domain.cart import (
    CartState,
    LineKey,
    clear_items,
    merge_line_item,
    remove_line_item,
    set_line_quantity,
)
from kushalwear.domain.errors import ItemNotFound, ValidationError

PRICE = Decimal("19.99")


def _cart(*adds):
    cart = CartState(user_id="u1")
    for key, qty in adds:
        cart = merge_line_item(cart, key, qty, price=PRICE)
    return cart


def test_same_key_merges_into_one_line():
    key = LineKey("P1", "M", "Black")
    cart = _cart((key, 2), (key, 3))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5


def test_different_size_or_color_is_separate_line():
    cart = _cart(
        (LineKey("P1", "M", "Black"), 1),
        (LineKey("P1", "L", "Black"), 1),
        (LineKey("P1", "M", "White"), 1),
        (LineKey("P1"), 1),
    )
    assert len(cart.items) == 4


def test_merge_does_not_touch_input():
    key = LineKey("P1")
    before = _cart((key, 1))
    after = merge_line_item(before, key, 4, price=PRICE)

    assert before.items[0].quantity == 1
    assert after.items[0].quantity == 5


def test_merge_keeps_first_price_snapshot():
    key = LineKey("P1")
    cart = merge_line_item(CartState(user_id="u1"), key, 1, price=Decimal("10.00"))
    cart = merge_line_item(cart, key, 1, price=Decimal("12.00"))

    assert cart.items[0].price == Decimal("10.00")
    assert cart.total_price == Decimal("20.00")


def test_merge_rejects_non_positive_delta():
    with pytest.raises(ValidationError):
        merge_line_item(CartState(user_id="u1"), LineKey("P1"), 0, price=PRICE)


def test_totals_are_derived_from_lines():
    cart = _cart((LineKey("P1", "S"), 2), (LineKey("P1", "M"), 1))
    assert cart.total_items == 3
    assert cart.total_price == Decimal("59.97")

    cart = remove_line_item(cart, cart.items[0].id)
    assert cart.total_items == 1
    assert cart.total_price == Decimal("19.99")


def test_set_quantity_zero_removes_line():
    cart = _cart((LineKey("P1"), 2))
    cart = set_line_quantity(cart, cart.items[0].id, 0)
    assert cart.items == []


def test_set_quantity_replaces_value():
    cart = _cart((LineKey("P1"), 2))
    cart = set_line_quantity(cart, cart.items[0].id, 7)
    assert cart.items[0].quantity == 7


def test_unknown_item_raises():
    cart = _cart((LineKey("P1"), 1))
    with pytest.raises(ItemNotFound):
        remove_line_item(cart, "missing")
    with pytest.raises(ItemNotFound):
        set_line_quantity(cart, "missing", 3)


def test_clear_items_empties_cart():
    cart = clear_items(_cart((LineKey("P1"), 1), (LineKey("P2"), 1)))
    assert cart.items == []
    assert cart.total_price == Decimal("0.00")
    assert cart.last_updated is not None
