"""Tests for the Cart record — merging, quantities and totals."""

import pytest
from protean.exceptions import ValidationError

from bitshub.catalogue.product import Product, ProductSnapshot
from bitshub.ordering.cart.cart import Cart, CartItem


def _make_product(product_id="p-1", price=10.0):
    return ProductSnapshot(id=product_id, name=f"Product {product_id}", price=price, category="accessories")


class TestAddItem:
    def test_first_add_creates_item_with_quantity_one(self):
        cart = Cart()
        cart.add_item(_make_product())
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1

    def test_adding_same_product_merges(self):
        cart = Cart()
        product = _make_product()
        cart.add_item(product)
        cart.add_item(product)
        cart.add_item(product)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_item_keeps_snapshot_of_product(self):
        cart = Cart()
        product = Product.from_snapshot(_make_product(price=10.0))
        cart.add_item(product.snapshot())
        product.price = 99.0
        assert cart.items[0].product.price == 10.0

    def test_one_line_per_distinct_product(self):
        cart = Cart()
        for product_id in ("a", "b", "a", "c", "b"):
            cart.add_item(_make_product(product_id))
        assert [i.product.id for i in cart.items] == ["a", "b", "c"]


class TestUpdateQuantity:
    def test_sets_quantity(self):
        cart = Cart()
        cart.add_item(_make_product())
        cart.update_item_quantity("p-1", 5)
        assert cart.items[0].quantity == 5

    def test_zero_removes_item(self):
        cart = Cart()
        cart.add_item(_make_product())
        cart.update_item_quantity("p-1", 0)
        assert cart.items == []

    def test_unknown_product_is_ignored(self):
        cart = Cart()
        cart.add_item(_make_product())
        cart.update_item_quantity("other", 4)
        assert cart.items[0].quantity == 1

    def test_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CartItem(product=_make_product(), quantity=0)


class TestTotals:
    def test_total_and_count(self):
        cart = Cart()
        cart.add_item(_make_product("a", price=10.0))
        cart.add_item(_make_product("b", price=2.5))
        cart.update_item_quantity("b", 4)

        assert cart.total == pytest.approx(20.0)
        assert cart.count == 5

    def test_empty_cart_totals(self):
        cart = Cart()
        assert cart.total == 0
        assert cart.count == 0

    def test_remove_and_clear(self):
        cart = Cart()
        cart.add_item(_make_product("a"))
        cart.add_item(_make_product("b"))
        cart.remove_item("a")
        assert [i.product.id for i in cart.items] == ["b"]
        cart.clear()
        assert cart.items == []

    def test_adding_increases_total_by_price(self):
        cart = Cart()
        cart.add_item(_make_product("a", price=10.0))
        before = cart.total
        cart.add_item(_make_product("a", price=10.0))
        assert cart.total - before == pytest.approx(10.0)

    def test_removing_decreases_total_by_line_subtotal(self):
        cart = Cart()
        cart.add_item(_make_product("a", price=10.0))
        cart.add_item(_make_product("b", price=7.5))
        cart.update_item_quantity("b", 3)
        before = cart.total
        cart.remove_item("b")
        assert before - cart.total == pytest.approx(22.5)
