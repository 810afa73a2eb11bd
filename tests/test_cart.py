"""Tests for the Cart."""
import pytest

from kiosk.services.cart import Cart
from kiosk.services.errors import InvalidArgumentError
from kiosk.services.product import Product

TEA = Product(id=1, name="Taro Milk Tea", category="Boba Drink", price=2.50, stock=10)
CAKE = Product(id=2, name="Tiramisu", category="Dessert", price=4.00, stock=3)


def test_new_cart_is_empty():
    """Test a fresh cart has no lines and a zero subtotal."""
    cart = Cart()

    assert cart.is_empty()
    assert cart.subtotal() == 0
    assert cart.lines() == []


def test_add_merges_quantities():
    """Test adding the same product twice yields a single merged line."""
    cart = Cart()

    cart.add(TEA, 2)
    cart.add(TEA, 3)

    lines = cart.lines()
    assert len(lines) == 1
    assert lines[0].product_id == TEA.id
    assert lines[0].quantity == 5


def test_add_merges_by_id_not_instance():
    """Test a different snapshot of the same product merges into the same line."""
    cart = Cart()
    stale = Product(id=1, name="Taro Milk Tea", category="Boba Drink", price=2.50, stock=0, sold=10)

    cart.add(TEA, 1)
    cart.add(stale, 1)

    assert len(cart) == 1
    assert cart.quantity_of(1) == 2


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_requires_positive_quantity(quantity):
    """Test adding a non-positive quantity fails and leaves the cart empty."""
    cart = Cart()

    with pytest.raises(InvalidArgumentError):
        cart.add(TEA, quantity)
    assert cart.is_empty()


def test_lines_keep_insertion_order():
    """Test lines are listed in the order products were first added."""
    cart = Cart()

    cart.add(CAKE, 1)
    cart.add(TEA, 1)
    cart.add(CAKE, 1)

    assert [line.product_id for line in cart.lines()] == [2, 1]


def test_adjust_to_zero_removes_line():
    """Test adjusting a line down to zero removes it."""
    cart = Cart()

    cart.add(TEA, 2)
    cart.adjust(TEA, -2)

    assert cart.is_empty()


def test_adjust_below_zero_removes_line():
    """Test adjusting past zero removes the line rather than storing a negative."""
    cart = Cart()

    cart.add(TEA, 2)
    cart.adjust(TEA, -5)

    assert cart.quantity_of(TEA.id) == 0
    assert cart.is_empty()


def test_adjust_changes_quantity():
    """Test +1/-1 adjustments on an existing line."""
    cart = Cart()
    cart.add(TEA, 2)

    cart.adjust(TEA, 1)
    assert cart.quantity_of(TEA.id) == 3

    cart.adjust(TEA, -1)
    assert cart.quantity_of(TEA.id) == 2


def test_adjust_missing_line():
    """Test adjusting an absent product adds on a positive delta and is a no-op otherwise."""
    cart = Cart()

    cart.adjust(CAKE, -1)
    cart.adjust(CAKE, 0)
    assert cart.is_empty()

    cart.adjust(CAKE, 2)
    assert cart.quantity_of(CAKE.id) == 2


def test_remove_line():
    """Test removing a line, and removing an absent line."""
    cart = Cart()
    cart.add(TEA, 2)
    cart.add(CAKE, 1)

    cart.remove(TEA.id)
    cart.remove(99)

    assert [line.product_id for line in cart.lines()] == [CAKE.id]


def test_subtotal_uses_captured_prices():
    """Test subtotal sums price * quantity across lines."""
    cart = Cart()

    cart.add(TEA, 3)
    cart.add(CAKE, 2)

    assert cart.subtotal() == 15.50
    assert cart.get_line(TEA.id).line_total == 7.50


def test_lines_are_snapshots():
    """Test mutating a returned line doesn't change the cart."""
    cart = Cart()
    cart.add(TEA, 1)

    cart.lines()[0].quantity = 50

    assert cart.quantity_of(TEA.id) == 1


def test_clear():
    """Test clearing removes every line."""
    cart = Cart()
    cart.add(TEA, 1)
    cart.add(CAKE, 1)

    cart.clear()

    assert cart.is_empty()
    assert cart.subtotal() == 0


def test_set_quantity():
    """Test setting an exact quantity replaces, adds, or removes a line."""
    cart = Cart()
    cart.add(TEA, 2)

    cart.set_quantity(TEA, 5)
    assert cart.quantity_of(TEA.id) == 5

    cart.set_quantity(CAKE, 1)
    assert [line.product_id for line in cart.lines()] == [TEA.id, CAKE.id]

    cart.set_quantity(TEA, 0)
    cart.set_quantity(CAKE, -1)
    assert cart.is_empty()


def test_set_quantity_keeps_captured_price():
    """Test resetting an existing line keeps the price it was added at."""
    cart = Cart()
    cart.add(TEA, 1)
    repriced = Product(id=TEA.id, name=TEA.name, category=TEA.category, price=9.99, stock=10)

    cart.set_quantity(repriced, 3)

    assert cart.get_line(TEA.id).unit_price == 2.50
    assert cart.subtotal() == 7.50
