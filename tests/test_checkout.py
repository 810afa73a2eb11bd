"""Tests for the checkout protocol."""
import threading
from unittest.mock import MagicMock

import pytest

from kiosk.services.cart import Cart
from kiosk.services.cart_service import CartService
from kiosk.services.checkout_service import CheckoutService
from kiosk.services.errors import EmptyCartError, InsufficientStockError
from kiosk.services.product import Product
from kiosk.services.product_store import ProductStore


def test_end_to_end_checkout():
    """Test a complete purchase: stock, sold, cart and order log."""
    store = ProductStore([Product(id=1, name="Taro Milk Tea", category="Boba Drink", price=2.50, stock=10)])
    order_log = MagicMock()
    service = CheckoutService(store, order_log=order_log)
    cart = Cart()

    cart.add(store.find_by_id(1), 3)
    assert cart.subtotal() == 7.50

    receipt = service.checkout(cart)

    product = store.find_by_id(1)
    assert product.stock == 7
    assert product.sold == 3
    assert cart.is_empty()
    assert receipt.total == 7.50

    order_log.assert_called_once_with(receipt)
    payload = receipt.to_payload()
    assert payload["created_at"] == receipt.created_at.isoformat()
    assert payload["order_total"] == 7.50
    assert payload["lines"] == [
        {"product_id": 1, "product_name": "Taro Milk Tea", "quantity": 3, "unit_price": 2.50, "line_total": 7.50}
    ]


def test_empty_checkout_is_idempotent(store):
    """Test an empty cart always fails and never touches the store."""
    order_log = MagicMock()
    service = CheckoutService(store, order_log=order_log)
    cart = Cart()
    before = [(p.id, p.stock, p.sold) for p in store.list_by_id()]

    for _ in range(3):
        with pytest.raises(EmptyCartError):
            service.checkout(cart)

    assert [(p.id, p.stock, p.sold) for p in store.list_by_id()] == before
    order_log.assert_not_called()


def test_stale_cart_rejected(store):
    """Test stock consumed after adding to the cart makes checkout fail."""
    service = CheckoutService(store)
    cart = Cart()
    cart.add(store.find_by_id(2), 3)

    # another session buys the remaining units
    store.apply_sale({2: 3})

    with pytest.raises(InsufficientStockError) as exc_info:
        service.checkout(cart)

    assert exc_info.value.product_id == 2
    assert exc_info.value.product_name == "Tiramisu"
    assert store.find_by_id(2).stock == 0
    assert store.find_by_id(2).sold == 3
    assert cart.quantity_of(2) == 3


def test_revalidation_uses_live_stock_not_cart_snapshot(store):
    """Test a restock after adding lets a previously oversized cart through."""
    service = CheckoutService(store)
    cart = Cart()
    cart.add(store.find_by_id(3), 4)  # stock is 0 when added

    store.restock(3, 4)
    receipt = service.checkout(cart)

    assert receipt is not None
    assert store.find_by_id(3).stock == 0
    assert store.find_by_id(3).sold == 4


def test_insufficient_line_rejects_whole_cart(store):
    """Test one bad line means no line is committed."""
    service = CheckoutService(store)
    cart = Cart()
    cart.add(store.find_by_id(1), 2)
    cart.add(store.find_by_id(2), 4)

    with pytest.raises(InsufficientStockError):
        service.checkout(cart)

    assert store.find_by_id(1).stock == 10
    assert store.find_by_id(2).stock == 3
    assert len(cart) == 2


def test_missing_product_rejected():
    """Test a cart line for a product the store doesn't know fails revalidation."""
    store = ProductStore()
    service = CheckoutService(store)
    cart = Cart()
    cart.add(Product(id=42, name="Ghost", category="X", price=1.0, stock=5), 1)

    with pytest.raises(InsufficientStockError) as exc_info:
        service.checkout(cart)

    assert exc_info.value.product_id == 42


def test_cancel_at_confirmation_is_a_no_op(store):
    """Test declining the confirmation leaves cart and store untouched."""
    order_log = MagicMock()
    service = CheckoutService(store, order_log=order_log)
    cart = Cart()
    cart.add(store.find_by_id(1), 2)
    seen = []

    def decline(quote):
        seen.append(quote)
        return False

    assert service.checkout(cart, confirm=decline) is None

    assert seen[0].total == 5.00
    assert [line.product_id for line in seen[0].lines] == [1]
    assert cart.quantity_of(1) == 2
    assert store.find_by_id(1).stock == 10
    order_log.assert_not_called()


def test_confirmed_checkout_commits(store):
    """Test accepting the confirmation commits the sale."""
    service = CheckoutService(store)
    cart = Cart()
    cart.add(store.find_by_id(1), 2)

    receipt = service.checkout(cart, confirm=lambda quote: True)

    assert receipt.total == 5.00
    assert store.find_by_id(1).stock == 8


def test_preview_does_not_commit(store):
    """Test previewing revalidates without side effects."""
    service = CheckoutService(store)
    cart = Cart()
    cart.add(store.find_by_id(1), 3)
    cart.add(store.find_by_id(2), 1)

    quote = service.preview(cart)

    assert quote.total == 11.50
    assert store.find_by_id(1).stock == 10
    assert len(cart) == 2


def test_order_log_failure_does_not_undo_commit(store):
    """Test a failing order log is swallowed after the sale commits."""
    order_log = MagicMock(side_effect=IOError("orders.csv is locked"))
    service = CheckoutService(store, order_log=order_log)
    cart = Cart()
    cart.add(store.find_by_id(1), 1)

    receipt = service.checkout(cart)

    assert receipt is not None
    assert store.find_by_id(1).stock == 9
    assert cart.is_empty()
    order_log.assert_called_once()


def test_receipt_payload():
    """Test the receipt serializes to a JSON-friendly payload."""
    store = ProductStore([Product(id=1, name="Taro Milk Tea", category="Boba Drink", price=2.50, stock=10)])
    cart = Cart()
    cart.add(store.find_by_id(1), 2)

    receipt = CheckoutService(store).checkout(cart)
    payload = receipt.to_payload()

    assert payload["order_ref"] == receipt.order_ref
    assert payload["order_total"] == 5.00
    assert payload["lines"] == [
        {"product_id": 1, "product_name": "Taro Milk Tea", "quantity": 2, "unit_price": 2.50, "line_total": 5.00}
    ]


def test_cart_edit_during_checkout_waits_for_commit(store):
    """Test an item added while checkout is in progress is kept for the next order."""
    carts = CartService(store)
    session_id = carts.open_session()
    carts.add_item(session_id, 1, 2)
    adder = threading.Thread(target=carts.add_item, args=(session_id, 2, 1))
    waiting = []

    def confirm(quote):
        adder.start()
        adder.join(timeout=0.2)
        waiting.append(adder.is_alive())
        return True

    receipt = CheckoutService(store).checkout(carts.get_cart(session_id), confirm=confirm)
    adder.join(timeout=5)

    assert waiting == [True]
    assert [line.product_id for line in receipt.lines] == [1]
    assert store.find_by_id(1).sold == 2
    assert store.find_by_id(2).stock == 3
    cart = carts.get_cart(session_id)
    assert [(line.product_id, line.quantity) for line in cart.lines()] == [(2, 1)]
