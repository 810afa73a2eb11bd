from typing import Dict
import logging
import threading
import uuid

from kiosk.services.cart import Cart
from kiosk.services.errors import CartNotFoundError, InsufficientStockError, ProductNotFoundError
from kiosk.services.product import Product
from kiosk.services.product_store import ProductStore

logger = logging.getLogger(__name__)


class CartService:
    """
    Registry of per-session carts.

    Each customer session owns one cart, addressed by an opaque session id.
    Product lookups go through the store, but carts never mutate it.
    """

    def __init__(self, store: ProductStore):
        self.store = store
        self._carts: Dict[str, Cart] = {}
        self._lock = threading.Lock()

    def open_session(self) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._carts[session_id] = Cart()
        logger.info(f"Cart session {session_id} opened")
        return session_id

    def get_cart(self, session_id: str) -> Cart:
        with self._lock:
            cart = self._carts.get(session_id)
        if cart is None:
            raise CartNotFoundError(session_id)
        return cart

    def close_session(self, session_id: str) -> None:
        with self._lock:
            cart = self._carts.pop(session_id, None)
        if cart is None:
            raise CartNotFoundError(session_id)
        logger.info(f"Cart session {session_id} closed")

    def add_item(self, session_id: str, product_id: int, quantity: int) -> Cart:
        """
        Add a product to a session's cart.

        The stock check here is advisory, for early feedback; checkout
        revalidates against the store regardless.

        Raises:
            CartNotFoundError: If the session doesn't exist
            ProductNotFoundError: If the product doesn't exist
            InvalidArgumentError: If quantity is not positive
            InsufficientStockError: If the cart would hold more than is in stock
        """
        cart = self.get_cart(session_id)
        product = self._get_product(product_id)
        with cart.lock:
            wanted = cart.quantity_of(product_id) + quantity
            if quantity > 0 and wanted > product.stock:
                raise InsufficientStockError(product.id, product.name, wanted, product.stock)
            cart.add(product, quantity)
        return cart

    def set_item(self, session_id: str, product_id: int, quantity: int) -> Cart:
        """
        Set a line to exactly ``quantity`` units; zero or less removes it.

        Like ``add_item``, a positive quantity above current stock is
        refused early.
        """
        cart = self.get_cart(session_id)
        if quantity <= 0:
            cart.remove(product_id)
            return cart
        product = self._get_product(product_id)
        if quantity > product.stock:
            raise InsufficientStockError(product.id, product.name, quantity, product.stock)
        cart.set_quantity(product, quantity)
        return cart

    def adjust_item(self, session_id: str, product_id: int, delta: int) -> Cart:
        cart = self.get_cart(session_id)
        if cart.get_line(product_id) is None and delta <= 0:
            return cart
        cart.adjust(self._get_product(product_id), delta)
        return cart

    def remove_item(self, session_id: str, product_id: int) -> Cart:
        cart = self.get_cart(session_id)
        cart.remove(product_id)
        return cart

    def clear(self, session_id: str) -> Cart:
        cart = self.get_cart(session_id)
        cart.clear()
        return cart

    def _get_product(self, product_id: int) -> Product:
        product = self.store.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product
