from typing import List, Optional

from kiosk.services.product import Product
from kiosk.services.product_store import ProductStore


class AdminService:
    """
    Privileged kiosk operations: restocking, registering products and the
    top-sellers report.

    The PIN check is a plain equality test against a configured value. It
    gates the admin screens; it is not an authentication mechanism.
    """

    def __init__(self, store: ProductStore, pin: str, top_sellers_limit: int = 5):
        self.store = store
        self._pin = pin
        self.top_sellers_limit = top_sellers_limit

    def authorize(self, pin: str) -> bool:
        return pin is not None and pin.strip() == self._pin

    def restock(self, product_id: int, quantity: int) -> Product:
        return self.store.restock(product_id, quantity)

    def add_product(self, product_id: int, name: str, category: str, price: float, stock: int = 0) -> Product:
        product = Product(id=product_id, name=name, category=category, price=price, stock=stock)
        return self.store.add(product)

    def top_sellers(self, n: Optional[int] = None) -> List[Product]:
        return self.store.top_selling(self.top_sellers_limit if n is None else n)
