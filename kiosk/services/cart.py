from dataclasses import dataclass, replace
from typing import List, Optional
import threading

from kiosk.services.errors import InvalidArgumentError
from kiosk.services.product import Product


@dataclass
class CartLine:
    """One product line in a cart. ``unit_price`` is captured when the line is created."""
    product_id: int
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


class Cart:
    """
    A customer's intended purchases, keyed by product id.

    The cart never touches the product store. Quantities recorded here are
    requests only and are revalidated against live stock at checkout.

    ``lock`` is re-entrant and guards every method. Checkout holds it from
    revalidation until the cart is cleared, so an edit made meanwhile waits
    instead of being cleared unsold.
    """

    def __init__(self):
        self.lock = threading.RLock()
        # dicts keep insertion order, which is the display order
        self._lines: dict[int, CartLine] = {}

    def add(self, product: Product, quantity: int) -> None:
        """
        Add ``quantity`` units of ``product``, merging into an existing line.

        Raises:
            InvalidArgumentError: If quantity is not positive
        """
        if quantity <= 0:
            raise InvalidArgumentError("Quantity must be positive")
        with self.lock:
            line = self._lines.get(product.id)
            if line is None:
                self._lines[product.id] = CartLine(
                    product_id=product.id,
                    name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                )
            else:
                line.quantity += quantity

    def adjust(self, product: Product, delta: int) -> None:
        """
        Change a line's quantity by ``delta``.

        A result of zero or less removes the line. Without an existing line a
        positive delta behaves like ``add`` and anything else does nothing.
        """
        with self.lock:
            self.set_quantity(product, self.quantity_of(product.id) + delta)

    def set_quantity(self, product: Product, quantity: int) -> None:
        """Replace a line's quantity; zero or less removes the line."""
        with self.lock:
            if quantity <= 0:
                self._lines.pop(product.id, None)
            elif product.id in self._lines:
                self._lines[product.id].quantity = quantity
            else:
                self.add(product, quantity)

    def remove(self, product_id: int) -> None:
        with self.lock:
            self._lines.pop(product_id, None)

    def quantity_of(self, product_id: int) -> int:
        with self.lock:
            line = self._lines.get(product_id)
            return line.quantity if line else 0

    def get_line(self, product_id: int) -> Optional[CartLine]:
        with self.lock:
            line = self._lines.get(product_id)
            return replace(line) if line else None

    def lines(self) -> List[CartLine]:
        """Snapshot of the lines in insertion order."""
        with self.lock:
            return [replace(line) for line in self._lines.values()]

    def subtotal(self) -> float:
        with self.lock:
            return round(sum(line.unit_price * line.quantity for line in self._lines.values()), 2)

    def is_empty(self) -> bool:
        with self.lock:
            return not self._lines

    def clear(self) -> None:
        with self.lock:
            self._lines.clear()

    def __len__(self):
        with self.lock:
            return len(self._lines)
