from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional
import logging
import uuid

from kiosk.services.cart import Cart, CartLine
from kiosk.services.errors import EmptyCartError, InsufficientStockError
from kiosk.services.product_store import ProductStore

logger = logging.getLogger(__name__)


@dataclass
class CheckoutQuote:
    """Revalidated cart contents, shown to the customer before committing."""
    lines: List[CartLine]
    total: float


@dataclass
class OrderReceipt:
    """A committed sale."""
    lines: List[CartLine]
    total: float
    order_ref: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict:
        """JSON-serializable form, suitable for a background task argument."""
        return {
            "order_ref": self.order_ref,
            "created_at": self.created_at.isoformat(),
            "order_total": self.total,
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.name,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "line_total": line.line_total,
                }
                for line in self.lines
            ],
        }


class CheckoutService:
    """
    Turns a cart into a committed sale, or rejects it.

    CHECKOUT PROTOCOL:
    ==================
    1. An empty cart is rejected with EmptyCartError.
    2. Revalidation: every line is checked against the store's *current*
       stock, looked up by product id. The cart's own copy of a product is
       never trusted for stock.
    3. Confirmation: the revalidated quote is passed to the optional
       ``confirm`` callback; a falsy answer cancels with no side effects.
    4. Commit: ``ProductStore.apply_sale`` applies all lines atomically and
       re-checks stock under the store lock, so a sale racing in between
       steps 2 and 4 still cannot oversell.
    5. The cart is cleared and a receipt returned.
       Steps 2 to 5 run under the cart's lock, so the cart can't change
       between what was revalidated and what is cleared.
    6. The receipt goes to the order log as ``to_payload()`` rows. Logging is best-effort: a failure
       there never undoes or blocks the commit.
    """

    def __init__(self, store: ProductStore, order_log: Optional[Callable[[OrderReceipt], None]] = None):
        self.store = store
        self.order_log = order_log

    def preview(self, cart: Cart) -> CheckoutQuote:
        """
        Revalidate a cart against live stock without committing anything.

        Raises:
            EmptyCartError: If the cart has no lines
            InsufficientStockError: If a product is gone or a line exceeds its stock
        """
        lines = cart.lines()
        if not lines:
            raise EmptyCartError()

        for line in lines:
            live = self.store.find_by_id(line.product_id)
            if live is None:
                raise InsufficientStockError(line.product_id, line.name, line.quantity, 0)
            if line.quantity > live.stock:
                raise InsufficientStockError(line.product_id, line.name, line.quantity, live.stock)

        return CheckoutQuote(lines=lines, total=round(sum(line.unit_price * line.quantity for line in lines), 2))

    def checkout(
        self,
        cart: Cart,
        confirm: Optional[Callable[[CheckoutQuote], bool]] = None,
    ) -> Optional[OrderReceipt]:
        """
        Run the full checkout protocol on ``cart``.

        Args:
            cart: The customer's cart
            confirm: Optional callback shown the quote; returning False cancels

        Returns:
            The receipt, or None if the customer cancelled at confirmation

        Raises:
            EmptyCartError: If the cart has no lines
            InsufficientStockError: If revalidation or the commit finds too little stock
        """
        with cart.lock:
            quote = self.preview(cart)

            if confirm is not None and not confirm(quote):
                logger.info("Checkout cancelled at confirmation")
                return None

            self.store.apply_sale({line.product_id: line.quantity for line in quote.lines})

            receipt = OrderReceipt(lines=quote.lines, total=quote.total)
            cart.clear()

        logger.info(f"Order {receipt.order_ref} committed: {len(receipt.lines)} line(s), total {receipt.total:.2f}")

        self._record(receipt)
        return receipt

    def _record(self, receipt: OrderReceipt) -> None:
        if self.order_log is None:
            return
        try:
            self.order_log(receipt)
        except Exception as e:
            logger.error(f"Order log failed for order {receipt.order_ref}: {e}")
