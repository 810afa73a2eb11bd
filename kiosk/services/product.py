from dataclasses import dataclass, replace

from kiosk.services.errors import InsufficientStockError, InvalidArgumentError


@dataclass
class Product:
    """
    A product sold by the kiosk.

    Identity is the ``id`` alone; ``price`` never changes after creation,
    while ``stock`` and ``sold`` are moved only by ``restock`` and ``consume``.
    Rows rehydrated from storage pass their ``sold`` counter explicitly.

    Attributes:
        id: Externally assigned identifier
        name: Display name
        category: Classification string
        price: Unit price (>= 0)
        stock: Units on hand (>= 0)
        sold: Units sold so far (>= 0)
    """
    id: int
    name: str
    category: str
    price: float
    stock: int = 0
    sold: int = 0

    def __post_init__(self):
        if self.price < 0:
            raise InvalidArgumentError(f"Price cannot be negative: {self.price}")
        if self.stock < 0:
            raise InvalidArgumentError(f"Stock cannot be negative: {self.stock}")
        if self.sold < 0:
            raise InvalidArgumentError(f"Sold cannot be negative: {self.sold}")

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def restock(self, quantity: int) -> None:
        """Increase stock by ``quantity`` (must be positive)."""
        if quantity <= 0:
            raise InvalidArgumentError("Restock quantity must be positive")
        self.stock += quantity

    def consume(self, quantity: int) -> None:
        """
        Record a sale of ``quantity`` units.

        Raises:
            InvalidArgumentError: If quantity is not positive
            InsufficientStockError: If quantity exceeds the current stock
        """
        if quantity <= 0:
            raise InvalidArgumentError("Quantity must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(self.id, self.name, quantity, self.stock)
        self.stock -= quantity
        self.sold += quantity

    def snapshot(self) -> "Product":
        """Detached copy with the same state."""
        return replace(self)
