from typing import Iterable, List, Mapping, Optional, Tuple
import logging
import threading

from kiosk.services.errors import DuplicateIdError, InvalidArgumentError, ProductNotFoundError
from kiosk.services.product import Product
from kiosk.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class ProductStore:
    """
    Authoritative owner of product stock and sales counters.

    CONCURRENCY STRATEGY:
    =====================
    A single re-entrant lock guards the whole store. Every read and every
    mutation takes it, which gives:

    1. No lost updates: concurrent ``restock`` and ``apply_sale`` calls on the
       same product are serialized.
    2. Atomic multi-line sales: ``apply_sale`` applies every line to detached
       copies first and swaps them into the store only when all lines
       succeeded, so a failure on any line leaves the store untouched.
    3. Snapshot reads: ``find_by_id``/``list_all`` return copies taken under
       the lock, never a mix of pre- and post-sale values.
    4. A version counter bumped by every mutation, read together with a
       snapshot by ``versioned_catalog`` so cached listings can be keyed by it.

    After each successful mutation the changed products are written through
    to the repository (if any). Repository failures are logged and ignored;
    the in-memory state stays authoritative.
    """

    def __init__(self, products: Iterable[Product] = (), repository: Optional[ProductRepository] = None):
        self._lock = threading.RLock()
        self._products: dict[int, Product] = {}
        self._repository = repository
        self._version = 0
        for product in products:
            if product.id in self._products:
                raise DuplicateIdError(product.id)
            self._products[product.id] = product.snapshot()

    @classmethod
    def load(cls, repository: ProductRepository) -> "ProductStore":
        """Hydrate a store from its repository."""
        products = repository.load_all()
        logger.info(f"Loaded {len(products)} products into the store")
        return cls(products, repository=repository)

    # -------------------- Reads --------------------

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            return product.snapshot() if product else None

    def list_all(self) -> List[Product]:
        """All products ordered by category, then name, then id."""
        return self.versioned_catalog()[1]

    def versioned_catalog(self) -> Tuple[int, List[Product]]:
        """``list_all`` plus the store version it was taken at."""
        with self._lock:
            version = self._version
            products = [p.snapshot() for p in self._products.values()]
        return version, sorted(products, key=lambda p: (p.category, p.name, p.id))

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def search(self, query: Optional[str] = None, category: Optional[str] = None) -> List[Product]:
        """
        Filter the catalog.

        ``query`` matches a case-insensitive substring of the name or the
        category. ``category`` must equal the product's category, ignoring
        case; None, an empty string or ``ALL_CATEGORIES`` matches every
        category. Ordering is the same as ``list_all``.
        """
        needle = (query or "").strip().casefold()
        wanted = (category or "").strip().casefold()
        if wanted == ALL_CATEGORIES.casefold():
            wanted = ""

        def matches(product: Product) -> bool:
            if wanted and product.category.casefold() != wanted:
                return False
            return not needle or needle in product.name.casefold() or needle in product.category.casefold()

        return [p for p in self.list_all() if matches(p)]

    def categories(self) -> List[str]:
        with self._lock:
            return sorted({p.category for p in self._products.values()})

    def list_by_id(self) -> List[Product]:
        with self._lock:
            products = [p.snapshot() for p in self._products.values()]
        return sorted(products, key=lambda p: p.id)

    def top_selling(self, n: int) -> List[Product]:
        """
        Top ``n`` products by units sold (descending), ties broken by id.

        ``n <= 0`` yields an empty list; a larger ``n`` than the catalog
        returns the whole catalog.
        """
        if n <= 0:
            return []
        with self._lock:
            products = [p.snapshot() for p in self._products.values()]
        return sorted(products, key=lambda p: (-p.sold, p.id))[:n]

    def __len__(self):
        with self._lock:
            return len(self._products)

    # -------------------- Mutations --------------------

    def add(self, product: Product) -> Product:
        """
        Register a new product.

        Raises:
            DuplicateIdError: If the id is already in the store
        """
        with self._lock:
            if product.id in self._products:
                raise DuplicateIdError(product.id)
            stored = product.snapshot()
            self._products[stored.id] = stored
            self._version += 1
            self._write_through([stored])
            logger.info(f"Product #{stored.id} ({stored.name}) added with stock {stored.stock}")
            return stored.snapshot()

    def restock(self, product_id: int, quantity: int) -> Product:
        """
        Increase a product's stock.

        Raises:
            InvalidArgumentError: If quantity is not positive
            ProductNotFoundError: If the product doesn't exist
        """
        if quantity <= 0:
            raise InvalidArgumentError("Restock quantity must be positive")
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            product.restock(quantity)
            self._version += 1
            self._write_through([product])
            logger.info(f"Product #{product_id} restocked by {quantity}, stock now {product.stock}")
            return product.snapshot()

    def apply_sale(self, lines: Mapping[int, int]) -> List[Product]:
        """
        Commit a sale: for every ``product_id -> quantity`` line, decrement
        stock and increment sold, all or nothing.

        Stock is checked against the store's state at the moment of the
        commit, inside the lock.

        Args:
            lines: Mapping of product id to quantity sold

        Returns:
            Snapshots of the updated products, in line order

        Raises:
            InvalidArgumentError: If there are no lines or a quantity is not positive
            ProductNotFoundError: If a product doesn't exist
            InsufficientStockError: If a quantity exceeds the current stock
        """
        if not lines:
            raise InvalidArgumentError("A sale needs at least one line")

        with self._lock:
            updated: dict[int, Product] = {}
            for product_id, quantity in lines.items():
                current = self._products.get(product_id)
                if current is None:
                    raise ProductNotFoundError(product_id)
                pending = updated.get(product_id) or current.snapshot()
                pending.consume(quantity)
                updated[product_id] = pending

            # every line succeeded; publish them together
            self._products.update(updated)
            self._version += 1
            self._write_through(updated.values())
            logger.info(f"Sale committed for {len(updated)} product(s)")
            return [product.snapshot() for product in updated.values()]

    def _write_through(self, products: Iterable[Product]) -> None:
        if self._repository is None:
            return
        try:
            self._repository.save([product.snapshot() for product in products])
        except Exception as e:
            logger.error(f"Write-through to product repository failed: {e}")
