from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from sqlalchemy.orm import sessionmaker

from kiosk.models.product import ProductRecord
from kiosk.services.errors import InvalidArgumentError
from kiosk.services.product import Product

logger = logging.getLogger(__name__)


class ProductRepository(ABC):
    """
    Persistence boundary for the product store.

    The store hydrates itself from ``load_all`` once at startup and hands
    every changed product to ``save`` after a mutation.
    """

    @abstractmethod
    def load_all(self) -> List[Product]:
        """Return every persisted product, ordered by id."""

    @abstractmethod
    def save(self, products: Iterable[Product]) -> None:
        """Upsert the given products."""


def parse_seed_line(raw: str) -> Optional[Product]:
    """
    Parse one ``id,category,name,price,stock`` seed line.

    Returns None for blank lines, ``#`` comments, a header line or any line
    that can't be turned into a valid product.
    """
    line = raw.strip().lstrip("\ufeff")
    if not line or line.startswith("#"):
        return None

    parts = [part.strip() for part in line.split(",")]
    if len(parts) < 5 or not parts[0].isdigit():
        return None

    try:
        return Product(
            id=int(parts[0]),
            category=parts[1],
            name=parts[2],
            price=float(parts[3]),
            stock=int(parts[4]),
        )
    except (ValueError, InvalidArgumentError) as e:
        logger.warning(f"Skipping malformed seed line {raw!r}: {e}")
        return None


class SqlProductRepository(ProductRepository):
    """
    SQLAlchemy-backed product repository.

    Each call opens its own short-lived session so the repository can be
    shared between the API threadpool and startup code.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load_all(self) -> List[Product]:
        with self.session_factory() as db:
            records = db.query(ProductRecord).order_by(ProductRecord.id).all()
            return [record.to_product() for record in records]

    def save(self, products: Iterable[Product]) -> None:
        with self.session_factory() as db:
            try:
                for product in products:
                    db.merge(ProductRecord.from_product(product))
                db.commit()
            except Exception:
                db.rollback()
                raise

    def count(self) -> int:
        with self.session_factory() as db:
            return db.query(ProductRecord).count()

    def import_seed_file(self, path) -> int:
        """
        One-time import of a seed file, only when the products table is empty.

        Args:
            path: Location of the ``id,category,name,price,stock`` file

        Returns:
            Number of products imported (0 if the table already had rows
            or the file doesn't exist)
        """
        if self.count() > 0:
            return 0

        seed_path = Path(path)
        if not seed_path.exists():
            logger.warning(f"Seed file not found: {seed_path}")
            return 0

        products = {}
        with seed_path.open(encoding="utf-8") as handle:
            for raw in handle:
                product = parse_seed_line(raw)
                if product is not None:
                    # later lines win for a repeated id
                    products[product.id] = product

        self.save(products.values())
        logger.info(f"Imported {len(products)} products from {seed_path}")
        return len(products)
