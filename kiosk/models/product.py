from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint
from sqlalchemy.sql import func

from kiosk.database import Base
from kiosk.services.product import Product


class ProductRecord(Base):
    """
    Persisted row for a catalog product.

    Attributes:
        id: Externally assigned product identifier
        category: Classification, e.g. "Boba Drink" or "Dessert"
        name: Display name
        price: Unit price (non-negative)
        stock: Available quantity (non-negative)
        sold: Cumulative quantity sold (non-negative)
        updated_at: Timestamp of the last write-through
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=False)
    category = Column(String(50), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    sold = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
        CheckConstraint('sold >= 0', name='check_sold_non_negative'),
    )

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            category=self.category,
            price=self.price,
            stock=self.stock,
            sold=self.sold,
        )

    @classmethod
    def from_product(cls, product: Product) -> "ProductRecord":
        return cls(
            id=product.id,
            category=product.category,
            name=product.name,
            price=product.price,
            stock=product.stock,
            sold=product.sold,
        )

    def __repr__(self):
        return f"<ProductRecord(id={self.id}, name='{self.name}', stock={self.stock}, sold={self.sold})>"
