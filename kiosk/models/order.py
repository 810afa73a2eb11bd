from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func

from kiosk.database import Base


class OrderLine(Base):
    """
    Append-only order history row, one per committed cart line.

    Attributes:
        id: Row identifier
        order_ref: Reference shared by every line of one checkout
        product_id: Product that was sold
        product_name: Product name at the time of sale
        quantity: Units sold on this line
        unit_price: Price per unit
        line_total: unit_price * quantity
        order_total: Total of the whole order
        created_at: Checkout timestamp
    """
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, index=True)
    order_ref = Column(String(32), nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    line_total = Column(Float, nullable=False)
    order_total = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<OrderLine(id={self.id}, order_ref='{self.order_ref}', product_id={self.product_id})>"
