from pydantic import BaseModel, ConfigDict
from datetime import datetime

from kiosk.schemas.cart import CartLineResponse


class CheckoutQuoteResponse(BaseModel):
    """Schema for the confirmation step: revalidated lines and total."""
    lines: list[CartLineResponse]
    total: float


class ReceiptResponse(BaseModel):
    """Schema for a committed checkout."""
    order_ref: str
    created_at: datetime
    lines: list[CartLineResponse]
    total: float

    model_config = ConfigDict(from_attributes=True)


class OrderLineResponse(BaseModel):
    """Schema for one order-history row."""
    id: int
    order_ref: str
    product_id: int
    product_name: str
    quantity: int
    unit_price: float
    line_total: float
    order_total: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderLogListResponse(BaseModel):
    """Schema for paginated order history."""
    items: list[OrderLineResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
