from pydantic import BaseModel, Field, ConfigDict

from kiosk.services.cart import Cart


class CartItemAdd(BaseModel):
    """Schema for adding a product to a cart."""
    product_id: int = Field(..., description="ID of the product to add")
    quantity: int = Field(default=1, ge=1, description="Quantity to add")


class CartItemAdjust(BaseModel):
    """Schema for changing a cart line by a delta (e.g. +1 / -1)."""
    delta: int = Field(..., description="Change in quantity; a result <= 0 removes the line")


class CartItemSet(BaseModel):
    """Schema for setting a cart line to an exact quantity."""
    quantity: int = Field(..., description="New quantity; 0 or less removes the line")


class CartLineResponse(BaseModel):
    """Schema for one cart line."""
    product_id: int
    name: str
    unit_price: float
    quantity: int
    line_total: float

    model_config = ConfigDict(from_attributes=True)


class CartResponse(BaseModel):
    """Schema for a cart session."""
    cart_id: str
    lines: list[CartLineResponse]
    subtotal: float
    is_empty: bool

    @classmethod
    def from_cart(cls, cart_id: str, cart: Cart) -> "CartResponse":
        return cls(
            cart_id=cart_id,
            lines=[CartLineResponse.model_validate(line) for line in cart.lines()],
            subtotal=cart.subtotal(),
            is_empty=cart.is_empty(),
        )
