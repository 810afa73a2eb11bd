from pydantic import BaseModel, Field, ConfigDict


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=100, description="Product name")
    category: str = Field(..., min_length=1, max_length=50, description="Product category")
    price: float = Field(..., ge=0, description="Unit price (must be non-negative)")
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")


class ProductCreate(ProductBase):
    """Schema for registering a new product. The id is assigned by the store operator."""
    id: int = Field(..., ge=1, description="Product ID")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    sold: int

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for the catalog listing."""
    items: list[ProductResponse]
    total: int


class RestockRequest(BaseModel):
    """Schema for an admin restock."""
    quantity: int = Field(..., gt=0, description="Units to add")


class TopSellerResponse(ProductResponse):
    """Schema for one row of the top-sellers report."""
    rank: int
