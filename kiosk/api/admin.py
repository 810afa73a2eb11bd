from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from kiosk.api.dependencies import require_admin
from kiosk.database import get_db
from kiosk.services.admin_service import AdminService
from kiosk.services.errors import DuplicateIdError, InvalidArgumentError, ProductNotFoundError
from kiosk.services.order_service import OrderLogService
from kiosk.schemas.product import ProductCreate, ProductResponse, RestockRequest, TopSellerResponse
from kiosk.schemas.order import OrderLineResponse, OrderLogListResponse

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a product",
    description="Add a new product to the catalog. Requires the X-Admin-Pin header."
)
def create_product(
    product_data: ProductCreate,
    admin: AdminService = Depends(require_admin)
):
    """
    Register a new product.

    - **id**: Product ID, must not already exist (required)
    - **name**, **category**: Display fields (required)
    - **price**: Unit price, must be non-negative (required)
    - **stock**: Initial stock, must be non-negative (required)
    """
    try:
        product = admin.add_product(
            product_id=product_data.id,
            name=product_data.name,
            category=product_data.category,
            price=product_data.price,
            stock=product_data.stock
        )
    except DuplicateIdError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return product


@router.post(
    "/products/{product_id}/restock",
    response_model=ProductResponse,
    summary="Restock a product",
    description="Increase a product's stock. Requires the X-Admin-Pin header."
)
def restock_product(
    product_id: int,
    restock: RestockRequest,
    admin: AdminService = Depends(require_admin)
):
    """Add stock to a product."""
    try:
        product = admin.restock(product_id, restock.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return product


@router.get(
    "/top-sellers",
    response_model=list[TopSellerResponse],
    summary="Top sellers",
    description="Products ranked by units sold, ties broken by ID. Requires the X-Admin-Pin header."
)
def top_sellers(
    limit: Optional[int] = Query(None, ge=0, le=100, description="Number of products (default 5)"),
    admin: AdminService = Depends(require_admin)
):
    """Get the top-sellers report."""
    products = admin.top_sellers(limit)
    return [
        TopSellerResponse(rank=rank, **ProductResponse.model_validate(p).model_dump())
        for rank, p in enumerate(products, start=1)
    ]


@router.get(
    "/orders",
    response_model=OrderLogListResponse,
    summary="Order history",
    description="Paginated order history, newest first. Requires the X-Admin-Pin header."
)
def list_orders(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    admin: AdminService = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Get paginated order history."""
    service = OrderLogService(db)
    rows, total, total_pages = service.get_entries(page, page_size)

    return OrderLogListResponse(
        items=[OrderLineResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages
    )
