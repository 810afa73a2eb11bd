from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from kiosk.api.dependencies import get_store
from kiosk.services.product_store import ALL_CATEGORIES, ProductStore
from kiosk.schemas.product import ProductResponse, ProductListResponse
from kiosk.utils.cache import cache_service, catalog_key, CATALOG_PREFIX

router = APIRouter(prefix="/products", tags=["Products"])


def _listing(products) -> ProductListResponse:
    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=len(products)
    )


@router.get(
    "/",
    response_model=ProductListResponse,
    summary="List the catalog",
    description="""
    List products ordered by category and name.

    - **q**: Case-insensitive text matched against name or category
    - **category**: Exact category (case-insensitive), or "All"

    The unfiltered listing is cached in Redis per store version.
    """
)
def list_products(
    q: Optional[str] = Query(None, max_length=100, description="Search text"),
    category: Optional[str] = Query(None, max_length=100, description="Category filter"),
    store: ProductStore = Depends(get_store)
):
    """
    Get the catalog.

    Cached listings are keyed by the store version, so a listing built
    before a checkout or restock is never served after it.
    """
    if (q and q.strip()) or (category and category.strip() and category.strip() != ALL_CATEGORIES):
        return _listing(store.search(q, category))

    cached = cache_service.get(CATALOG_PREFIX, catalog_key(store.version))
    if cached:
        return cached

    version, products = store.versioned_catalog()
    response = _listing(products)
    cache_service.set(CATALOG_PREFIX, catalog_key(version), response.model_dump())
    return response


@router.get(
    "/categories",
    response_model=list[str],
    summary="List categories",
    description="Distinct product categories, sorted, for the category filter."
)
def list_categories(store: ProductStore = Depends(get_store)):
    return store.categories()


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get the current state of a single product."
)
def get_product(
    product_id: int,
    store: ProductStore = Depends(get_store)
):
    """Get a product by ID."""
    product = store.find_by_id(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )

    return product
