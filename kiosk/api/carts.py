from fastapi import APIRouter, Depends, HTTPException, status

from kiosk.api.dependencies import get_cart_service
from kiosk.services.cart_service import CartService
from kiosk.services.errors import (
    CartNotFoundError,
    InsufficientStockError,
    InvalidArgumentError,
    ProductNotFoundError
)
from kiosk.schemas.cart import CartItemAdd, CartItemAdjust, CartItemSet, CartResponse

router = APIRouter(prefix="/carts", tags=["Carts"])


@router.post(
    "/",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a cart session",
    description="Start a customer session with an empty cart."
)
def open_cart(carts: CartService = Depends(get_cart_service)):
    """Open a new cart session and return its ID."""
    cart_id = carts.open_session()
    return CartResponse.from_cart(cart_id, carts.get_cart(cart_id))


@router.get(
    "/{cart_id}",
    response_model=CartResponse,
    summary="View cart",
    description="Get the lines and subtotal of a cart."
)
def get_cart(
    cart_id: str,
    carts: CartService = Depends(get_cart_service)
):
    """Get a cart by session ID."""
    try:
        return CartResponse.from_cart(cart_id, carts.get_cart(cart_id))
    except CartNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete(
    "/{cart_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close a cart session",
    description="End the session and discard its cart."
)
def close_cart(
    cart_id: str,
    carts: CartService = Depends(get_cart_service)
):
    """Close a cart session."""
    try:
        carts.close_session(cart_id)
    except CartNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return None


@router.post(
    "/{cart_id}/items",
    response_model=CartResponse,
    summary="Add to cart",
    description="""
    Add a product to the cart, merging with an existing line.

    The stock check here is advisory; stock is checked again at checkout.
    """
)
def add_item(
    cart_id: str,
    item: CartItemAdd,
    carts: CartService = Depends(get_cart_service)
):
    """
    Add a product to the cart.

    - **product_id**: ID of the product (required)
    - **quantity**: Number of units, default is 1 (optional)
    """
    try:
        cart = carts.add_item(cart_id, item.product_id, item.quantity)
        return CartResponse.from_cart(cart_id, cart)

    except (CartNotFoundError, ProductNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put(
    "/{cart_id}/items/{product_id}",
    response_model=CartResponse,
    summary="Set a cart line quantity",
    description="Set a line to an exact quantity. Zero or less removes the line."
)
def set_item(
    cart_id: str,
    product_id: int,
    item: CartItemSet,
    carts: CartService = Depends(get_cart_service)
):
    """Set the quantity of a cart line."""
    try:
        cart = carts.set_item(cart_id, product_id, item.quantity)
        return CartResponse.from_cart(cart_id, cart)

    except (CartNotFoundError, ProductNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.patch(
    "/{cart_id}/items/{product_id}",
    response_model=CartResponse,
    summary="Adjust a cart line",
    description="Change a line's quantity by a delta. A result of zero or less removes the line."
)
def adjust_item(
    cart_id: str,
    product_id: int,
    adjustment: CartItemAdjust,
    carts: CartService = Depends(get_cart_service)
):
    """Adjust a cart line by a delta."""
    try:
        cart = carts.adjust_item(cart_id, product_id, adjustment.delta)
        return CartResponse.from_cart(cart_id, cart)

    except (CartNotFoundError, ProductNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete(
    "/{cart_id}/items/{product_id}",
    response_model=CartResponse,
    summary="Remove a cart line",
    description="Remove a product from the cart. Removing an absent product is a no-op."
)
def remove_item(
    cart_id: str,
    product_id: int,
    carts: CartService = Depends(get_cart_service)
):
    """Remove a cart line."""
    try:
        cart = carts.remove_item(cart_id, product_id)
        return CartResponse.from_cart(cart_id, cart)
    except CartNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
