from fastapi import APIRouter, Depends, HTTPException, status

from kiosk.api.dependencies import get_cart_service, get_checkout_service
from kiosk.services.cart_service import CartService
from kiosk.services.checkout_service import CheckoutService
from kiosk.services.errors import CartNotFoundError, EmptyCartError, InsufficientStockError
from kiosk.schemas.order import CheckoutQuoteResponse, ReceiptResponse

router = APIRouter(prefix="/carts", tags=["Checkout"])


@router.post(
    "/{cart_id}/checkout/preview",
    response_model=CheckoutQuoteResponse,
    summary="Preview checkout",
    description="""
    Revalidate the cart against current stock and return the lines and total
    for confirmation. Nothing is committed; abandoning the checkout here has
    no side effects.
    """
)
def preview_checkout(
    cart_id: str,
    carts: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service)
):
    """Confirmation step of the checkout."""
    try:
        quote = checkout.preview(carts.get_cart(cart_id))
        return CheckoutQuoteResponse.model_validate(quote, from_attributes=True)

    except CartNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EmptyCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post(
    "/{cart_id}/checkout",
    response_model=ReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check out",
    description="""
    Commit the cart as a sale.

    **Stock Revalidation:**
    Every line is checked against the store's stock at the moment of
    checkout, not the stock seen when the item was added. If any line
    exceeds current stock the whole checkout is rejected with 409 and
    nothing changes.

    On success stock and sold counters are updated atomically, the cart is
    emptied, and a background Celery task appends the order to the order
    history.
    """
)
def commit_checkout(
    cart_id: str,
    carts: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service)
):
    """Check out a cart."""
    try:
        receipt = checkout.checkout(carts.get_cart(cart_id))

    except CartNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EmptyCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ReceiptResponse.model_validate(receipt, from_attributes=True)
