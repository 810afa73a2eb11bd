from fastapi import Depends, Header, HTTPException, Request, status
from typing import Optional

from kiosk.services.admin_service import AdminService
from kiosk.services.cart_service import CartService
from kiosk.services.checkout_service import CheckoutService
from kiosk.services.product_store import ProductStore


# The kiosk services are built once in the application lifespan and kept on
# app.state; these dependencies hand them to the routes.

def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_cart_service(request: Request) -> CartService:
    return request.app.state.carts


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_admin_service(request: Request) -> AdminService:
    return request.app.state.admin


def require_admin(
    x_admin_pin: Optional[str] = Header(None, description="Admin PIN"),
    admin: AdminService = Depends(get_admin_service),
) -> AdminService:
    """Gate admin routes on the configured PIN."""
    if not admin.authorize(x_admin_pin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return admin
