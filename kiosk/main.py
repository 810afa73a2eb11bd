from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from kiosk.config import get_settings
from kiosk.database import engine, Base, SessionLocal
from kiosk.api import products, carts, checkout, admin, health
from kiosk.services.admin_service import AdminService
from kiosk.services.cart_service import CartService
from kiosk.services.checkout_service import CheckoutService
from kiosk.services.product_repository import SqlProductRepository
from kiosk.services.product_store import ProductStore
from kiosk.tasks.order_tasks import dispatch_order_log

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up kiosk...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    # Hydrate the product store, seeding an empty catalog from file
    repository = SqlProductRepository(SessionLocal)
    if settings.SEED_FILE:
        repository.import_seed_file(settings.SEED_FILE)
    store = ProductStore.load(repository)

    app.state.store = store
    app.state.carts = CartService(store)
    app.state.checkout = CheckoutService(store, order_log=dispatch_order_log)
    app.state.admin = AdminService(store, settings.ADMIN_PIN, settings.TOP_SELLERS_LIMIT)
    logger.info("Kiosk ready")

    yield

    # Shutdown
    logger.info("Shutting down kiosk...")


# Create FastAPI application
app = FastAPI(
    title="Food Kiosk",
    description="""
    Point-of-sale API for a single-register food kiosk.

    - **Catalog**: Products with price, stock and units sold
    - **Carts**: One cart per customer session
    - **Checkout**: Stock revalidation and atomic commit
    - **Admin**: PIN-gated restocking, product registration, top sellers and order history

    ## Features

    ### Stock Consistency
    Carts never touch stock. At checkout every line is revalidated against
    the store's current stock and the whole sale is committed atomically, so
    stock never goes negative even if it changed after items were added.

    ### Background Processing
    Committed orders are appended to the order history by a Celery worker.
    Order logging is best-effort and never affects a committed sale.

    ### Caching
    The catalog listing is cached in Redis, keyed by the store version.
    """,
    version="1.0.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(carts.router, prefix="/api/v1")
app.include_router(checkout.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": "Food Kiosk",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }
