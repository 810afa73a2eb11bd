from fastapi import APIRouter, Request
from kiosk.utils.cache import redis_client, cache_service
from kiosk.database import engine
from sqlalchemy import text

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if all services (store, DB, Redis) are ready."
)
def readiness_check(request: Request):
    """
    Readiness check for all dependencies.

    Returns status of:
    - Product store (loaded at startup)
    - Database connection
    - Redis connection (only when caching is enabled)
    """
    checks = {
        "store": hasattr(request.app.state, "store"),
        "database": False,
    }

    # Check database
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    # Check Redis
    if cache_service.enabled:
        checks["redis"] = False
        try:
            redis_client.ping()
            checks["redis"] = True
        except Exception as e:
            checks["redis_error"] = str(e)

    # Determine overall status
    all_healthy = all(value for key, value in checks.items() if not key.endswith("_error"))

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }
