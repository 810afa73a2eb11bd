import json
import redis
from typing import Optional, Any

from kiosk.config import get_settings

settings = get_settings()

# Create Redis client
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

CATALOG_PREFIX = "catalog"


class CacheService:
    """
    Redis cache for rendered catalog listings.

    A listing is stored under the store version it was built from. Any stock
    change bumps the version, so readers look up a fresh key and the stale
    entry just expires after ``ttl`` seconds; nothing has to delete it.

    Redis errors read as a miss and writes become no-ops, so the catalog is
    always served from the product store when Redis is unavailable.
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl: Optional[int] = None, enabled: Optional[bool] = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.CACHE_TTL
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled

    def _make_key(self, prefix: str, key: str) -> str:
        return f"{prefix}:{key}"

    def get(self, prefix: str, key: str) -> Optional[Any]:
        """Return the decoded listing under ``prefix:key``, or None on a miss."""
        if not self.enabled:
            return None
        try:
            value = self.client.get(self._make_key(prefix, key))
            return json.loads(value) if value else None
        except (redis.RedisError, json.JSONDecodeError):
            return None

    def set(self, prefix: str, key: str, value: Any) -> bool:
        """
        Store a listing for ``ttl`` seconds.

        Returns:
            False when caching is disabled or Redis rejected the write
        """
        if not self.enabled:
            return False
        try:
            self.client.setex(self._make_key(prefix, key), self.ttl, json.dumps(value, default=str))
            return True
        except (redis.RedisError, TypeError):
            return False


def catalog_key(version: int) -> str:
    return f"v{version}"


# Singleton cache service instance
cache_service = CacheService()
