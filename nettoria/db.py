"""
Redis client for cart storage.

Provides a singleton Upstash Redis client. Only used when
CART_STORAGE=redis; the default backend keeps carts in process memory.
"""
from typing import Optional

from upstash_redis import Redis

from nettoria.config import get_settings

_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


class StorageKeys:
    """Key names shared with the storefront pages."""

    CART = "cart"
    SELECTED_SERVICE = "selectedService"
    EDITING_SERVICE = "editingService"

    @staticmethod
    def scoped(key: str, namespace: Optional[str] = None) -> str:
        """Prefix a key with a session namespace (``{namespace}:{key}``)."""
        return f"{namespace}:{key}" if namespace else key
