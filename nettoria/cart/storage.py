"""Key-value persistence for carts and the service selection slots."""
import json
from typing import Any, Dict, Optional

from nettoria.config import Settings, get_settings
from nettoria.db import StorageKeys, get_redis
from nettoria.errors import ERROR_CART_STORAGE
from nettoria.logging import get_logger, sanitize_string_for_logging
from .models import Cart

logger = get_logger(__name__)

SLOT_KEYS = (StorageKeys.SELECTED_SERVICE, StorageKeys.EDITING_SERVICE)


class MemoryBackend:
    """Dict-backed store. Last write wins, like the browser's local storage."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = data if data is not None else {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class RedisBackend:
    """Upstash Redis store; every write refreshes the key TTL."""

    def __init__(self, client=None, ttl: Optional[int] = None):
        self._client = client
        self.ttl = ttl if ttl is not None else get_settings().cart_ttl

    @property
    def client(self):
        """Get Redis client (lazy initialization)."""
        if self._client is None:
            self._client = get_redis()
        return self._client

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value, ex=self.ttl)

    def delete(self, key: str) -> None:
        self.client.delete(key)


def build_backend(settings: Optional[Settings] = None):
    """Create the backend named by CART_STORAGE."""
    settings = settings or get_settings()
    if settings.storage_backend == "redis":
        return RedisBackend(ttl=settings.cart_ttl)
    if settings.storage_backend != "memory":
        logger.warning(f"Unknown CART_STORAGE '{settings.storage_backend}', using memory")
    return MemoryBackend()


class CartStorage:
    """
    Persistence adapter between a Cart and a key-value backend.

    Storage problems never reach the caller: a corrupt or unreadable cart
    loads as an empty one and a failed write is logged and reported as False.
    """

    def __init__(self, backend, namespace: Optional[str] = None):
        self.backend = backend
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return StorageKeys.scoped(key, self.namespace)

    def _read_json(self, key: str) -> Any:
        scoped = self._key(key)
        try:
            raw = self.backend.get(scoped)
        except Exception as e:
            logger.error(f"{ERROR_CART_STORAGE}: read {sanitize_string_for_logging(scoped)} failed: {e}")
            return None

        if not raw:
            return None

        try:
            return json.loads(raw)
        except (ValueError, TypeError, RecursionError) as e:
            # ValueError covers JSONDecodeError and over-long integer literals
            logger.warning(f"Corrupted data under {sanitize_string_for_logging(scoped)}: {e}")
            return None

    def _write_json(self, key: str, data: Any) -> bool:
        scoped = self._key(key)
        try:
            self.backend.set(scoped, json.dumps(data, ensure_ascii=False))
            return True
        except Exception as e:
            logger.error(f"{ERROR_CART_STORAGE}: write {sanitize_string_for_logging(scoped)} failed: {e}")
            return False

    def _delete(self, key: str) -> bool:
        scoped = self._key(key)
        try:
            self.backend.delete(scoped)
            return True
        except Exception as e:
            logger.error(f"{ERROR_CART_STORAGE}: delete {sanitize_string_for_logging(scoped)} failed: {e}")
            return False

    def load(self) -> Cart:
        """Read the stored cart; anything unusable yields an empty cart."""
        data = self._read_json(StorageKeys.CART)
        if data is None:
            return Cart()
        if not isinstance(data, list):
            logger.warning(f"Stored cart is a {type(data).__name__}, expected a list")
            return Cart()
        return Cart.from_list(data)

    def save(self, cart: Cart) -> bool:
        """Write the cart's items verbatim as a JSON array."""
        return self._write_json(StorageKeys.CART, cart.to_list())

    def reset(self) -> None:
        """Forget the stored cart and the pending service selection."""
        self._delete(StorageKeys.CART)
        self._delete(StorageKeys.SELECTED_SERVICE)

    def load_slot(self, key: str) -> Optional[dict]:
        """Read the selectedService / editingService slot."""
        self._check_slot(key)
        data = self._read_json(key)
        return data if isinstance(data, dict) else None

    def save_slot(self, key: str, data: dict) -> bool:
        self._check_slot(key)
        return self._write_json(key, data)

    def clear_slot(self, key: str) -> bool:
        self._check_slot(key)
        return self._delete(key)

    @staticmethod
    def _check_slot(key: str) -> None:
        if key not in SLOT_KEYS:
            raise ValueError(f"Unknown storage slot: {key}")
