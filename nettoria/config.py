"""
Runtime settings read from environment variables.

Every value has a default so the cart works out of the box with the
in-memory backend; Redis is opt-in via CART_STORAGE=redis.
"""
import os
from dataclasses import dataclass
from decimal import Decimal
from functools import cache


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.environ.get(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    if v is None:
        return default
    return int(v)


@dataclass(frozen=True)
class Settings:
    tax_rate: Decimal
    currency: str
    extra_ip_price: int
    storage_backend: str
    redis_url: str
    redis_token: str
    cart_ttl: int


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        tax_rate=Decimal(_get_env("TAX_RATE", default="0.09")),
        currency=_get_env("CURRENCY", default="تومان"),
        extra_ip_price=_get_int("EXTRA_IP_PRICE", default=50000),
        storage_backend=(_get_env("CART_STORAGE", default="memory")).lower(),
        redis_url=_get_env("UPSTASH_REDIS_REST_URL", default=""),
        redis_token=_get_env("UPSTASH_REDIS_REST_TOKEN", default=""),
        cart_ttl=_get_int("CART_TTL", default=86400),
    )


@cache
def get_settings() -> Settings:
    """Get process-wide settings (read once)."""
    return load_settings()
