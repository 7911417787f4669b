"""Cart package: pricing, models, storage, summary and manager facade."""
from .models import Cart, LineItem, generate_code
from .pricing import calculate_discount, calculate_extra_price, configured_unit_price
from .service import CartManager
from .storage import CartStorage, MemoryBackend, RedisBackend, build_backend
from .summary import CartSummary, summarize

__all__ = [
    "Cart",
    "LineItem",
    "generate_code",
    "calculate_discount",
    "calculate_extra_price",
    "configured_unit_price",
    "CartManager",
    "CartStorage",
    "MemoryBackend",
    "RedisBackend",
    "build_backend",
    "CartSummary",
    "summarize",
]
