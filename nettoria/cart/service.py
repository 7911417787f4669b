"""Cart manager: binds a cart to its storage and persists every mutation."""
from typing import Any, Mapping, Optional

from nettoria.db import StorageKeys
from nettoria.errors import (
    CartItemNotFoundError,
    CartStorageError,
    NoEditInProgressError,
    NoSelectedServiceError,
)
from nettoria.logging import get_logger, sanitize_string_for_logging
from .models import Cart, LineItem, generate_code
from .pricing import configured_unit_price
from .storage import CartStorage
from .summary import CartSummary, summarize

logger = get_logger(__name__)


class CartManager:
    """
    Manages one session's cart.

    Features:
    - Replace-on-code add, in-place update, remove, clear
    - Persist after every mutation through the injected CartStorage
    - Catalog selection and edit slots shared with the storefront pages
    """

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self._cart: Optional[Cart] = None  # Lazy load

    @property
    def cart(self) -> Cart:
        """Get the cart (loaded from storage on first access)."""
        if self._cart is None:
            self._cart = self.storage.load()
        return self._cart

    def _persist(self) -> bool:
        saved = self.storage.save(self.cart)
        if not saved:
            logger.warning("Cart kept in memory only; storage write failed")
        return saved

    def add_item(
        self,
        name: str,
        code: str,
        quantity: Any = 1,
        price: Any = 0,
        type: str = "",
        extras: Optional[Mapping[str, Any]] = None,
        duration: Any = None,
    ) -> bool:
        """Add or replace an item. Never raises; returns success."""
        try:
            item = self.cart.add_item(name, code, quantity, price, type, extras, duration)
            self._persist()
            logger.info(f"Item added to cart: {sanitize_string_for_logging(item.code)}")
            return True
        except Exception as e:
            logger.error(f"Error adding item to cart: {e}", exc_info=True)
            return False

    def remove_item(self, code: str) -> bool:
        """Remove an item; removing an unknown code is a no-op."""
        removed = self.cart.remove_item(code)
        self._persist()
        return removed

    def update_item(self, code: str, patch: Mapping[str, Any]) -> LineItem:
        """Edit an item in place and persist."""
        item = self.cart.update_item(code, patch)
        self._persist()
        return item

    def clear_cart(self) -> None:
        self.cart.clear()
        self._persist()

    def reset(self) -> None:
        """Empty the cart and drop every persisted key for this session."""
        self.cart.clear()
        self.storage.reset()
        self.storage.clear_slot(StorageKeys.EDITING_SERVICE)
        logger.info("Cart storage has been reset")

    def get_item_count(self) -> int:
        return self.cart.get_item_count()

    def get_total_price(self) -> dict:
        return self.cart.get_total_price()

    def get_summary(self) -> CartSummary:
        return summarize(self.cart)

    # ==================== SERVICE SELECTION ====================

    def select_service(self, service: Mapping[str, Any]) -> bool:
        """Remember the catalog service the user is about to configure."""
        return self.storage.save_slot(StorageKeys.SELECTED_SERVICE, dict(service))

    def get_selected_service(self) -> Optional[dict]:
        return self.storage.load_slot(StorageKeys.SELECTED_SERVICE)

    def add_selected_service(
        self,
        duration: Any = 1,
        extras: Optional[Mapping[str, Any]] = None,
    ) -> LineItem:
        """Turn the stored selection into a cart item priced with its extras."""
        service = self.get_selected_service()
        if not service:
            raise NoSelectedServiceError()

        extras = dict(extras or {})
        item_type = service.get("type") or "server"
        item = self.cart.add_item(
            name=service.get("name"),
            code=service.get("code") or generate_code(item_type),
            quantity=service.get("quantity", 1),
            price=configured_unit_price(service.get("price"), extras),
            type=item_type,
            extras=extras,
            duration=duration,
        )
        self._persist()
        self.storage.clear_slot(StorageKeys.SELECTED_SERVICE)
        return item

    # ==================== EDITING ====================

    def start_edit(self, code: str) -> dict:
        """Snapshot an item into the editing slot; the item stays in the cart."""
        item = self.cart.get_item(code)
        if item is None:
            raise CartItemNotFoundError(code)

        snapshot = item.to_dict()
        if not self.storage.save_slot(StorageKeys.EDITING_SERVICE, snapshot):
            logger.warning(f"Edit of {sanitize_string_for_logging(code)} not opened; slot write failed")
            raise CartStorageError()
        return snapshot

    def get_editing(self) -> Optional[dict]:
        return self.storage.load_slot(StorageKeys.EDITING_SERVICE)

    def finish_edit(self, patch: Mapping[str, Any]) -> LineItem:
        """Apply ``patch`` to the item being edited and close the edit."""
        editing = self.get_editing()
        if not editing or not editing.get("code"):
            raise NoEditInProgressError()

        item = self.update_item(editing["code"], patch)
        self.storage.clear_slot(StorageKeys.EDITING_SERVICE)
        return item

    def cancel_edit(self) -> None:
        self.storage.clear_slot(StorageKeys.EDITING_SERVICE)
