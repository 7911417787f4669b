"""Cart models with duration-tiered pricing."""
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional

from nettoria.errors import CartItemNotFoundError, InvalidPatchError
from nettoria.logging import get_logger
from nettoria.services.money import multiply, parse_positive_int, parse_price, subtract, to_int
from .pricing import calculate_discount, discount_percent

logger = get_logger(__name__)

PATCHABLE_FIELDS = frozenset({"name", "quantity", "price", "type", "duration", "extras"})


def generate_code(item_type: Optional[str]) -> str:
    """Item code in the storefront's ``{TYPE}-{timestamp}`` form."""
    prefix = (item_type or "item").upper()
    return f"{prefix}-{int(time.time() * 1000)}"


@dataclass
class LineItem:
    """One purchasable service in the cart."""
    name: str
    code: str
    quantity: int = 1
    price: int = 0  # Monthly unit price, whole currency units
    type: str = ""  # server | host | cloud-server | vpn
    extras: Dict[str, Any] = field(default_factory=dict)
    duration: Optional[int] = None  # Months; falls back to extras["duration"]

    def __post_init__(self):
        self.extras = dict(self.extras) if isinstance(self.extras, Mapping) else {}
        if self.duration is None:
            self.duration = self.extras.get("duration")
        self._normalize()

    def _normalize(self) -> None:
        self.name = "" if self.name is None else str(self.name)
        self.code = "" if self.code is None else str(self.code)
        self.type = "" if self.type is None else str(self.type)
        self.quantity = parse_positive_int(self.quantity)
        self.price = parse_price(self.price)
        self.duration = parse_positive_int(self.duration)

    def calculate_discount(self) -> Decimal:
        """Discount fraction for this item's duration tier."""
        return calculate_discount(self.duration)

    def get_final_price(self) -> dict:
        """Monthly unit price before and after the duration discount."""
        discount = self.calculate_discount()
        discounted = to_int(multiply(self.price, subtract(1, discount)))
        return {
            "original": self.price,
            "discounted": discounted,
            "discount_percent": discount_percent(self.duration),
        }

    def get_total_price(self) -> dict:
        """Price for the whole duration (rounded per unit, not per total)."""
        final = self.get_final_price()
        return {
            "original": final["original"] * self.duration,
            "discounted": final["discounted"] * self.duration,
        }

    def apply_patch(self, patch: Mapping[str, Any]) -> "LineItem":
        """Update fields in place; the code never changes."""
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise InvalidPatchError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        for key, value in patch.items():
            setattr(self, key, value)

        if "extras" in patch:
            self.extras = dict(self.extras) if isinstance(self.extras, Mapping) else {}
            if "duration" not in patch and "duration" in self.extras:
                self.duration = self.extras["duration"]

        self._normalize()
        return self

    def to_dict(self) -> dict:
        """Convert to the stored JSON shape."""
        return {
            "name": self.name,
            "code": self.code,
            "quantity": self.quantity,
            "price": self.price,
            "type": self.type,
            "duration": self.duration,
            "extras": dict(self.extras),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        """Rebuild from stored data, re-running normalization."""
        return cls(
            name=data.get("name"),
            code=data.get("code"),
            quantity=data.get("quantity"),
            price=data.get("price"),
            type=data.get("type"),
            extras=data.get("extras"),
            duration=data.get("duration"),
        )


@dataclass
class Cart:
    """Ordered collection of line items, unique by code."""
    items: List[LineItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def line_count(self) -> int:
        """Number of distinct line items."""
        return len(self.items)

    def _index_of(self, code: str) -> int:
        for index, item in enumerate(self.items):
            if item.code == code:
                return index
        return -1

    def get_item(self, code: str) -> Optional[LineItem]:
        index = self._index_of(code)
        return self.items[index] if index != -1 else None

    def add_item(
        self,
        name: str,
        code: str,
        quantity: Any = 1,
        price: Any = 0,
        type: str = "",
        extras: Optional[Mapping[str, Any]] = None,
        duration: Any = None,
    ) -> LineItem:
        """Add an item, replacing (not merging) one with the same code."""
        item = LineItem(
            name=name,
            code=code,
            quantity=quantity,
            price=price,
            type=type,
            extras=extras or {},
            duration=duration,
        )

        index = self._index_of(item.code)
        if index != -1:
            self.items[index] = item
        else:
            self.items.append(item)
        return item

    def remove_item(self, code: str) -> bool:
        """Drop every item with ``code``; returns whether anything was removed."""
        before = len(self.items)
        self.items = [item for item in self.items if item.code != code]
        return len(self.items) != before

    def update_item(self, code: str, patch: Mapping[str, Any]) -> LineItem:
        """Edit an item in place, keeping its position."""
        item = self.get_item(code)
        if item is None:
            raise CartItemNotFoundError(code)
        return item.apply_patch(patch)

    def clear(self) -> None:
        self.items = []

    def get_item_count(self) -> int:
        """Total number of units (sum of quantities)."""
        return sum(item.quantity for item in self.items)

    def get_total_price(self) -> dict:
        """Totals over the whole cart before and after duration discounts."""
        original = 0
        discounted = 0
        for item in self.items:
            prices = item.get_total_price()
            original += prices["original"]
            discounted += prices["discounted"]

        return {
            "original": original,
            "discounted": discounted,
            "saved": original - discounted,
        }

    def to_list(self) -> List[dict]:
        """Convert to the stored JSON array."""
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, data: List[Any]) -> "Cart":
        """Create from the stored JSON array, skipping malformed entries."""
        items = []
        for entry in data:
            if not isinstance(entry, Mapping):
                logger.warning(f"Skipping malformed cart entry of type {type(entry).__name__}")
                continue
            items.append(LineItem.from_dict(entry))
        return cls(items=items)
