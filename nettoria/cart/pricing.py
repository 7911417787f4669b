"""Duration-tiered discounts and extras pricing."""
from decimal import Decimal
from typing import Any, Mapping, Optional

from nettoria.config import get_settings
from nettoria.services.money import parse_positive_int, parse_price

# (minimum months, discount fraction), highest tier first
DURATION_TIERS = (
    (12, Decimal("0.20")),
    (6, Decimal("0.15")),
    (3, Decimal("0.10")),
)

NO_DISCOUNT = Decimal("0")


def calculate_discount(duration: int) -> Decimal:
    """Discount fraction for a commitment of ``duration`` months."""
    for min_months, discount in DURATION_TIERS:
        if duration >= min_months:
            return discount
    return NO_DISCOUNT


def discount_percent(duration: int) -> int:
    """Discount for ``duration`` months as a whole percentage."""
    return int(calculate_discount(duration) * 100)


def calculate_extra_price(
    extras: Optional[Mapping[str, Any]],
    price_per_ip: Optional[int] = None,
) -> int:
    """
    Monthly surcharge for the configured extras of a service.

    Only IP addresses beyond the first one are charged. Every entry of
    ``extras["options"]`` (option name -> price) is added as-is.
    """
    if not extras:
        return 0

    if price_per_ip is None:
        price_per_ip = extras.get("ip_price") or get_settings().extra_ip_price
    price_per_ip = parse_price(price_per_ip)

    total = 0
    ip_count = parse_positive_int(extras.get("ip_count"), default=1)
    if ip_count > 1:
        total += (ip_count - 1) * price_per_ip

    options = extras.get("options") or {}
    if isinstance(options, Mapping):
        total += sum(parse_price(price) for price in options.values())

    return total


def configured_unit_price(base_price: Any, extras: Optional[Mapping[str, Any]] = None) -> int:
    """Monthly unit price of a plan plus its extras."""
    return parse_price(base_price) + calculate_extra_price(extras)
