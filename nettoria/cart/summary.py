"""Subtotal, tax and grand total for a cart snapshot."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from nettoria.config import get_settings
from nettoria.services.money import format_money, multiply, to_int
from .models import Cart

# Fixed VAT-equivalent rate; TAX_RATE overrides it through settings
TAX_RATE = Decimal("0.09")


def calculate_tax(amount: int, rate: Union[Decimal, str, float] = TAX_RATE) -> int:
    """Tax on ``amount``, rounded to a whole unit."""
    return to_int(multiply(amount, rate))


@dataclass(frozen=True)
class CartSummary:
    """Amounts shown in the order summary box."""
    subtotal_original: int
    subtotal: int
    saved: int
    tax: int
    total: int
    item_count: int
    line_count: int

    def to_dict(self, currency: Optional[str] = None) -> dict:
        currency = currency or get_settings().currency
        return {
            "subtotal_original": self.subtotal_original,
            "subtotal": self.subtotal,
            "saved": self.saved,
            "tax": self.tax,
            "total": self.total,
            "item_count": self.item_count,
            "line_count": self.line_count,
            "display": {
                "subtotal_original": format_money(self.subtotal_original, currency),
                "subtotal": format_money(self.subtotal, currency),
                "saved": format_money(self.saved, currency),
                "tax": format_money(self.tax, currency),
                "total": format_money(self.total, currency),
            },
        }


def summarize(cart: Cart, tax_rate: Union[Decimal, str, float, None] = None) -> CartSummary:
    """
    Summarize a cart.

    The subtotal is the discounted one (rounded per monthly unit, then
    multiplied by duration); tax is charged on it. The pre-discount
    subtotal is kept alongside for display.
    """
    if tax_rate is None:
        tax_rate = get_settings().tax_rate

    totals = cart.get_total_price()
    tax = calculate_tax(totals["discounted"], tax_rate)

    return CartSummary(
        subtotal_original=totals["original"],
        subtotal=totals["discounted"],
        saved=totals["saved"],
        tax=tax,
        total=totals["discounted"] + tax,
        item_count=cart.get_item_count(),
        line_count=cart.line_count,
    )
