"""Tests for duration tiers and extras pricing"""
import pytest
from decimal import Decimal

from nettoria.cart.pricing import (
    calculate_discount,
    calculate_extra_price,
    configured_unit_price,
    discount_percent,
)


@pytest.mark.parametrize("duration", [-1, 0, 1, 2])
def test_no_discount_below_three_months(duration):
    assert calculate_discount(duration) == 0


@pytest.mark.parametrize(
    "duration,expected",
    [
        (3, Decimal("0.10")),
        (5, Decimal("0.10")),
        (6, Decimal("0.15")),
        (11, Decimal("0.15")),
        (12, Decimal("0.20")),
        (36, Decimal("0.20")),
    ],
)
def test_discount_tiers_inclusive(duration, expected):
    """Tier boundaries belong to the higher tier"""
    assert calculate_discount(duration) == expected


def test_discount_percent():
    assert discount_percent(6) == 15
    assert discount_percent(1) == 0


def test_extra_ips_charged_beyond_first():
    """Only additional addresses cost money"""
    assert calculate_extra_price({"ip_count": 1}) == 0
    assert calculate_extra_price({"ip_count": 3}) == 100000
    assert calculate_extra_price({"ip_count": "2", "ip_price": 70000}) == 70000


def test_extra_options_summed():
    extras = {
        "ip_count": 2,
        "options": {"ram": "200,000", "disk": 150000},
        "datacenter": "tehran",
    }

    assert calculate_extra_price(extras, price_per_ip=10000) == 360000


def test_no_extras():
    assert calculate_extra_price(None) == 0
    assert calculate_extra_price({}) == 0


def test_configured_unit_price():
    assert configured_unit_price("599,000 تومان", {"ip_count": 2}) == 649000
