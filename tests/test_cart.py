"""
Tests for LineItem and Cart
"""

import pytest
from decimal import Decimal
from nettoria.cart import Cart, LineItem, generate_code
from nettoria.errors import CartItemNotFoundError, InvalidPatchError


class TestLineItem:
    """Tests for LineItem dataclass."""

    def test_create_line_item(self):
        """Test creating a line item."""
        item = LineItem(
            name="A",
            code="X1",
            quantity=1,
            price=100000,
            type="server",
            duration=6,
        )

        assert item.code == "X1"
        assert item.quantity == 1
        assert item.duration == 6
        assert item.extras == {}

    def test_final_price_calculation(self):
        """Test unit price after the duration discount."""
        item = LineItem(name="A", code="X1", quantity=1, price=100000, type="server", duration=6)

        assert item.get_final_price() == {
            "original": 100000,
            "discounted": 85000,
            "discount_percent": 15,
        }

    def test_total_price_calculation(self):
        """Test price over the whole duration."""
        item = LineItem(name="A", code="X1", quantity=1, price=100000, type="server", duration=6)

        # 85000 * 6
        assert item.get_total_price() == {"original": 600000, "discounted": 510000}

    def test_total_rounds_per_unit(self):
        """Discounted total is the rounded unit price times the duration."""
        item = LineItem(name="A", code="X1", price=99999, duration=3)

        # 99999 * 0.9 = 89999.1 -> 89999 per month
        assert item.get_final_price()["discounted"] == 89999
        assert item.get_total_price()["discounted"] == 89999 * 3

    def test_price_string_normalized(self):
        """Test price text from a catalog card."""
        item = LineItem(name="A", code="X1", price="599,000 تومان")

        assert item.price == 599000

    def test_malformed_numbers_use_defaults(self):
        """Test that bad numeric input never raises."""
        item = LineItem(name="A", code="X1", quantity="abc", price="free", duration="soon")

        assert item.quantity == 1
        assert item.price == 0
        assert item.duration == 1

    def test_large_price_exact(self):
        """Test a price wider than Decimal's default precision survives pricing and storage."""
        price = 10 ** 30
        item = LineItem(name="A", code="X1", price=str(price), duration=6)

        assert item.get_final_price()["discounted"] == 85 * 10 ** 28
        assert item.get_total_price()["discounted"] == 6 * 85 * 10 ** 28
        assert LineItem.from_dict(item.to_dict()).price == price

    def test_overlong_numbers_use_defaults(self):
        item = LineItem(name="A", code="X1", quantity="9" * 5000, price="9" * 5000, duration="9" * 5000)

        assert item.price == 0
        assert item.quantity == 1
        assert item.duration == 1

    def test_duration_from_extras(self):
        """Test duration taken from extras when not passed explicitly."""
        item = LineItem(name="A", code="X1", price=1000, extras={"duration": "12"})

        assert item.duration == 12
        assert item.calculate_discount() == Decimal("0.20")

    def test_explicit_duration_wins(self):
        item = LineItem(name="A", code="X1", price=1000, extras={"duration": 12}, duration=3)

        assert item.duration == 3

    def test_apply_patch(self):
        """Test in-place update re-normalizes fields."""
        item = LineItem(name="A", code="X1", price=1000)
        item.apply_patch({"price": "2,500", "duration": 12, "quantity": "0"})

        assert item.price == 2500
        assert item.duration == 12
        assert item.quantity == 1
        assert item.code == "X1"

    def test_apply_patch_rejects_code(self):
        item = LineItem(name="A", code="X1", price=1000)

        with pytest.raises(InvalidPatchError):
            item.apply_patch({"code": "X2"})

    def test_from_dict_reapplies_duration(self):
        """Test deserialization keeps the stored duration."""
        data = {
            "name": "A",
            "code": "X1",
            "quantity": 2,
            "price": "100000",
            "type": "vpn",
            "duration": 12,
            "extras": {"os": "ubuntu"},
        }

        item = LineItem.from_dict(data)
        assert item.duration == 12
        assert item.price == 100000
        assert item.to_dict() == {**data, "price": 100000}

    def test_generate_code(self):
        code = generate_code("cloud-server")

        assert code.startswith("CLOUD-SERVER-")
        assert code.rsplit("-", 1)[1].isdigit()


class TestCart:
    """Tests for Cart dataclass."""

    def test_create_empty_cart(self):
        """Test creating an empty cart."""
        cart = Cart()

        assert cart.is_empty
        assert cart.get_item_count() == 0
        assert cart.get_total_price() == {"original": 0, "discounted": 0, "saved": 0}

    def test_add_replaces_same_code(self):
        """Test that a repeated code replaces the item instead of merging."""
        cart = Cart()
        cart.add_item("A", "X1", 1, 100000, "server", duration=1)
        cart.add_item("B", "X2", 1, 50000, "host")
        cart.add_item("A2", "X1", 3, 120000, "server", duration=6)

        assert len(cart) == 2
        assert [item.code for item in cart] == ["X1", "X2"]
        replaced = cart.get_item("X1")
        assert replaced.name == "A2"
        assert replaced.quantity == 3
        assert replaced.price == 120000
        assert replaced.duration == 6

    def test_remove_item(self):
        """Test removing an item and removing an unknown code."""
        cart = Cart()
        cart.add_item("A", "X1", 2, 1000, "server")
        cart.add_item("B", "X2", 1, 1000, "server")

        assert cart.remove_item("X1") is True
        assert cart.get_item_count() == 1
        assert cart.remove_item("missing") is False
        assert cart.get_item_count() == 1

    def test_item_count_sums_quantities(self):
        cart = Cart()
        cart.add_item("A", "X1", 2, 1000, "server")
        cart.add_item("B", "X2", 3, 1000, "server")

        assert cart.get_item_count() == 5
        assert cart.line_count == 2

    def test_update_item_in_place(self):
        """Test edit keeps position and code."""
        cart = Cart()
        cart.add_item("A", "X1", 1, 1000, "server")
        cart.add_item("B", "X2", 1, 1000, "server")

        item = cart.update_item("X1", {"duration": 12, "extras": {"os": "debian"}})

        assert cart.items[0] is item
        assert item.duration == 12
        assert item.extras == {"os": "debian"}

    def test_update_missing_item(self):
        cart = Cart()

        with pytest.raises(CartItemNotFoundError):
            cart.update_item("nope", {"quantity": 2})

    def test_cart_totals(self, sample_cart):
        """Test totals over the sample servers."""
        totals = sample_cart.get_total_price()

        # 599000*6 + 899000, 509150*6 + 899000
        assert totals == {
            "original": 4493000,
            "discounted": 3953900,
            "saved": 539100,
        }

    def test_clear_cart(self, sample_cart):
        sample_cart.clear()

        assert sample_cart.get_total_price() == {"original": 0, "discounted": 0, "saved": 0}

    def test_cart_serialization(self, sample_cart):
        """Test cart serialization and deserialization."""
        restored = Cart.from_list(sample_cart.to_list())

        assert restored == sample_cart

    def test_from_list_skips_malformed_entries(self):
        cart = Cart.from_list([{"name": "A", "code": "X1", "price": 10}, "garbage", 42])

        assert [item.code for item in cart] == ["X1"]
