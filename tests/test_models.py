"""Tests for cart models"""
import dataclasses
import pytest

from gomarket.cart import CartItem, ProductRef


class TestProductRef:
    """Tests for ProductRef dataclass."""

    def test_create_product_ref(self):
        product = ProductRef(id="p1", title="Shirt", image_url="u", price=10)

        assert product.id == "p1"
        assert product.price == 10

    @pytest.mark.parametrize("bad_id", ["", None, 42])
    def test_rejects_missing_id(self, bad_id):
        with pytest.raises(ValueError):
            ProductRef(id=bad_id, title="Shirt", image_url="u", price=10)

    @pytest.mark.parametrize("bad_price", [-1, -0.01, float("inf"), float("nan"), True, "10"])
    def test_rejects_bad_price(self, bad_price):
        with pytest.raises(ValueError):
            ProductRef(id="p1", title="Shirt", image_url="u", price=bad_price)

    def test_zero_price_allowed(self):
        assert ProductRef(id="free", title="Sticker", image_url="u", price=0).price == 0

    def test_from_dict(self):
        product = ProductRef.from_dict(
            {"id": "p1", "title": "Shirt", "image_url": "u", "price": 10}
        )
        assert product == ProductRef(id="p1", title="Shirt", image_url="u", price=10)

    def test_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="image_url"):
            ProductRef.from_dict({"id": "p1", "title": "Shirt", "price": 10})


class TestCartItem:
    """Tests for CartItem dataclass."""

    def test_from_product_starts_at_one(self, shirt):
        item = CartItem.from_product(shirt)

        assert item.quantity == 1
        assert item.title == "Shirt"
        assert item.image_url == "u"
        assert item.price == 10

    def test_is_immutable(self, shirt):
        item = CartItem.from_product(shirt)

        with pytest.raises(dataclasses.FrozenInstanceError):
            item.quantity = 5

    def test_with_quantity_returns_new_item(self, shirt):
        item = CartItem.from_product(shirt)
        bumped = item.with_quantity(3)

        assert bumped.quantity == 3
        assert item.quantity == 1

    @pytest.mark.parametrize("bad_quantity", [0, -1, 1.5, True])
    def test_rejects_bad_quantity(self, bad_quantity):
        with pytest.raises(ValueError):
            CartItem(id="p1", title="Shirt", image_url="u", price=10, quantity=bad_quantity)

    def test_to_dict_field_order(self):
        item = CartItem(id="p1", title="Shirt", image_url="u", price=10, quantity=2)

        assert list(item.to_dict()) == ["id", "title", "image_url", "price", "quantity"]

    def test_from_dict(self):
        data = {"id": "p1", "title": "Shirt", "image_url": "u", "price": 10, "quantity": 2}

        item = CartItem.from_dict(data)
        assert item.to_dict() == data
