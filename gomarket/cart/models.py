"""Cart models."""
import math
from dataclasses import dataclass, replace
from typing import Union

from gomarket.errors import ERROR_EMPTY_PRODUCT_ID, ERROR_MISSING_PRODUCT_FIELD, ERROR_NEGATIVE_PRICE

Number = Union[int, float]


def _check_id(product_id) -> None:
    if not product_id or not isinstance(product_id, str):
        raise ValueError(ERROR_EMPTY_PRODUCT_ID)


def _check_price(price) -> None:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValueError(ERROR_NEGATIVE_PRICE)
    if price < 0 or not math.isfinite(price):
        raise ValueError(ERROR_NEGATIVE_PRICE)


@dataclass(frozen=True)
class ProductRef:
    """Product as supplied by the catalog, before it has a cart quantity."""
    id: str
    title: str
    image_url: str
    price: Number

    def __post_init__(self):
        _check_id(self.id)
        _check_price(self.price)

    @classmethod
    def from_dict(cls, data: dict) -> "ProductRef":
        try:
            return cls(
                id=data["id"],
                title=data["title"],
                image_url=data["image_url"],
                price=data["price"],
            )
        except KeyError as e:
            raise ValueError(f"{ERROR_MISSING_PRODUCT_FIELD}: {e.args[0]}") from e


@dataclass(frozen=True)
class CartItem:
    """Single line of the cart. Immutable; quantity changes produce a new item."""
    id: str
    title: str
    image_url: str
    price: Number
    quantity: int = 1

    def __post_init__(self):
        _check_id(self.id)
        _check_price(self.price)
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")

    @classmethod
    def from_product(cls, product: ProductRef) -> "CartItem":
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=1,
        )

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary. Key order is the persisted field order."""
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "price": self.price,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            id=data["id"],
            title=data["title"],
            image_url=data["image_url"],
            price=data["price"],
            quantity=data["quantity"],
        )
