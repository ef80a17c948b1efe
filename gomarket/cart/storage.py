"""Persistence of the whole cart under a single key-value entry."""
import json
import math
from typing import Annotated, List, Optional, Sequence, Union

from pydantic import AfterValidator, BaseModel, Field, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from gomarket.db import CartKeys, KeyValueStore
from gomarket.errors import DeserializationError, PersistenceReadError, PersistenceWriteError
from gomarket.logging import get_logger
from .models import CartItem

logger = get_logger(__name__)


def _check_price(v):
    # JSON parsing lets NaN, Infinity and 1e999 through
    if v < 0 or not math.isfinite(v):
        raise ValueError("price must be a finite number >= 0")
    return v


# int stays int so prices round-trip exactly
Price = Annotated[Union[StrictInt, StrictFloat], AfterValidator(_check_price)]


class StoredCartItem(BaseModel):
    """Schema of one persisted cart line."""
    id: StrictStr = Field(min_length=1)
    title: StrictStr
    image_url: StrictStr
    price: Price
    quantity: StrictInt = Field(ge=1)


_stored_cart = TypeAdapter(List[StoredCartItem])


def serialize_cart(items: Sequence[CartItem]) -> str:
    """Encode the cart as compact JSON, fields in a fixed order."""
    return json.dumps(
        [item.to_dict() for item in items],
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def deserialize_cart(raw: str, key: str = "") -> List[CartItem]:
    """Decode and validate a stored cart. Raises DeserializationError."""
    try:
        stored = _stored_cart.validate_json(raw)
    except ValidationError as e:
        raise DeserializationError(key, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e

    seen = set()
    items = []
    for entry in stored:
        if entry.id in seen:
            raise DeserializationError(key, f"duplicate id {entry.id!r}")
        seen.add(entry.id)
        try:
            items.append(CartItem.from_dict(entry.model_dump()))
        except ValueError as e:
            raise DeserializationError(key, str(e)) from e
    return items


class CartPersistence:
    """
    Reads and writes the cart snapshot at "<namespace>:cartProducts".

    Every save writes the full cart, overwriting what was there.
    """

    def __init__(self, store: KeyValueStore, namespace: str, ttl_seconds: int = 0):
        self.store = store
        self.key = CartKeys.cart_products_key(namespace)
        self.ttl_seconds = ttl_seconds

    async def load(self) -> List[CartItem]:
        """Return the stored cart, or an empty list when nothing is stored."""
        try:
            raw = await self.store.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read cart from storage: {e}")
            raise PersistenceReadError(self.key, str(e)) from e

        if raw is None or raw == "":
            return []

        items = deserialize_cart(raw, self.key)
        logger.debug(f"Loaded {len(items)} cart item(s) from {self.key}")
        return items

    async def save(self, items: Sequence[CartItem]) -> None:
        payload = serialize_cart(items)
        ex: Optional[int] = self.ttl_seconds or None
        try:
            await self.store.set(self.key, payload, ex=ex)
        except Exception as e:
            raise PersistenceWriteError(self.key, str(e)) from e
