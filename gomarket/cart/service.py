"""Cart store: authoritative in-memory cart with background persistence."""
import asyncio
from typing import Callable, List, Optional, Tuple

from gomarket.errors import (
    CartNotReadyError,
    DeserializationError,
    PersistenceWriteError,
    ERROR_STORE_CLOSED,
    ERROR_STORE_NOT_INITIALIZED,
    ERROR_STORE_NOT_LOADED,
)
from gomarket.logging import get_logger, sanitize_id_for_logging
from .models import CartItem, ProductRef
from .storage import CartPersistence

logger = get_logger(__name__)

CartSnapshot = Tuple[CartItem, ...]
Subscriber = Callable[[CartSnapshot], None]


class CartStore:
    """
    Owns the cart for the lifetime of the process.

    Features:
    - add_to_cart merges into an existing line instead of duplicating it
    - decrement to zero removes the line
    - subscribers get a snapshot after every change
    - one persistence write in flight at a time; snapshots queued behind it
      are coalesced so the stored value never goes back to an older cart

    Mutations update memory immediately and return without waiting for the
    write. Use flush() to wait for the store to catch up.
    """

    def __init__(self, persistence: CartPersistence, recover_corrupted: bool = True):
        self.persistence = persistence
        self.recover_corrupted = recover_corrupted
        self._items: List[CartItem] = []
        self._subscribers: List[Subscriber] = []
        self._loaded = False
        self._closed = False
        self._pending: Optional[CartSnapshot] = None
        self._writer: Optional[asyncio.Task] = None
        self.last_write_error: Optional[PersistenceWriteError] = None

    @classmethod
    async def create(cls, persistence: CartPersistence, recover_corrupted: bool = True) -> "CartStore":
        """Construct and load a store."""
        store = cls(persistence, recover_corrupted=recover_corrupted)
        await store.load()
        return store

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Read the persisted cart once. Later calls are ignored."""
        if self._loaded:
            return
        try:
            items = await self.persistence.load()
        except DeserializationError as e:
            if not self.recover_corrupted:
                raise
            logger.warning(f"Corrupted cart data, starting with an empty cart: {e}")
            items = []
        self._items = list(items)
        self._loaded = True
        logger.info(f"Cart loaded with {len(self._items)} item(s)")
        self._notify()

    # ==================== READ ====================

    def get_products(self) -> CartSnapshot:
        """Read-only snapshot of the cart, in insertion order."""
        return tuple(self._items)

    def get_item(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.id == product_id), None)

    @property
    def total_quantity(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ==================== MUTATIONS ====================

    async def add_to_cart(self, product: ProductRef) -> CartSnapshot:
        """Add one unit of product. An existing line with the same id is incremented."""
        self._ensure_open()
        if not isinstance(product, ProductRef):
            product = ProductRef.from_dict(product)

        if self._index_of(product.id) is not None:
            return await self.increment(product.id)

        self._items = [*self._items, CartItem.from_product(product)]
        logger.debug(f"Added {sanitize_id_for_logging(product.id)} to cart")
        return self._commit()

    async def increment(self, product_id: str) -> CartSnapshot:
        """Add one unit to the line with product_id. Unknown ids are ignored."""
        self._ensure_open()
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"Increment ignored, {sanitize_id_for_logging(product_id)} not in cart")
            return self.get_products()

        item = self._items[index]
        updated = list(self._items)
        updated[index] = item.with_quantity(item.quantity + 1)
        self._items = updated
        return self._commit()

    async def decrement(self, product_id: str) -> CartSnapshot:
        """Remove one unit from the line with product_id; the line goes away at zero."""
        self._ensure_open()
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"Decrement ignored, {sanitize_id_for_logging(product_id)} not in cart")
            return self.get_products()

        item = self._items[index]
        updated = list(self._items)
        if item.quantity <= 1:
            del updated[index]
            logger.debug(f"Removed {sanitize_id_for_logging(product_id)} from cart")
        else:
            updated[index] = item.with_quantity(item.quantity - 1)
        self._items = updated
        return self._commit()

    async def clear(self) -> CartSnapshot:
        """Remove every line."""
        self._ensure_open()
        if not self._items:
            return self.get_products()
        self._items = []
        return self._commit()

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call callback with the new snapshot after every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.get_products()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Cart subscriber failed")

    # ==================== PERSISTENCE ====================

    async def flush(self) -> None:
        """Wait until every queued snapshot has been written (or failed)."""
        while self._writer is not None and not self._writer.done():
            await asyncio.shield(self._writer)

    async def aclose(self) -> None:
        """Flush pending writes and reject further mutations."""
        if self._closed:
            return
        self._closed = True
        await self.flush()
        self._subscribers.clear()

    def _commit(self) -> CartSnapshot:
        snapshot = self.get_products()
        self._notify()
        self._pending = snapshot
        if self._writer is None or self._writer.done():
            self._writer = asyncio.get_running_loop().create_task(self._drain())
        return snapshot

    async def _drain(self) -> None:
        while self._pending is not None:
            snapshot, self._pending = self._pending, None
            try:
                await self.persistence.save(snapshot)
                self.last_write_error = None
            except PersistenceWriteError as e:
                # Memory stays authoritative; the next mutation writes again
                self.last_write_error = e
                logger.error(f"Cart write failed: {e}")

    # ==================== HELPERS ====================

    def _ensure_open(self) -> None:
        if self._closed:
            raise CartNotReadyError(ERROR_STORE_CLOSED)
        if not self._loaded:
            raise CartNotReadyError(ERROR_STORE_NOT_LOADED)

    def _index_of(self, product_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == product_id:
                return index
        return None


def require_cart_store(store: Optional[CartStore]) -> CartStore:
    """Return store, or fail fast when no initialized store was provided."""
    if store is None:
        raise CartNotReadyError(ERROR_STORE_NOT_INITIALIZED)
    if not store.loaded:
        raise CartNotReadyError(ERROR_STORE_NOT_LOADED)
    return store
