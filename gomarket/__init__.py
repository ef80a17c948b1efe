"""GoMarketplace shopping cart state manager."""
from gomarket.cart import CartItem, CartPersistence, CartStore, ProductRef, require_cart_store
from gomarket.config import CartSettings
from gomarket.db import build_store

__version__ = "1.0.0"


async def open_cart_store(settings: CartSettings | None = None) -> CartStore:
    """Build storage from settings and return a loaded CartStore."""
    settings = settings or CartSettings.from_env()
    persistence = CartPersistence(
        build_store(settings),
        namespace=settings.namespace,
        ttl_seconds=settings.ttl_seconds,
    )
    return await CartStore.create(persistence, recover_corrupted=settings.recover_corrupted)


__all__ = [
    "CartItem",
    "CartPersistence",
    "CartSettings",
    "CartStore",
    "ProductRef",
    "open_cart_store",
    "require_cart_store",
]
