"""Cart package: models, persistence, and the store."""
from .models import CartItem, ProductRef
from .service import CartStore, require_cart_store
from .storage import CartPersistence

__all__ = [
    "CartItem",
    "ProductRef",
    "CartPersistence",
    "CartStore",
    "require_cart_store",
]
