"""
Key-value storage for the cart.

Provides:
- KeyValueStore protocol: the only storage surface the cart depends on
- RedisKeyValueStore over the async Upstash Redis client
- MemoryKeyValueStore for local development and tests
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from upstash_redis.asyncio import Redis as AsyncRedis

from gomarket.config import CartSettings, STORAGE_BACKEND_REDIS


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable string key-value store, atomic per key."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> None:
        ...


class MemoryKeyValueStore:
    """Dict-backed store. Expiry is accepted and ignored."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> None:
        self.data[key] = value


class RedisKeyValueStore:
    """Adapter from the Upstash client to KeyValueStore."""

    def __init__(self, client: AsyncRedis):
        self.client = client

    async def get(self, key: str) -> Optional[str]:
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> None:
        if ex:
            await self.client.set(key, value, ex=ex)
        else:
            await self.client.set(key, value)


_redis_client: Optional[AsyncRedis] = None


def get_redis(url: str, token: str) -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses the standard Upstash credentials:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not url or not token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=url, token=token)

    return _redis_client


def reset_redis() -> None:
    """Drop the cached Redis client."""
    global _redis_client
    _redis_client = None


class CartKeys:
    """Key layout for persisted cart state."""

    CART_PRODUCTS = "cartProducts"

    @staticmethod
    def cart_products_key(namespace: str) -> str:
        return f"{namespace}:{CartKeys.CART_PRODUCTS}"


def build_store(settings: CartSettings) -> KeyValueStore:
    """Build the key-value store selected by settings.storage_backend."""
    if settings.storage_backend == STORAGE_BACKEND_REDIS:
        return RedisKeyValueStore(get_redis(settings.redis_url, settings.redis_token))
    return MemoryKeyValueStore()
