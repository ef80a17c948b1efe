"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock

# Keep tests off any real Redis
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")

from gomarket.cart import CartPersistence, CartStore, ProductRef
from gomarket.db import MemoryKeyValueStore

NAMESPACE = "@GoMarketplace"
CART_KEY = f"{NAMESPACE}:cartProducts"


@pytest.fixture
def kv_store():
    """Empty in-memory key-value store"""
    return MemoryKeyValueStore()


@pytest.fixture
def persistence(kv_store):
    """Gateway over the in-memory store"""
    return CartPersistence(kv_store, namespace=NAMESPACE)


@pytest.fixture
def cart_store(persistence):
    """Store that still has to be loaded"""
    return CartStore(persistence)


@pytest.fixture
def failing_kv_store():
    """Store whose writes always fail"""
    store = AsyncMock()
    store.get = AsyncMock(return_value=None)
    store.set = AsyncMock(side_effect=ConnectionError("redis unavailable"))
    return store


@pytest.fixture
def shirt():
    """Sample product"""
    return ProductRef(id="p1", title="Shirt", image_url="u", price=10)


@pytest.fixture
def mug():
    """Second sample product"""
    return ProductRef(
        id="p2",
        title="Coffee Mug",
        image_url="https://cdn.example.com/mug.png",
        price=4.5,
    )
