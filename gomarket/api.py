"""
Cart HTTP API

Exposes the cart store to UI clients:
- GET  /cart
- POST /cart/items                      add one unit of a product
- POST /cart/items/{product_id}/increment
- POST /cart/items/{product_id}/decrement
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from gomarket import open_cart_store
from gomarket.cart import CartStore, ProductRef, require_cart_store
from gomarket.cart.storage import Price
from gomarket.config import CartSettings
from gomarket.errors import CartNotReadyError
from gomarket.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


# ==================== MODELS ====================

class AddToCartRequest(BaseModel):
    id: str = Field(min_length=1)
    title: str
    image_url: str
    price: Price


class CartItemResponse(BaseModel):
    id: str
    title: str
    image_url: str
    price: Price
    quantity: int


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total_quantity: int


# ==================== DEPENDENCIES ====================

def get_cart_store(request: Request) -> CartStore:
    """Store attached to the running app. Raises CartNotReadyError when absent."""
    return require_cart_store(getattr(request.app.state, "cart_store", None))


def _cart_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=[CartItemResponse(**item.to_dict()) for item in store.get_products()],
        total_quantity=store.total_quantity,
    )


# ==================== ROUTES ====================

@router.get("/cart", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    return _cart_response(store)


@router.post("/cart/items", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    try:
        product = ProductRef(
            id=request.id,
            title=request.title,
            image_url=request.image_url,
            price=request.price,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await store.add_to_cart(product)
    return _cart_response(store)


@router.post("/cart/items/{product_id}/increment", response_model=CartResponse)
async def increment_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    await store.increment(product_id)
    return _cart_response(store)


@router.post("/cart/items/{product_id}/decrement", response_model=CartResponse)
async def decrement_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    await store.decrement(product_id)
    return _cart_response(store)


# ==================== APP ====================

async def _cart_not_ready_handler(request: Request, exc: CartNotReadyError):
    logger.error(f"Cart API used without a ready store: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app(settings: Optional[CartSettings] = None, store: Optional[CartStore] = None) -> FastAPI:
    """
    Build the cart API.

    When store is given it is used as-is, otherwise one is opened from settings
    (or the environment) on startup. The store is flushed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is not None:
            await store.load()
            cart_store = store
        else:
            cart_store = await open_cart_store(settings)
        app.state.cart_store = cart_store
        yield
        await cart_store.aclose()

    app = FastAPI(title="GoMarketplace Cart", version="1.0.0", lifespan=lifespan)
    app.add_exception_handler(CartNotReadyError, _cart_not_ready_handler)
    app.include_router(router)
    return app
