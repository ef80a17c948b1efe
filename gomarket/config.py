"""Cart settings loaded from environment variables."""
import os
from dataclasses import dataclass

DEFAULT_NAMESPACE = "@GoMarketplace"

STORAGE_BACKEND_MEMORY = "memory"
STORAGE_BACKEND_REDIS = "redis"
STORAGE_BACKENDS = (STORAGE_BACKEND_MEMORY, STORAGE_BACKEND_REDIS)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class CartSettings:
    """
    Runtime configuration for the cart.

    - namespace: prefix of the persisted key ("<namespace>:cartProducts")
    - ttl_seconds: expiry of the persisted key, 0 keeps it forever
    - recover_corrupted: start with an empty cart when stored data is malformed
    - storage_backend: "memory" or "redis"
    """
    namespace: str = DEFAULT_NAMESPACE
    ttl_seconds: int = 0
    recover_corrupted: bool = True
    storage_backend: str = STORAGE_BACKEND_MEMORY
    redis_url: str = ""
    redis_token: str = ""

    def __post_init__(self):
        if not self.namespace:
            raise ValueError("namespace must be a non-empty string")
        if self.ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}"
            )

    @classmethod
    def from_env(cls) -> "CartSettings":
        # Upstash standard env var names
        return cls(
            namespace=os.environ.get("CART_NAMESPACE", DEFAULT_NAMESPACE).strip() or DEFAULT_NAMESPACE,
            ttl_seconds=_env_int("CART_TTL_SECONDS", 0),
            recover_corrupted=_env_bool("CART_RECOVER_CORRUPTED", True),
            storage_backend=os.environ.get("CART_STORAGE_BACKEND", STORAGE_BACKEND_MEMORY).strip().lower(),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )
