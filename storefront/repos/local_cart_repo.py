# storefront/repos/local_cart_repo.py
"""
Local tier koszyka: jeden slot klucz-wartosc na urzadzenie.

Trzymamy pelny snapshot (JSON listy CartLine), nie ma tu tozsamosci usera.
"""
from typing import Dict, List

import redis
from pydantic import TypeAdapter, ValidationError

from storefront.domain.schemas import CartLine
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CART_STORAGE_KEY, REDIS_URL

logger = get_logger(__name__)

_lines_adapter = TypeAdapter(List[CartLine])


def serialize_cart(lines: List[CartLine]) -> str:
    return _lines_adapter.dump_json(lines).decode("utf-8")


def deserialize_cart(raw: str | bytes) -> List[CartLine]:
    return _lines_adapter.validate_json(raw)


class LocalCartRepo:
    """get / set / remove snapshotu pod kluczem `cart`."""

    def __init__(self, key: str = CART_STORAGE_KEY):
        self.key = key

    def load(self) -> List[CartLine] | None:
        raw = self._get()
        if raw is None:
            return None
        try:
            return deserialize_cart(raw)
        except ValidationError as e:
            #uszkodzony snapshot traktujemy jak brak koszyka
            logger.warning(f"Discarding unreadable cart snapshot under {self.key}: {e}")
            return None

    def save(self, lines: List[CartLine]) -> None:
        self._set(serialize_cart(lines))

    def remove(self) -> None:
        self._delete()

    def _get(self) -> str | None:
        raise NotImplementedError

    def _set(self, value: str) -> None:
        raise NotImplementedError

    def _delete(self) -> None:
        raise NotImplementedError


class MemoryCartStorage(LocalCartRepo):
    """In-process slot, shared dict optional so several stores can see one device."""

    def __init__(self, key: str = CART_STORAGE_KEY, slots: Dict[str, str] | None = None):
        super().__init__(key)
        self.slots = slots if slots is not None else {}

    def _get(self) -> str | None:
        return self.slots.get(self.key)

    def _set(self, value: str) -> None:
        self.slots[self.key] = value

    def _delete(self) -> None:
        self.slots.pop(self.key, None)


class RedisCartStorage(LocalCartRepo):
    """Slot w redisie, klucz `cart:<device_id>`."""

    def __init__(self, device_id: str, url: str | None = None, client: redis.Redis | None = None):
        super().__init__(f"{CART_STORAGE_KEY}:{device_id}")
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def _get(self) -> str | None:
        return self.redis.get(self.key)

    @redis_retry()
    def _set(self, value: str) -> None:
        self.redis.set(self.key, value)

    @redis_retry()
    def _delete(self) -> None:
        self.redis.delete(self.key)
