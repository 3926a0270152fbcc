# storefront/services/store_registry.py
import threading
from typing import Callable, Dict

from storefront.data.database import SessionLocal
from storefront.repos.local_cart_repo import LocalCartRepo, MemoryCartStorage, RedisCartStorage
from storefront.repos.remote_cart_repo import SessionScopedCartRepo
from storefront.services.cart_store import CartStore
from storefront.services.sync_queue import CelerySyncQueue, InlineSyncQueue, SyncQueue
from storefront.utils.logging import get_logger
from storefront.utils.settings import CART_STORAGE_KEY, LOCAL_STORAGE_BACKEND, SYNC_QUEUE_BACKEND

logger = get_logger(__name__)


class StoreRegistry:
    """
    Jeden CartStore na urzadzenie (device_id), wstrzykiwany do routerow.
    Zmiana user_id miedzy requestami = sign_in / sign_out na storze.
    """

    def __init__(
        self,
        storage_factory: Callable[[str], LocalCartRepo],
        remote,
        sync_queue: SyncQueue,
    ):
        self.storage_factory = storage_factory
        self.remote = remote
        self.sync_queue = sync_queue
        self._stores: Dict[str, CartStore] = {}
        self._lock = threading.Lock()

    def get(self, device_id: str, user_id: int | None = None) -> CartStore:
        with self._lock:
            store = self._stores.get(device_id)
            if store is None:
                logger.info(f"Creating cart store for device {device_id}")
                store = CartStore(self.storage_factory(device_id), self.remote, self.sync_queue)
                self._stores[device_id] = store

        if user_id is None:
            store.sign_out()
        else:
            store.sign_in(user_id)
        return store

    def flush(self) -> int:
        return self.sync_queue.flush()


def build_registry(session_factory=SessionLocal) -> StoreRegistry:
    remote = SessionScopedCartRepo(session_factory)

    if SYNC_QUEUE_BACKEND == "celery":
        sync_queue: SyncQueue = CelerySyncQueue()
    else:
        sync_queue = InlineSyncQueue(remote)

    if LOCAL_STORAGE_BACKEND == "memory":
        slots: Dict[str, str] = {}

        def storage_factory(device_id: str) -> LocalCartRepo:
            return MemoryCartStorage(key=f"{CART_STORAGE_KEY}:{device_id}", slots=slots)
    else:
        storage_factory = RedisCartStorage

    return StoreRegistry(storage_factory, remote, sync_queue)
