# storefront/services/cart_store.py
import threading
from typing import Callable, List

from storefront.domain.exceptions import CartError, RemoteStoreError
from storefront.domain.pricing import compute_pricing
from storefront.domain.schemas import CartLine, CartOut, PricingBreakdown, ProductRef
from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.services.sync_queue import SyncCommand, SyncQueue
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[List[CartLine]], None]


class CartStore:
    """
    Koszyk jednej sesji (gosc albo zalogowany user).

    commands (add, set_quantity, remove, clear) zmieniaja pamiec i local tier
    synchronicznie, remote tier dostaje komende przez kolejke sync (best effort)
    query (cart, pricing, item_count) tylko odczyt

    Endpointy sync ida w threadpoolu, wiec kazda komenda bierze lock storu.
    RLock: set_quantity wola remove_from_cart, listener moze wolac komende.
    """

    def __init__(self, local: LocalCartRepo, remote, sync_queue: SyncQueue):
        self.local = local
        self.remote = remote
        self.sync_queue = sync_queue

        self.user_id: int | None = None
        self.loading = True

        self._lines: List[CartLine] = []
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        # numer sekwencyjny: kazda mutacja i kazdy start fetcha go podbija
        self._seq = 0
        self._inflight = 0

        self._load_local()

    #query - odczyt
    @property
    def cart(self) -> List[CartLine]:
        return [line.model_copy() for line in self._lines]

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def pricing(self) -> PricingBreakdown:
        return compute_pricing(self._lines)

    def get_line(self, product_id: int) -> CartLine | None:
        index = self._index_of(product_id)
        return self._lines[index].model_copy() if index is not None else None

    def snapshot(self) -> CartOut:
        with self._lock:
            return CartOut(
                user_id=self.user_id,
                items=self.cart,
                item_count=self.item_count,
                pricing=self.pricing,
                loading=self.loading,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    #identity
    def sign_in(self, user_id: int) -> None:
        """Remote cart is authoritative: it replaces whatever the device had."""
        with self._lock:
            if self.user_id == user_id:
                return

            logger.info(f"Cart identity changed to user {user_id}")
            self.user_id = user_id
            self.refresh_from_remote()

    def sign_out(self) -> None:
        with self._lock:
            if self.user_id is None:
                return

            logger.info(f"User {self.user_id} signed out, keeping device cart")
            self.user_id = None
            self._seq += 1
            self._load_local()

    def refresh_from_remote(self) -> None:
        with self._lock:
            if self.user_id is None:
                return

            self._seq += 1
            ticket, user_id = self._seq, self.user_id
            self._inflight += 1
            self._set_loading(True)

            try:
                lines = self.remote.fetch_cart(user_id)
            except RemoteStoreError as e:
                self._inflight -= 1
                logger.error(f"Error fetching cart of user {user_id}: {e}")
                if not self._inflight:
                    self._set_loading(False)
                return
            self._inflight -= 1

            # stale response: w miedzyczasie byla mutacja albo zmiana usera
            if ticket != self._seq or user_id != self.user_id:
                logger.warning(f"Discarding stale remote cart for user {user_id} (ticket {ticket}, now {self._seq})")
                if not self._inflight:
                    self._set_loading(False)
                return

            logger.info(f"Loaded remote cart for user {user_id}: {len(lines)} lines")
            self._lines = list(lines)
            self.local.save(self._lines)
            self.loading = self._inflight > 0
            self._notify()

    #commands
    def add_to_cart(self, product: ProductRef, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise CartError("Quantity must be at least 1")

        with self._lock:
            index = self._index_of(product.id)
            if index is not None:
                current = self._lines[index]
                line = current.model_copy(update={"quantity": current.quantity + quantity})
                self._lines[index] = line
                logger.info(f"Product {product.id} already in cart, quantity {current.quantity} -> {line.quantity}")
            else:
                line = CartLine(
                    id=product.id,
                    name=product.name,
                    price=product.price,
                    image=product.image,
                    quantity=quantity,
                )
                self._lines.append(line)
                logger.info(f"Added product {product.id} x{quantity} to cart")

            self._commit()
            if self.user_id is not None:
                self.sync_queue.submit(SyncCommand.upsert(self.user_id, product.id, line.quantity))
            return line.model_copy()

    def set_quantity(self, product_id: int, quantity: int) -> CartLine | None:
        """Below 1 removes the line; otherwise updates it in place."""
        with self._lock:
            if quantity < 1:
                self.remove_from_cart(product_id)
                return None

            index = self._index_of(product_id)
            if index is None:
                return None

            line = self._lines[index].model_copy(update={"quantity": quantity})
            self._lines[index] = line
            logger.info(f"Set quantity of product {product_id} to {quantity}")

            self._commit()
            if self.user_id is not None:
                self.sync_queue.submit(SyncCommand.upsert(self.user_id, product_id, quantity))
            return line.model_copy()

    def remove_from_cart(self, product_id: int) -> None:
        with self._lock:
            remaining = [line for line in self._lines if line.id != product_id]
            if len(remaining) == len(self._lines):
                return

            self._lines = remaining
            logger.info(f"Removed product {product_id} from cart")

            self._commit()
            if self.user_id is not None:
                self.sync_queue.submit(SyncCommand.delete(self.user_id, product_id))

    def clear_cart(self) -> None:
        with self._lock:
            self._lines = []
            self._seq += 1
            self.local.remove()
            logger.info("Cart cleared")
            self._notify()

            if self.user_id is not None:
                self.sync_queue.submit(SyncCommand.clear(self.user_id))

    #helpers
    def _load_local(self) -> None:
        self._lines = self.local.load() or []
        self.loading = False
        self._notify()

    def _commit(self) -> None:
        self._seq += 1
        self.local.save(self._lines)
        self._notify()

    def _index_of(self, product_id: int) -> int | None:
        for i, line in enumerate(self._lines):
            if line.id == product_id:
                return i
        return None

    def _set_loading(self, loading: bool) -> None:
        if self.loading != loading:
            self.loading = loading
            self._notify()

    def _notify(self) -> None:
        snapshot = self.cart
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Cart listener failed")
