# storefront/services/sync_queue.py
"""
Kolejka synchronizacji remote tier koszyka.

CartStore tylko wrzuca komendy (upsert / delete / clear) i nie czeka na wynik.
Bledy remote sa logowane i polykane, UI zawsze widzi stan lokalny.
"""
import threading
from collections import deque
from enum import Enum
from typing import Deque, List

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.exceptions import RemoteStoreError
from storefront.repos.remote_cart_repo import RemoteCartRepo
from storefront.utils.logging import get_logger
from storefront.utils.retry import sync_retry

logger = get_logger(__name__)


class SyncAction(str, Enum):
    UPSERT = "upsert"
    DELETE = "delete"
    CLEAR = "clear"


class SyncCommand(BaseModel):
    action: SyncAction
    user_id: int
    product_id: int | None = None
    quantity: int | None = None

    @classmethod
    def upsert(cls, user_id: int, product_id: int, quantity: int) -> "SyncCommand":
        return cls(action=SyncAction.UPSERT, user_id=user_id, product_id=product_id, quantity=quantity)

    @classmethod
    def delete(cls, user_id: int, product_id: int) -> "SyncCommand":
        return cls(action=SyncAction.DELETE, user_id=user_id, product_id=product_id)

    @classmethod
    def clear(cls, user_id: int) -> "SyncCommand":
        return cls(action=SyncAction.CLEAR, user_id=user_id)


@sync_retry()
def apply_command(repo, command: SyncCommand) -> None:
    if command.action == SyncAction.UPSERT:
        repo.upsert_line(command.user_id, command.product_id, command.quantity)
    elif command.action == SyncAction.DELETE:
        repo.delete_line(command.user_id, command.product_id)
    else:
        repo.clear(command.user_id)


class SyncQueue:
    def submit(self, command: SyncCommand) -> None:
        raise NotImplementedError

    def flush(self) -> int:
        """Apply whatever is pending locally; returns how many commands were applied."""
        return 0


class InlineSyncQueue(SyncQueue):
    """
    FIFO w procesie. flush() wolane przez petle wywolujacego
    (w API: background task po wyslaniu odpowiedzi).
    """

    def __init__(self, repo):
        self.repo = repo
        self._pending: Deque[SyncCommand] = deque()
        self._drain_lock = threading.Lock()

    @property
    def pending(self) -> List[SyncCommand]:
        return list(self._pending)

    def submit(self, command: SyncCommand) -> None:
        self._pending.append(command)

    def flush(self) -> int:
        applied = 0
        # jeden drain naraz, background taski ida w threadpoolu
        with self._drain_lock:
            while self._pending:
                command = self._pending.popleft()
                try:
                    apply_command(self.repo, command)
                    applied += 1
                except (RemoteStoreError, SQLAlchemyError) as e:
                    logger.error(
                        f"Cart sync {command.action.value} failed for user {command.user_id} "
                        f"(product {command.product_id}): {e}"
                    )
        return applied


class CelerySyncQueue(SyncQueue):
    """Kazda komenda idzie jako osobny task celery."""

    def submit(self, command: SyncCommand) -> None:
        apply_cart_sync_task.delay(command.model_dump(mode="json"))


@celery_app.task(name="storefront.services.sync_queue.apply_cart_sync_task")
def apply_cart_sync_task(payload: dict):
    command = SyncCommand.model_validate(payload)

    db = SessionLocal()
    try:
        apply_command(RemoteCartRepo(db), command)
    except (RemoteStoreError, SQLAlchemyError) as e:
        logger.error(f"Cart sync task {command.action.value} failed for user {command.user_id}: {e}")
        return {"status": "failed", **payload}
    finally:
        db.close()

    logger.info(f"Cart sync {command.action.value} applied for user {command.user_id}")
    return {"status": "applied", **payload}
