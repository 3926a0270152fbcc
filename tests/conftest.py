"""
Pytest configuration and fixtures.

Baza: SQLite in-memory (StaticPool, jedno polaczenie), local tier w pamieci,
kolejka sync inline. Srodowisko ustawiamy zanim cokolwiek z storefront sie zaimportuje.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOCAL_STORAGE_BACKEND"] = "memory"
os.environ["SYNC_QUEUE_BACKEND"] = "inline"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, ProductModel, UserModel
from storefront.domain.exceptions import RemoteStoreError
from storefront.domain.schemas import CartLine, ProductRef
from storefront.main import create_app
from storefront.repos.local_cart_repo import MemoryCartStorage
from storefront.repos.remote_cart_repo import SessionScopedCartRepo
from storefront.services.cart_store import CartStore
from storefront.services.store_registry import StoreRegistry
from storefront.services.sync_queue import InlineSyncQueue

CUSTOMER_ID = 10
OTHER_CUSTOMER_ID = 11
ADMIN_ID = 1


class FakeRemoteCart:
    """Remote tier in memory; records every call and can be told to fail."""

    def __init__(self, carts=None):
        self.carts = carts or {}
        self.calls = []
        self.fail = False
        self.on_fetch = None

    def _check(self):
        if self.fail:
            raise RemoteStoreError("backend unavailable")

    def fetch_cart(self, user_id):
        self.calls.append(("fetch", user_id))
        if self.on_fetch:
            self.on_fetch()
        self._check()
        return [line.model_copy() for line in self.carts.get(user_id, [])]

    def upsert_line(self, user_id, product_id, quantity):
        self.calls.append(("upsert", user_id, product_id, quantity))
        self._check()

    def delete_line(self, user_id, product_id):
        self.calls.append(("delete", user_id, product_id))
        self._check()

    def clear(self, user_id):
        self.calls.append(("clear", user_id))
        self._check()


@pytest.fixture
def make_product():
    def _make(product_id=1, name="Desk Lamp", price="24.00", image=None):
        return ProductRef(id=product_id, name=name, price=Decimal(price), image=image)

    return _make


@pytest.fixture
def remote():
    return FakeRemoteCart(
        carts={
            CUSTOMER_ID: [
                CartLine(id=7, name="Remote Mug", price=Decimal("12.50"), image=None, quantity=2),
            ]
        }
    )


@pytest.fixture
def local():
    return MemoryCartStorage()


@pytest.fixture
def sync_queue(remote):
    return InlineSyncQueue(remote)


@pytest.fixture
def store(local, remote, sync_queue):
    return CartStore(local, remote, sync_queue)


# ---------------------------------------------------------------- database


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded(db):
    audio = CategoryModel(id=1, name="Audio")
    desk = CategoryModel(id=2, name="Desk")
    db.add_all([audio, desk])
    db.add_all([
        UserModel(id=ADMIN_ID, name="Admin", email="admin@example.com", role="admin"),
        UserModel(id=CUSTOMER_ID, name="Ala", email="ala@example.com", role="customer"),
        UserModel(id=OTHER_CUSTOMER_ID, name="Olek", email="olek@example.com", role="customer"),
    ])
    db.add_all([
        ProductModel(id=1, name="Wireless Headphones", price=Decimal("89.99"), category_id=1, featured=True),
        ProductModel(id=2, name="Bluetooth Speaker", price=Decimal("49.50"), category_id=1, on_sale=True),
        ProductModel(id=3, name="Mechanical Keyboard", price=Decimal("129.00"), category_id=2, featured=True),
        ProductModel(id=4, name="Desk Lamp", price=Decimal("24.00"), category_id=2),
        ProductModel(id=5, name="Studio Monitor Speaker", price=Decimal("650.00"), category_id=1),
    ])
    db.commit()
    return db


@pytest.fixture
def registry(db):
    remote_repo = SessionScopedCartRepo(SessionLocal)
    slots = {}
    return StoreRegistry(
        storage_factory=lambda device_id: MemoryCartStorage(key=f"cart:{device_id}", slots=slots),
        remote=remote_repo,
        sync_queue=InlineSyncQueue(remote_repo),
    )


@pytest.fixture
def test_client(seeded, registry):
    return TestClient(create_app(registry))
