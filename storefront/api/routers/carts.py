# storefront/api/routers/carts.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_registry, get_store
from storefront.data.database import get_db
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import CartOut, ItemIn, QuantityIn
from storefront.services.cart_store import CartStore
from storefront.services.product_service import ProductService
from storefront.services.store_registry import StoreRegistry

router = APIRouter(prefix="/cart", tags=["cart"])


def _respond(store: CartStore, registry: StoreRegistry, background: BackgroundTasks) -> CartOut:
    #sync do remote po wyslaniu odpowiedzi, UI nie czeka
    background.add_task(registry.flush)
    return store.snapshot()


@router.get("", response_model=CartOut)
def get_cart(store: CartStore = Depends(get_store)):
    return store.snapshot()


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    background: BackgroundTasks,
    store: CartStore = Depends(get_store),
    registry: StoreRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    try:
        product = ProductService(db).get_ref(payload.product_id)
        store.add_to_cart(product, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(store, registry, background)


@router.put("/items/{product_id}", response_model=CartOut)
def set_quantity(
    product_id: int,
    payload: QuantityIn,
    background: BackgroundTasks,
    store: CartStore = Depends(get_store),
    registry: StoreRegistry = Depends(get_registry),
):
    store.set_quantity(product_id, payload.quantity)
    return _respond(store, registry, background)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    background: BackgroundTasks,
    store: CartStore = Depends(get_store),
    registry: StoreRegistry = Depends(get_registry),
):
    store.remove_from_cart(product_id)
    return _respond(store, registry, background)


@router.delete("", response_model=CartOut)
def clear_cart(
    background: BackgroundTasks,
    store: CartStore = Depends(get_store),
    registry: StoreRegistry = Depends(get_registry),
):
    store.clear_cart()
    return _respond(store, registry, background)
