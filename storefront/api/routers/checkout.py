# storefront/api/routers/checkout.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_registry, get_store
from storefront.data.database import get_db
from storefront.domain.exceptions import EmptyCartError
from storefront.domain.schemas import CheckoutForm, OrderOut
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import CheckoutService
from storefront.services.store_registry import StoreRegistry

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=OrderOut, status_code=201)
def place_order(
    form: CheckoutForm,
    background: BackgroundTasks,
    store: CartStore = Depends(get_store),
    registry: StoreRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    """
    Sklada zamowienie z koszyka zalogowanego usera i czysci koszyk.
    """
    if store.user_id is None:
        raise HTTPException(status_code=401, detail="Sign in to place an order")

    svc = CheckoutService(db)
    try:
        order = svc.place_order(store, store.user_id, form)
    except EmptyCartError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    background.add_task(registry.flush)
    return order
