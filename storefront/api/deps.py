# storefront/api/deps.py
from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.services.cart_store import CartStore
from storefront.services.store_registry import StoreRegistry
from storefront.services.user_service import UserService


def get_registry(request: Request) -> StoreRegistry:
    return request.app.state.registry


def get_store(
    device_id: str = Query(..., min_length=1),
    user_id: int | None = Query(None),
    registry: StoreRegistry = Depends(get_registry),
) -> CartStore:
    return registry.get(device_id, user_id)


def require_admin(
    admin_id: int = Query(...),
    db: Session = Depends(get_db),
) -> int:
    try:
        UserService(db).require_admin(admin_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return admin_id
