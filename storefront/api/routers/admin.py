# storefront/api/routers/admin.py
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import (
    DashboardStats,
    ListQuery,
    OrderOut,
    OrderStatusIn,
    Page,
    ProductIn,
    ProductOut,
)
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.utils.settings import ADMIN_PAGE_SIZE

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def list_query(
    search: str = "",
    sort_field: str = "created_at",
    sort_direction: Literal["asc", "desc"] = "desc",
    page: int = Query(1, ge=1),
    page_size: int = Query(ADMIN_PAGE_SIZE, ge=1, le=100),
) -> ListQuery:
    return ListQuery(
        search=search,
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        page_size=page_size,
    )


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(db: Session = Depends(get_db)):
    return OrderService(db).dashboard()


# ---------------------------------------------------------------- products


@router.get("/products", response_model=Page[ProductOut])
def admin_products(
    category_id: int | None = None,
    query: ListQuery = Depends(list_query),
    db: Session = Depends(get_db),
):
    query.filters["category_id"] = category_id
    try:
        return ProductService(db).admin_list(query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    try:
        return ProductService(db).create_product(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    try:
        return ProductService(db).update_product(product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        ProductService(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


# ---------------------------------------------------------------- orders


@router.get("/orders", response_model=Page[OrderOut])
def admin_orders(
    status: str = "all",
    query: ListQuery = Depends(list_query),
    db: Session = Depends(get_db),
):
    query.filters["status"] = status
    try:
        return OrderService(db).admin_list(query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
