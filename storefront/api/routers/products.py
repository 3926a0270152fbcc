# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductDetailOut, ProductFilters, ProductOut
from storefront.services.product_service import ProductService

router = APIRouter(tags=["products"])


@router.get("/products", response_model=List[ProductOut])
def browse_products(filters: ProductFilters = Depends(), db: Session = Depends(get_db)):
    try:
        return ProductService(db).browse(filters)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/products/featured", response_model=List[ProductOut])
def featured_products(db: Session = Depends(get_db)):
    return ProductService(db).featured()


@router.get("/products/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_detail(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return ProductService(db).categories()
