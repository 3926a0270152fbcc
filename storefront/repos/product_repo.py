# storefront/repos/product_repo.py
from typing import Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.schemas import ListQuery, ProductFilters
from storefront.repos.query import ListView, run_list_query

ADMIN_PRODUCTS_VIEW = ListView(
    sortable={
        "created_at": ProductModel.created_at,
        "name": ProductModel.name,
        "price": ProductModel.price,
        "stock": ProductModel.stock,
    },
    searchable=[ProductModel.name],
    filterable={"category_id": ProductModel.category_id},
    tiebreak=ProductModel.id,
)


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def browse(self, filters: ProductFilters) -> Sequence[ProductModel]:
        stmt = select(ProductModel)

        if filters.search:
            stmt = stmt.where(ProductModel.name.ilike(f"%{filters.search}%"))

        if filters.category != "all":
            stmt = stmt.where(ProductModel.category_id == int(filters.category))

        if filters.has_price_range:
            stmt = stmt.where(
                ProductModel.price >= filters.min_price,
                ProductModel.price <= filters.max_price,
            )

        if filters.on_sale_only:
            stmt = stmt.where(ProductModel.on_sale.is_(True))

        return self.db.execute(stmt.order_by(ProductModel.id)).scalars().all()

    def related(self, product: ProductModel, limit: int = 4) -> Sequence[ProductModel]:
        if product.category_id is None:
            return []
        return self.db.execute(
            select(ProductModel)
            .where(
                ProductModel.category_id == product.category_id,
                ProductModel.id != product.id,
            )
            .order_by(ProductModel.id)
            .limit(limit)
        ).scalars().all()

    def featured(self, limit: int = 8) -> Sequence[ProductModel]:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.featured.is_(True))
            .order_by(ProductModel.id)
            .limit(limit)
        ).scalars().all()

    def categories(self) -> Sequence[CategoryModel]:
        return self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all()

    def admin_list(self, query: ListQuery) -> Tuple[Sequence[ProductModel], int]:
        return run_list_query(self.db, select(ProductModel), query, ADMIN_PRODUCTS_VIEW)

    def count(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: ProductModel, data: dict) -> ProductModel:
        for key, value in data.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
