# storefront/services/product_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import (
    CategoryOut,
    ListQuery,
    Page,
    ProductDetailOut,
    ProductFilters,
    ProductIn,
    ProductOut,
    ProductRef,
)
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def browse(self, filters: ProductFilters) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.browse(filters)]

    def get_detail(self, product_id: int) -> ProductDetailOut:
        product = self._get(product_id)
        return ProductDetailOut(
            product=ProductOut.model_validate(product),
            related=[ProductOut.model_validate(p) for p in self.repo.related(product)],
        )

    def get_ref(self, product_id: int) -> ProductRef:
        """Descriptor used when adding to cart; price comes from the catalog."""
        return ProductOut.model_validate(self._get(product_id)).to_ref()

    def featured(self) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.featured()]

    def categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.categories()]

    #admin
    def admin_list(self, query: ListQuery) -> Page[ProductOut]:
        rows, total = self.repo.admin_list(query)
        return Page[ProductOut](
            items=[ProductOut.model_validate(p) for p in rows],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    def create_product(self, payload: ProductIn) -> ProductOut:
        data = self._validated(payload)
        created = self.repo.create_product(ProductModel(**data))
        logger.info(f"Product {created.id} created")
        return ProductOut.model_validate(created)

    def update_product(self, product_id: int, payload: ProductIn) -> ProductOut:
        product = self._get(product_id)
        data = self._validated(payload)
        updated = self.repo.update_product(product, data)
        logger.info(f"Product {product_id} updated")
        return ProductOut.model_validate(updated)

    def delete_product(self, product_id: int) -> None:
        product = self._get(product_id)
        self.repo.delete_product(product)
        logger.info(f"Product {product_id} deleted")

    def _get(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _validated(payload: ProductIn) -> dict:
        if not payload.name.strip() or payload.price is None or payload.category_id is None:
            raise ValueError("Name, price and category are required")
        if payload.price < Decimal("0"):
            raise ValueError("Price cannot be negative")
        return payload.model_dump()
