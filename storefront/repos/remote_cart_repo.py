# storefront/repos/remote_cart_repo.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.exceptions import RemoteStoreError
from storefront.domain.schemas import CartLine


class RemoteCartRepo:
    """Remote tier: tabela cart_items (user_id, product_id, quantity)."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_cart(self, user_id: int) -> List[CartLine]:
        # select * from cart_items join products where user_id = ?
        try:
            rows = self.db.execute(
                select(CartItemModel)
                .options(joinedload(CartItemModel.product))
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        except SQLAlchemyError as e:
            raise RemoteStoreError(f"Could not fetch cart for user {user_id}") from e

        return [
            CartLine(
                id=row.product.id,
                name=row.product.name,
                price=row.product.price,
                image=row.product.image_url,
                quantity=row.quantity,
            )
            for row in rows
            if row.product is not None
        ]

    def upsert_line(self, user_id: int, product_id: int, quantity: int) -> None:
        try:
            existing = self.db.execute(
                select(CartItemModel).where(
                    CartItemModel.user_id == user_id,
                    CartItemModel.product_id == product_id,
                )
            ).scalar_one_or_none()

            if existing:
                existing.quantity = quantity
            else:
                self.db.add(CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RemoteStoreError(f"Could not upsert product {product_id} for user {user_id}") from e

    def delete_line(self, user_id: int, product_id: int) -> None:
        self._delete_where(
            f"product {product_id} for user {user_id}",
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
        )

    def clear(self, user_id: int) -> None:
        self._delete_where(f"cart of user {user_id}", CartItemModel.user_id == user_id)

    def _delete_where(self, what: str, *conditions) -> None:
        try:
            self.db.execute(delete(CartItemModel).where(*conditions))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RemoteStoreError(f"Could not delete {what}") from e


class SessionScopedCartRepo:
    """
    RemoteCartRepo z osobna sesja na kazde wywolanie.
    Dla obiektow zyjacych dluzej niz request (CartStore, kolejka sync).
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def fetch_cart(self, user_id: int) -> List[CartLine]:
        with self.session_factory() as db:
            return RemoteCartRepo(db).fetch_cart(user_id)

    def upsert_line(self, user_id: int, product_id: int, quantity: int) -> None:
        with self.session_factory() as db:
            RemoteCartRepo(db).upsert_line(user_id, product_id, quantity)

    def delete_line(self, user_id: int, product_id: int) -> None:
        with self.session_factory() as db:
            RemoteCartRepo(db).delete_line(user_id, product_id)

    def clear(self, user_id: int) -> None:
        with self.session_factory() as db:
            RemoteCartRepo(db).clear(user_id)
