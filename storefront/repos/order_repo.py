# storefront/repos/order_repo.py
from decimal import Decimal
from typing import Sequence, Tuple

from sqlalchemy import String, cast, func, select
from sqlalchemy.orm import Session, contains_eager, joinedload

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.pricing import CENT
from storefront.domain.schemas import ListQuery
from storefront.repos.query import ListView, run_list_query

ADMIN_ORDERS_VIEW = ListView(
    sortable={
        "created_at": OrderModel.created_at,
        "total_amount": OrderModel.total_amount,
        "status": OrderModel.status,
        "id": OrderModel.id,
    },
    searchable=[cast(OrderModel.id, String), UserModel.email],
    filterable={"status": OrderModel.status},
    tiebreak=OrderModel.id,
)


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        # insert into orders (...) returning id
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_for_user(self, user_id: int) -> Sequence[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        ).scalars().all()

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order

    def admin_list(self, query: ListQuery) -> Tuple[Sequence[OrderModel], int]:
        base = select(OrderModel).join(UserModel, UserModel.id == OrderModel.user_id)
        return run_list_query(
            self.db, base, query, ADMIN_ORDERS_VIEW, options=[contains_eager(OrderModel.user)]
        )

    def total_sales(self) -> Decimal:
        total = self.db.execute(select(func.sum(OrderModel.total_amount))).scalar_one()
        return Decimal(total or 0).quantize(CENT)

    def count(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def recent(self, limit: int = 5) -> Sequence[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .options(joinedload(OrderModel.user))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
        ).scalars().all()
