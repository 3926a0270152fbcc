# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.exceptions import InvalidStatusTransition, NotFoundError
from storefront.domain.schemas import DashboardStats, ListQuery, OrderOut, OrderStatus, Page
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_order_out(order: OrderModel) -> OrderOut:
    return OrderOut(
        id=order.id,
        user_id=order.user_id,
        shipping_address=order.shipping_address,
        status=order.status,
        total_amount=order.total_amount,
        items=order.items or [],
        created_at=order.created_at,
        customer_email=order.user.email if order.user else None,
    )


class OrderService:
    """
    Historia zamowien klienta + operacje admina (status, lista, dashboard).
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def list_orders(self, user_id: int) -> list[OrderOut]:
        """Use Case: zamowienia usera, najnowsze pierwsze."""
        return [to_order_out(o) for o in self.repo.list_for_user(user_id)]

    def get_order(self, order_id: int, user_id: int) -> OrderOut:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user_id:
            raise PermissionError("No access to this order")

        return to_order_out(order)

    def update_status(self, order_id: int, status: OrderStatus) -> OrderOut:
        """Use Case (admin): zmiana statusu, stany terminalne sa zamrozone."""
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        current = OrderStatus(order.status)
        if current == status:
            return to_order_out(order)

        if current.is_terminal:
            raise InvalidStatusTransition(f"Order {order_id} is {current.value} and cannot change status")

        updated = self.repo.update_order_status(order_id, status.value)
        logger.info(f"Order {order_id} status {current.value} -> {status.value}")
        return to_order_out(updated)

    def admin_list(self, query: ListQuery) -> Page[OrderOut]:
        rows, total = self.repo.admin_list(query)
        return Page[OrderOut](
            items=[to_order_out(o) for o in rows],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    def dashboard(self) -> DashboardStats:
        return DashboardStats(
            total_sales=self.repo.total_sales(),
            total_orders=self.repo.count(),
            total_products=ProductRepo(self.db).count(),
            total_customers=UserRepo(self.db).count_customers(),
            recent_orders=[to_order_out(o) for o in self.repo.recent(5)],
        )
