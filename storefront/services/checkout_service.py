# storefront/services/checkout_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.exceptions import CheckoutValidationError, EmptyCartError
from storefront.domain.pricing import line_total
from storefront.domain.schemas import CheckoutForm, OrderItemOut, OrderOut, OrderStatus
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_store import CartStore
from storefront.services.order_service import to_order_out
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# kolejnosc ma znaczenie: zglaszamy pierwsze brakujace pole
REQUIRED_FIELDS = [
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
    ("email", "Email"),
    ("address", "Address"),
    ("city", "City"),
    ("zip_code", "Zip Code"),
    ("country", "Country"),
    ("card_name", "Card Name"),
    ("card_number", "Card Number"),
    ("expiry", "Expiry"),
    ("cvv", "Cvv"),
]


def validate_checkout_form(form: CheckoutForm) -> None:
    for field, label in REQUIRED_FIELDS:
        if not getattr(form, field).strip():
            raise CheckoutValidationError(field, label)


class CheckoutService:
    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def place_order(self, store: CartStore, user_id: int, form: CheckoutForm) -> OrderOut:
        """
        Use Case: Zlozenie zamowienia z koszyka.

        1. Pusty koszyk -> EmptyCartError
        2. Walidacja wymaganych pol (nic nie zapisujemy przy bledzie)
        3. Pricing ze snapshotu koszyka, insert zamowienia ze statusem processing
        4. Czyszczenie koszyka
        """
        if store.user_id != user_id:
            raise PermissionError("Sign in to place an order")

        lines = store.cart
        if not lines:
            raise EmptyCartError("Cart is empty")

        validate_checkout_form(form)

        pricing = store.pricing
        items = [
            OrderItemOut(
                product_id=line.id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                total=line_total(line),
            )
            for line in lines
        ]

        order = OrderModel(
            user_id=user_id,
            shipping_address=form.shipping_address().model_dump(mode="json"),
            status=OrderStatus.PROCESSING.value,
            total_amount=pricing.total,
            items=[item.model_dump(mode="json") for item in items],
        )
        created = self.repo.create_order(order)

        logger.info(f"Order {created.id} placed by user {user_id}, total {pricing.total}")

        store.clear_cart()
        return to_order_out(created)
