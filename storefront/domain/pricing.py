# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from storefront.domain.schemas import CartLine, PricingBreakdown

TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = Decimal("100")
SHIPPING_FEE = Decimal("10")
CENT = Decimal("0.01")


def line_total(line: CartLine) -> Decimal:
    return line.price * line.quantity


def compute_pricing(lines: Iterable[CartLine]) -> PricingBreakdown:
    """
    subtotal -> tax (8%) -> shipping (free above 100) -> total.
    Czysta funkcja, bez efektow ubocznych.
    """
    subtotal = sum((line_total(line) for line in lines), Decimal("0.00"))
    tax = (subtotal * TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)

    #strictly greater: dokladnie 100 nadal placi za wysylke
    shipping = Decimal("0.00") if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE

    return PricingBreakdown(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
    )
