# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from math import ceil
from typing import Any, Dict, Generic, List, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# ---------------------------------------------------------------- cart


class ProductRef(BaseModel):
    """Product descriptor passed to add_to_cart."""

    id: int
    name: str
    price: Decimal = Field(..., ge=0)
    image: str | None = None


class CartLine(BaseModel):
    """Jedna pozycja koszyka, max jedna na product id."""

    id: int
    name: str
    price: Decimal = Field(..., ge=0)
    image: str | None = None
    quantity: int = Field(..., ge=1)


class PricingBreakdown(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product ID (must be > 0)")
    quantity: int = Field(1, description="Quantity to add")


class QuantityIn(BaseModel):
    """Schema for setting a line's quantity; below 1 removes the line."""

    quantity: int


class CartOut(BaseModel):
    user_id: int | None = None
    items: List[CartLine]
    item_count: int
    pricing: PricingBreakdown
    loading: bool = False


# ---------------------------------------------------------------- checkout / orders


class ShippingAddress(BaseModel):
    first_name: str
    last_name: str
    address: str
    city: str
    state: str = ""
    zip_code: str
    country: str


class CheckoutForm(BaseModel):
    """
    Formularz checkoutu. Pola maja domyslnie "", walidacja wymaganych
    pol jest w CheckoutService (komunikat "<Pole> is required").
    Danych karty nigdzie nie zapisujemy.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    card_name: str = ""
    card_number: str = ""
    expiry: str = ""
    cvv: str = ""

    def shipping_address(self) -> ShippingAddress:
        return ShippingAddress(
            first_name=self.first_name,
            last_name=self.last_name,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
        )


class OrderItemOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    total: Decimal


class OrderOut(BaseModel):
    id: int
    user_id: int
    shipping_address: ShippingAddress | None = None
    status: OrderStatus
    total_amount: Decimal
    items: List[OrderItemOut] = []
    created_at: datetime
    customer_email: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class DashboardStats(BaseModel):
    total_sales: Decimal
    total_orders: int
    total_products: int
    total_customers: int
    recent_orders: List[OrderOut]


# ---------------------------------------------------------------- catalog


class CategoryOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    category_id: int | None = None
    image_url: str | None = None
    stock: int = 0
    featured: bool = False
    in_stock: bool = True
    on_sale: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    def to_ref(self) -> ProductRef:
        return ProductRef(id=self.id, name=self.name, price=self.price, image=self.image_url)


class ProductDetailOut(BaseModel):
    product: ProductOut
    related: List[ProductOut]


class ProductIn(BaseModel):
    """Admin product form. Name, price and category are checked in the service."""

    name: str = ""
    description: str = ""
    price: Decimal | None = None
    category_id: int | None = None
    image_url: str = ""
    stock: int = 0
    featured: bool = False
    in_stock: bool = True
    on_sale: bool = False


class ProductFilters(BaseModel):
    search: str = ""
    category: str = "all"
    min_price: int = 0
    max_price: int = 1000
    on_sale_only: bool = False

    @property
    def has_price_range(self) -> bool:
        #domyslny zakres [0, 1000] = brak filtra
        return self.min_price > 0 or self.max_price < 1000


# ---------------------------------------------------------------- admin lists


class ListQuery(BaseModel):
    search: str = ""
    filters: Dict[str, Any] = Field(default_factory=dict)
    sort_field: str = "created_at"
    sort_direction: Literal["asc", "desc"] = "desc"
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def toggle_sort(self, field: str) -> "ListQuery":
        """Same field flips direction, a new field starts ascending."""
        if field == self.sort_field:
            direction = "asc" if self.sort_direction == "desc" else "desc"
            return self.model_copy(update={"sort_direction": direction})
        return self.model_copy(update={"sort_field": field, "sort_direction": "asc"})


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int

    @computed_field
    @property
    def pages(self) -> int:
        return ceil(self.total / self.page_size) if self.total else 0


# ---------------------------------------------------------------- users


class UserCreate(BaseModel):
    """Mirror of an identity issued by the auth service."""

    id: int = Field(..., gt=0, description="User ID (must be > 0)")
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3)
    role: UserRole = UserRole.CUSTOMER


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)
