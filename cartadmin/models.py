"""
Records for the documents the dashboard reads.

Payloads come from the storefront app, so every field except the
identifiers and cart quantities is optional and parsed leniently.
"""
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    MICROCONTROLLERS = "microcontrollers"
    COMPONENTS = "components"
    TOOLS = "tools"
    KITS = "kits"
    PROJECTS = "projects"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REJECTED = "rejected"


# status -> statuses it may move to; delivered and rejected are terminal
TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.REJECTED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.REJECTED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.REJECTED: set(),
}


def can_transition(current, target):
    return OrderStatus(target) in TRANSITIONS.get(OrderStatus(current), set())


# ISO-8601 string, or epoch seconds/milliseconds from older storefront writes
Timestamp = Union[str, float]

class Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class InventoryItem(Record):
    id: str
    name: str = ""
    category: str = Category.MICROCONTROLLERS.value
    price: float = 0
    stock: int = 0
    image: str = ""
    desc: str = ""
    discount: Optional[str] = None
    created_at: Optional[Timestamp] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value


class ProductSnapshot(Record):
    name: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None


class CartLine(Record):
    product: Optional[ProductSnapshot] = None
    qty: int

    @field_validator("product", mode="before")
    @classmethod
    def _drop_non_mapping(cls, value):
        return value if isinstance(value, dict) else None


def _mapping_lines(value):
    # stray strings or nulls in a stored cart are not lines
    if not isinstance(value, list):
        return []
    return [line for line in value if isinstance(line, dict) and line.get("qty") is not None]


class UserProfile(Record):
    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    cart_data: List[CartLine] = Field(default_factory=list)
    updated_at: Optional[str] = None

    @field_validator("cart_data", mode="before")
    @classmethod
    def _clean_cart(cls, value):
        return _mapping_lines(value)

    @property
    def has_cart(self):
        return len(self.cart_data) > 0


class CustomerInfo(Record):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    utr: Optional[str] = None
    receipt_url: Optional[str] = None

    @field_validator("phone", "pincode", mode="before")
    @classmethod
    def _digits_as_str(cls, value):
        return str(value) if isinstance(value, (int, float)) else value


class Order(Record):
    id: str
    user_id: Optional[str] = None
    total: float = 0
    status: OrderStatus = OrderStatus.PENDING
    delivery_date: Optional[str] = None
    created_at: Optional[Timestamp] = None
    items: List[CartLine] = Field(default_factory=list)
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value

    @field_validator("items", mode="before")
    @classmethod
    def _clean_items(cls, value):
        return _mapping_lines(value)

    @field_validator("customer_info", mode="before")
    @classmethod
    def _empty_customer(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("delivery_date", mode="before")
    @classmethod
    def _blank_date(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Identity(Record):
    """Who the identity provider says signed in."""

    username: str
    email: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)
