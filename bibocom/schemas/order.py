"""Order schemas (``/orders`` and ``/merchant/orders`` endpoints)."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Literal, Optional

from pydantic import Field

from bibocom.schemas.base import ApiModel
from bibocom.schemas.cart import WhatsAppLink


class OrderStatus(StrEnum):
    """Statuses used by the dashboards. Forwarded to the server as-is."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


class OrderImage(ApiModel):
    id: Optional[int] = None
    image_url: str


class OrderShop(ApiModel):
    id: int
    name: str = ""
    phone_number: Optional[str] = None


class OrderProduct(ApiModel):
    id: int
    name: str = ""
    price: float = 0
    images: list[OrderImage] = Field(default_factory=list)
    shop: Optional[OrderShop] = None


class OrderItem(ApiModel):
    id: int
    quantity: int
    price: float
    product: OrderProduct

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class OrderCustomer(ApiModel):
    id: Optional[int] = None
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone_number: Optional[str] = None


class Order(ApiModel):
    id: int
    client_id: Optional[int] = None
    status: str
    total_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    order_items: list[OrderItem] = Field(default_factory=list)
    client: Optional[OrderCustomer] = None

    @property
    def items_total(self) -> float:
        return sum(item.line_total for item in self.order_items)


class ConfirmationCheck(ApiModel):
    message: str = ""
    order_id: int
    status: str
    whatsapp_links: list[WhatsAppLink] = Field(
        default_factory=list, alias="whatsappLinks"
    )


class AutoConfirmEntry(ApiModel):
    order_id: int
    client_name: str = ""
    status: Literal["SUCCESS", "ERROR"]
    error: Optional[str] = None


class AutoConfirmResult(ApiModel):
    message: str = ""
    total_processed: int = 0
    confirmed: int = 0
    failed: int = 0
    results: list[AutoConfirmEntry] = Field(default_factory=list)
