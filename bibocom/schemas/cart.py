"""Cart schemas (``/cart`` endpoints)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from bibocom.schemas.base import ApiModel


class ProductImage(ApiModel):
    image_url: str


class CartProduct(ApiModel):
    """Product snapshot embedded in a cart item."""

    id: Optional[int] = None
    name: str = ""
    price: Optional[float] = None
    stock: Optional[int] = None
    images: list[ProductImage] = Field(default_factory=list)


class CartItem(ApiModel):
    id: int
    cart_id: Optional[int] = None
    product_id: int
    quantity: int
    product: CartProduct = Field(default_factory=CartProduct)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Client-only flags while a mutation is in flight
    is_updating: bool = Field(default=False, exclude=True)
    is_removing: bool = Field(default=False, exclude=True)

    @property
    def line_total(self) -> Optional[float]:
        if self.product.price is None:
            return None
        return self.product.price * self.quantity

    @property
    def is_busy(self) -> bool:
        return self.is_updating or self.is_removing

    @property
    def can_decrease(self) -> bool:
        return self.quantity > 1

    @property
    def can_increase(self) -> bool:
        # A falsy stock (None or 0) is treated as unbounded.
        if not self.product.stock:
            return True
        return self.quantity < self.product.stock


class Cart(ApiModel):
    id: Optional[int] = None
    user_id: Optional[int] = None
    items: list[CartItem] = Field(default_factory=list)
    total_price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def items_count(self) -> int:
        return sum(item.quantity for item in self.items)


class WhatsAppLink(ApiModel):
    """Per-shop WhatsApp deep link produced by the share endpoint."""

    shop_name: str
    link: str
    total_amount: Optional[float] = None
    item_count: Optional[int] = None
    logo: Optional[str] = None
    product_images: list[str] = Field(default_factory=list)
    order_number: Optional[int] = None


class OrderSummary(ApiModel):
    id: int
    total_amount: Optional[float] = None
    status: str = ""
    created_at: Optional[datetime] = None


class OrderConfirmation(ApiModel):
    """Payload of ``POST /cart/order``."""

    message: str = ""
    order: Optional[OrderSummary] = None
    whatsapp_links: list[WhatsAppLink] = Field(
        default_factory=list, alias="whatsappLinks"
    )
