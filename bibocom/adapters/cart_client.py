"""Client for the ``/cart`` endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from bibocom.adapters.base import ApiClient
from bibocom.constants.messages import Messages
from bibocom.core.errors import MarketplaceError, ServerError
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.cart import Cart, OrderConfirmation, WhatsAppLink

logger = get_logger("cart_client")


class CartClient(ApiClient):
    """Server-held cart: every call is one request, state lives on the server."""

    def get_cart(self) -> Cart:
        body = self._request("GET", "/cart", fallback_message=Messages.LOAD_CART_FAILED)
        cart = _cart(body)
        logger.info(
            "Fetched cart with %d item(s), totalPrice=%s",
            len(cart.items),
            cart.total_price,
        )
        return cart

    def add_item(self, product_id: int, quantity: int = 1) -> Cart:
        body = self._request(
            "POST",
            "/cart",
            json={"productId": product_id, "quantity": quantity},
            fallback_message=Messages.ADD_ITEM_FAILED,
        )
        return _cart(body, Messages.ADD_ITEM_FAILED)

    def update_item(self, item_id: int, quantity: int) -> dict[str, Any]:
        """Set an item's quantity. The body is returned raw; callers refetch."""
        return self._request(
            "PUT",
            f"/cart/items/{item_id}",
            json={"quantity": quantity},
            fallback_message=Messages.UPDATE_CART_FAILED,
        )

    def remove_item(self, item_id: int) -> dict[str, Any]:
        return self._request(
            "DELETE",
            f"/cart/items/{item_id}",
            fallback_message=Messages.REMOVE_ITEM_FAILED,
        )

    def clear(self) -> dict[str, Any]:
        return self._request(
            "DELETE", "/cart", fallback_message=Messages.CLEAR_CART_FAILED
        )

    def share_via_whatsapp(self, message: str = "") -> list[WhatsAppLink]:
        """Ask the server for one WhatsApp deep link per shop in the cart."""
        body = self._request(
            "POST",
            "/cart/share/whatsapp",
            json={"message": message},
            fallback_message=Messages.SHARE_FAILED,
        )
        links = body.get("whatsappLinks") if isinstance(body, dict) else None
        if not isinstance(links, list):
            raise ServerError(200, Messages.INVALID_SHARE_RESPONSE, body or None)
        try:
            result = [WhatsAppLink.model_validate(link) for link in links]
        except ValidationError as e:
            raise ServerError(200, Messages.INVALID_SHARE_RESPONSE, body) from e
        logger.info("Generated %d WhatsApp link(s)", len(result))
        return result

    def create_order(self, message: str = "") -> OrderConfirmation:
        body = self._request(
            "POST",
            "/cart/order",
            json={"message": message},
            fallback_message=Messages.ORDER_FAILED,
        )
        try:
            confirmation = OrderConfirmation.model_validate(body or {})
        except ValidationError as e:
            raise ServerError(200, Messages.ORDER_FAILED, body) from e
        if confirmation.order:
            logger.info(
                "Order %s created, total=%s, status=%s",
                confirmation.order.id,
                confirmation.order.total_amount,
                confirmation.order.status,
            )
        return confirmation

    def items_count(self) -> int:
        """Total quantity in the cart; 0 when logged out or on any error."""
        if not self.auth.is_authenticated:
            return 0
        try:
            return self.get_cart().items_count
        except MarketplaceError as e:
            logger.warning("Could not count cart items: %s", e)
            return 0


def _cart(body: Any, fallback: str = Messages.LOAD_CART_FAILED) -> Cart:
    if isinstance(body, dict) and isinstance(body.get("cart"), dict):
        try:
            return Cart.model_validate(body["cart"])
        except ValidationError as e:
            raise ServerError(200, fallback, body) from e
    raise ServerError(200, fallback, body if isinstance(body, dict) else None)
