"""Client for the ``/orders`` and ``/merchant/orders`` endpoints."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from bibocom.adapters.base import ApiClient
from bibocom.constants.messages import Messages
from bibocom.core.errors import ServerError
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.order import (
    AutoConfirmResult,
    ConfirmationCheck,
    Order,
    OrderStatus,
)
from bibocom.utils.formatting import format_amount

logger = get_logger("order_client")

MARKETPLACE_NAME = "BibocomMarket"

ModelT = TypeVar("ModelT", bound=BaseModel)


class OrderClient(ApiClient):
    """
    Order history for clients and order management for merchants.

    Status strings are forwarded to the server as-is; transition rules are
    enforced server side.
    """

    def list_orders(self) -> list[Order]:
        body = self._request("GET", "/orders")
        return _parse_orders(body)

    def get_order(self, order_id: int) -> Order:
        body = self._request("GET", f"/orders/{order_id}")
        return _parse(Order, _order(body), body, Messages.LOAD_ORDERS_FAILED)

    def list_merchant_orders(self) -> list[Order]:
        body = self._request("GET", "/merchant/orders")
        orders = _parse_orders(body)
        logger.info("Fetched %d merchant order(s)", len(orders))
        return orders

    def update_status(self, order_id: int, status: str) -> Order:
        body = self._request(
            "PATCH",
            f"/orders/{order_id}/status",
            json={"status": str(status)},
            fallback_message=Messages.UPDATE_ORDER_STATUS_FAILED,
        )
        logger.info("Order %s moved to %s", order_id, status)
        return _parse(Order, _order(body), body, Messages.UPDATE_ORDER_STATUS_FAILED)

    def cancel(self, order_id: int) -> Order:
        return self.update_status(order_id, OrderStatus.CANCELED)

    def confirm_delivery(self, order_id: int) -> Order:
        """Client-side receipt confirmation."""
        return self.update_status(order_id, OrderStatus.DELIVERED)

    def check_confirmation(self, order_id: int) -> ConfirmationCheck:
        body = self._request("GET", f"/orders/{order_id}/check-confirmation")
        return _parse(
            ConfirmationCheck, body or {"orderId": order_id, "status": ""}, body
        )

    def auto_confirm_deliveries(self) -> AutoConfirmResult:
        body = self._request("POST", "/orders/auto-confirm-deliveries")
        result = _parse(AutoConfirmResult, body or {}, body)
        logger.info(
            "Auto-confirm processed %d order(s): %d confirmed, %d failed",
            result.total_processed,
            result.confirmed,
            result.failed,
        )
        return result


def build_merchant_whatsapp_message(order: Order, client_name: str) -> str:
    """Payment-request text a merchant sends to a client for an order."""
    lines = [
        f"Hello {client_name}, about your order #ORDER-{order.id} on {MARKETPLACE_NAME}.",
        "",
        "Ordered products:",
    ]
    for index, item in enumerate(order.order_items, start=1):
        lines.append(
            f"{index}. {item.product.name} - {item.quantity} x "
            f"{format_amount(item.price)} FCFA = {format_amount(item.line_total)} FCFA"
        )
    lines += [
        "",
        f"Total: {format_amount(order.items_total)} FCFA",
        "",
        "To confirm your order, please pay with:",
        "💳 Wave: [Your Wave number]",
        "📱 Orange Money: [Your OM number]",
        "💰 Cash on delivery",
        "",
        "Once paid, send me a screenshot or confirm by message.",
        "Thank you! 😊",
    ]
    return "\n".join(lines)


def _orders(body: Any) -> list[Any]:
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        orders = body.get("orders", body.get("data"))
        if isinstance(orders, list):
            return orders
    return []


def _order(body: Any) -> Any:
    if isinstance(body, dict) and isinstance(body.get("order"), dict):
        return body["order"]
    return body


def _parse(
    model: type[ModelT],
    data: Any,
    body: Any,
    fallback: str = Messages.GENERIC_ERROR,
) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ServerError(200, fallback, body if isinstance(body, dict) else None) from e


def _parse_orders(body: Any) -> list[Order]:
    try:
        return [Order.model_validate(o) for o in _orders(body)]
    except ValidationError as e:
        raise ServerError(
            200, Messages.LOAD_ORDERS_FAILED, body if isinstance(body, dict) else None
        ) from e
