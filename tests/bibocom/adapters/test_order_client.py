"""Tests for OrderClient and the merchant WhatsApp message."""

import pytest

from bibocom.adapters.order_client import OrderClient, build_merchant_whatsapp_message
from bibocom.constants.messages import Messages
from bibocom.core.errors import ServerError
from bibocom.schemas.order import Order, OrderStatus
from tests.fixtures.http_fixtures import make_response

ORDER = {
    "id": 42,
    "clientId": 3,
    "status": "PENDING",
    "totalAmount": 12500,
    "orderItems": [
        {"id": 1, "quantity": 2, "price": 5000, "product": {"id": 110, "name": "Pagne"}},
        {"id": 2, "quantity": 1, "price": 2500, "product": {"id": 120, "name": "Sac"}},
    ],
}


@pytest.fixture
def client(auth, settings, http):
    return OrderClient(auth, settings, http)


def test_list_orders(client, http):
    http.request.return_value = make_response(200, {"orders": [ORDER]})
    orders = client.list_orders()
    assert [o.id for o in orders] == [42]
    assert orders[0].items_total == 12500


def test_list_merchant_orders_plain_list(client, http):
    http.request.return_value = make_response(200, [ORDER])
    assert [o.id for o in client.list_merchant_orders()] == [42]
    assert http.request.call_args[0][1] == "http://api.test/api/merchant/orders"


def test_get_order_unwraps_envelope(client, http):
    http.request.return_value = make_response(200, {"order": ORDER})
    assert client.get_order(42).status == "PENDING"


@pytest.mark.parametrize(
    "method_name, status",
    [("cancel", OrderStatus.CANCELED), ("confirm_delivery", OrderStatus.DELIVERED)],
)
def test_status_shortcuts(client, http, method_name, status):
    http.request.return_value = make_response(200, {"order": {**ORDER, "status": str(status)}})

    order = getattr(client, method_name)(42)

    args, kwargs = http.request.call_args
    assert args == ("PATCH", "http://api.test/api/orders/42/status")
    assert kwargs["json"] == {"status": str(status)}
    assert order.status == str(status)


def test_check_confirmation(client, http):
    http.request.return_value = make_response(
        200, {"message": "ok", "orderId": 42, "status": "DELIVERED", "whatsappLinks": []}
    )
    check = client.check_confirmation(42)
    assert check.order_id == 42
    assert check.status == "DELIVERED"


def test_auto_confirm_deliveries(client, http):
    http.request.return_value = make_response(
        200,
        {
            "message": "done",
            "totalProcessed": 2,
            "confirmed": 1,
            "failed": 1,
            "results": [
                {"orderId": 1, "clientName": "Awa", "status": "SUCCESS"},
                {"orderId": 2, "clientName": "Moussa", "status": "ERROR", "error": "x"},
            ],
        },
    )
    result = client.auto_confirm_deliveries()
    assert result.confirmed == 1
    assert result.results[1].error == "x"


def test_list_orders_with_malformed_order(client, http):
    http.request.return_value = make_response(200, {"orders": [{"id": 42}]})
    with pytest.raises(ServerError) as exc_info:
        client.list_orders()
    assert exc_info.value.message == Messages.LOAD_ORDERS_FAILED


def test_update_status_with_malformed_order(client, http):
    http.request.return_value = make_response(200, {"order": {"status": "SHIPPED"}})
    with pytest.raises(ServerError) as exc_info:
        client.update_status(42, OrderStatus.SHIPPED)
    assert exc_info.value.message == Messages.UPDATE_ORDER_STATUS_FAILED


def test_build_merchant_whatsapp_message():
    message = build_merchant_whatsapp_message(Order.model_validate(ORDER), "Awa")

    lines = message.splitlines()
    assert lines[0] == "Hello Awa, about your order #ORDER-42 on BibocomMarket."
    assert "1. Pagne - 2 x 5 000 FCFA = 10 000 FCFA" in lines
    assert "2. Sac - 1 x 2 500 FCFA = 2 500 FCFA" in lines
    assert "Total: 12 500 FCFA" in lines
    assert lines[-1] == "Thank you! 😊"
