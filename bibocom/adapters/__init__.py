"""REST clients for the marketplace backend."""

from bibocom.adapters.base import ApiClient
from bibocom.adapters.cart_client import CartClient
from bibocom.adapters.message_client import MessageClient
from bibocom.adapters.order_client import OrderClient
from bibocom.adapters.user_client import UserClient

__all__ = ["ApiClient", "CartClient", "MessageClient", "OrderClient", "UserClient"]
