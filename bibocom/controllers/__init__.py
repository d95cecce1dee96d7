from bibocom.controllers.badges import CartBadge, UnreadBadge
from bibocom.controllers.cart_controller import CartController
from bibocom.controllers.conversation_controller import ConversationController

__all__ = [
    "CartBadge",
    "CartController",
    "ConversationController",
    "UnreadBadge",
]
