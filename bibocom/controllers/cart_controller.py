"""
CartController: view state of the cart page.

The cart lives on the server. Every mutation is followed by a full refetch.
Refetches are numbered when issued; a response older than the snapshot
already applied is dropped, so concurrent quantity changes cannot roll the
view back to a stale cart. An item with an update or removal in flight
refuses further mutations until it settles.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from bibocom.adapters.cart_client import CartClient
from bibocom.config import Settings, get_settings
from bibocom.constants.events import EventTopic
from bibocom.constants.messages import Messages
from bibocom.core.errors import MarketplaceError
from bibocom.core.events import EventBus
from bibocom.core.session import AuthContext
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.cart import Cart, CartItem, OrderConfirmation, WhatsAppLink
from bibocom.schemas.view_state import NavigationRequest, Toast
from bibocom.services.promo_service import PromoRegistry, default_promo_registry
from bibocom.utils.aio import run_sync

logger = get_logger("cart")

WHATSAPP_LINKS_ROUTE = "/whatsapp-links"

Navigate = Callable[[str, dict[str, Any]], None]


def compute_subtotal(cart: Cart) -> float:
    """Sum of price x quantity; the server total is used when a price is missing."""
    totals = [item.line_total for item in cart.items]
    if any(total is None for total in totals):
        return cart.total_price or 0
    return sum(totals)


class CartController:
    def __init__(
        self,
        auth: AuthContext,
        cart: CartClient,
        bus: Optional[EventBus] = None,
        promos: Optional[PromoRegistry] = None,
        navigate: Optional[Navigate] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._auth = auth
        self._client = cart
        self._bus = bus or EventBus()
        self._promos = promos or default_promo_registry()
        self._navigate = navigate
        self._settings = settings or get_settings()

        self.cart: Optional[Cart] = None
        self.items: list[CartItem] = []
        self.subtotal: float = 0
        self.shipping_fee: float = 0
        self.discount: float = 0
        self.total: float = 0
        self.applied_promo: Optional[str] = None
        self.promo_error: Optional[str] = None
        self.promo_success: Optional[str] = None
        self.error: Optional[str] = None
        self.loading = False
        self.toast: Optional[Toast] = None
        self.navigation: Optional[NavigationRequest] = None

        self._updating: set[int] = set()
        self._removing: set[int] = set()
        self._issued = 0
        self._applied = 0
        self._closed = False

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def items_count(self) -> int:
        return sum(item.quantity for item in self.items)

    async def refresh(self) -> bool:
        """
        Fetch the cart and recompute the totals.

        Shipping resets to 0 and an applied promo is dropped. Returns False
        when the fetch failed or its response was superseded.
        """
        if not self._auth.is_authenticated:
            self.error = Messages.AUTH_REQUIRED
            return False
        self._issued += 1
        ticket = self._issued
        self.loading = True
        try:
            cart = await run_sync(self._client.get_cart)
        except MarketplaceError as e:
            logger.error("Fetching the cart failed: %s", e)
            if not self._closed and ticket > self._applied:
                self.error = e.message
                self.loading = ticket < self._issued
            return False
        if self._closed:
            return False
        if ticket < self._applied:
            logger.debug("Dropping cart snapshot %d: %d already applied", ticket, self._applied)
            return False
        self._applied = ticket
        self._apply(cart)
        self.loading = ticket < self._issued
        return True

    async def change_quantity(self, item_id: int, delta: int) -> bool:
        """
        Move an item's quantity by ``delta`` within ``1..stock``.

        Out-of-bounds changes, and changes to an item with a mutation still in
        flight, are refused without a call. A failed update is recovered by
        refetching the cart.
        """
        item = self._find(item_id)
        if item is None or delta == 0 or item.is_busy:
            return False
        if delta < 0 and not item.can_decrease:
            return False
        if delta > 0 and not item.can_increase:
            return False
        quantity = item.quantity + delta
        stock = item.product.stock
        if quantity < 1 or (stock and quantity > stock):
            return False

        self._updating.add(item_id)
        self._sync_flags()
        try:
            await run_sync(self._client.update_item, item_id, quantity)
        except MarketplaceError as e:
            logger.error("Updating item %s to %s failed: %s", item_id, quantity, e)
            await self._recover(e.message)
            return False
        else:
            await self.refresh()
        finally:
            self._updating.discard(item_id)
            self._sync_flags()
        await self._publish_cart_updated()
        return True

    async def increase(self, item_id: int) -> bool:
        return await self.change_quantity(item_id, 1)

    async def decrease(self, item_id: int) -> bool:
        return await self.change_quantity(item_id, -1)

    async def remove_item(self, item_id: int) -> bool:
        item = self._find(item_id)
        if item is None or item.is_busy:
            return False
        self._removing.add(item_id)
        self._sync_flags()
        try:
            # Any 2xx counts as removed; the refetch is the source of truth.
            await run_sync(self._client.remove_item, item_id)
        except MarketplaceError as e:
            logger.error("Removing item %s failed: %s", item_id, e)
            await self._recover(e.message)
            return False
        else:
            await self.refresh()
        finally:
            self._removing.discard(item_id)
            self._sync_flags()
        await self._publish_cart_updated()
        return True

    async def add_product(self, product_id: int, quantity: int = 1) -> bool:
        if not self._auth.is_authenticated:
            self.error = Messages.AUTH_REQUIRED
            return False
        try:
            await run_sync(self._client.add_item, product_id, quantity)
        except MarketplaceError as e:
            logger.error("Adding product %s failed: %s", product_id, e)
            if not self._closed:
                self.error = e.message
                self.toast = Toast(e.message, "error")
            return False
        await self.refresh()
        await self._publish_cart_updated()
        return True

    async def clear(self) -> bool:
        try:
            await run_sync(self._client.clear)
        except MarketplaceError as e:
            logger.error("Clearing the cart failed: %s", e)
            await self._recover(e.message)
            return False
        await self.refresh()
        await self._publish_cart_updated()
        return True

    def apply_promo_code(self, code: str) -> bool:
        """Apply a registered promo code to the current subtotal."""
        self.promo_error = None
        self.promo_success = None
        if not code.strip():
            self.promo_error = Messages.PROMO_EMPTY
            return False
        policy = self._promos.lookup(code)
        if policy is None:
            self.promo_error = Messages.PROMO_INVALID
            return False
        self.applied_promo = code.upper()
        self.discount = policy.discount(self.subtotal)
        self.total = self.subtotal + self.shipping_fee - self.discount
        self.promo_success = Messages.PROMO_APPLIED.format(code=self.applied_promo)
        logger.info("Promo %s applied: discount=%s", self.applied_promo, self.discount)
        return True

    async def share_via_whatsapp(
        self, message: Optional[str] = None
    ) -> Optional[list[WhatsAppLink]]:
        """Fetch one WhatsApp link per shop and navigate to the links view."""
        if self.is_empty:
            self.error = Messages.EMPTY_CART_SHARE
            return None
        text = self._settings.share_message if message is None else message
        try:
            links = await run_sync(self._client.share_via_whatsapp, text)
        except MarketplaceError as e:
            logger.error("Sharing the cart failed: %s", e)
            if not self._closed:
                self.error = e.message
            return None
        if self._closed:
            return None
        self.error = None
        self.navigation = NavigationRequest(WHATSAPP_LINKS_ROUTE, {"links": links})
        if self._navigate is not None:
            self._navigate(self.navigation.route, self.navigation.state)
        return links

    async def place_order(self, message: str = "") -> Optional[OrderConfirmation]:
        """Create an order from the cart. A failure leaves the cart untouched."""
        if self.is_empty:
            self.toast = Toast(Messages.EMPTY_CART_ORDER, "error")
            return None
        try:
            confirmation = await run_sync(self._client.create_order, message)
        except MarketplaceError as e:
            logger.error("Placing the order failed: %s", e)
            if not self._closed:
                self.toast = Toast(e.message, "error")
            return None
        if self._closed:
            return None
        self.toast = Toast(Messages.ORDER_PLACED, "success")
        await self.refresh()
        await self._publish_cart_updated()
        return confirmation

    def close(self) -> None:
        """Ignore every response still in flight."""
        self._closed = True

    def _apply(self, cart: Cart) -> None:
        self.cart = cart
        self.items = list(cart.items)
        self._sync_flags()
        self.subtotal = compute_subtotal(cart)
        self.shipping_fee = 0
        self.discount = 0
        self.applied_promo = None
        self.promo_success = None
        self.total = self.subtotal + self.shipping_fee - self.discount
        self.error = None

    async def _recover(self, message: str) -> None:
        await self.refresh()
        if not self._closed:
            self.error = message

    def _sync_flags(self) -> None:
        for item in self.items:
            item.is_updating = item.id in self._updating
            item.is_removing = item.id in self._removing

    def _find(self, item_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    async def _publish_cart_updated(self) -> None:
        if self._closed:
            return
        await self._bus.publish(EventTopic.CART_UPDATED, self.items_count)
