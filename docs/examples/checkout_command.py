import asyncio
import logging
from typing import Optional

from bibocom.runtime import Runtime
from bibocom.schemas.cart import OrderConfirmation


class CheckoutCommand:
    """
    Command to apply a promo code and place an order from the current cart.
    """

    def __init__(self, runtime: Optional[Runtime] = None):
        self.runtime = runtime if runtime is not None else Runtime()
        self.logger = logging.getLogger(__name__)

    async def execute(self, promo_code: Optional[str] = None) -> Optional[OrderConfirmation]:
        """
        Execute the checkout.

        Args:
            promo_code: Optional promo code to apply before ordering

        Returns:
            OrderConfirmation: The created order, or None if it was refused
        """
        cart = self.runtime.cart
        if not await cart.refresh():
            self.logger.error("Could not load the cart: %s", cart.error)
            return None

        if promo_code and not cart.apply_promo_code(promo_code):
            self.logger.warning("Promo code refused: %s", cart.promo_error)

        self.logger.info(
            "Placing order: subtotal=%s discount=%s total=%s",
            cart.subtotal,
            cart.discount,
            cart.total,
        )
        confirmation = await cart.place_order()
        if cart.toast is not None:
            self.logger.info(cart.toast.message)
        return confirmation


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(CheckoutCommand().execute("BIBOSPRING20"))
