"""
Session cart store: holds the current cart state and applies commands to it
"""
from typing import Optional

import structlog

from cart.commands import (
    AddItem, ApplyPromo, CartCommand, Clear, RemoveItem, RemovePromo,
    SetRegion, UpdateQuantity, apply_command,
)
from cart.config import Config, get_config
from cart.models import AppliedPromoCode, CartState, Product
from cart.pricing import PricingSummary, compute_pricing
from cart.regions import Region, get_region


class CartStore:
    """
    Holds one session's cart.

    Components that read or change the cart receive the store explicitly.
    All mutations go through dispatch(), which swaps in the state returned
    by apply_command(). Pricing is derived on each call to pricing().
    """

    def __init__(self, config: Optional[Config] = None, state: Optional[CartState] = None):
        self.config = config or get_config()
        self._state = state or CartState()
        self.logger = structlog.get_logger().bind(component="cart_store")

    @property
    def state(self) -> CartState:
        return self._state

    def dispatch(self, command: CartCommand) -> CartState:
        """Apply a command and keep the resulting state"""
        self._state = apply_command(self._state, command)
        self.logger.debug(
            "Cart command applied",
            command=type(command).__name__,
            line_items=len(self._state.items),
            total_items=self._state.total_items,
        )
        return self._state

    def add_item(self, product: Product, size: Optional[str], color: Optional[str], quantity: int = 1) -> CartState:
        return self.dispatch(AddItem(product=product, size=size, color=color, quantity=quantity))

    def remove_item(self, product_id: str, size: Optional[str], color: Optional[str]) -> CartState:
        return self.dispatch(RemoveItem(product_id=product_id, size=size, color=color))

    def update_quantity(self, product_id: str, size: Optional[str], color: Optional[str], quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(product_id=product_id, size=size, color=color, quantity=quantity))

    def clear(self) -> CartState:
        return self.dispatch(Clear())

    def set_region(self, region: Optional[Region]) -> CartState:
        return self.dispatch(SetRegion(region=region))

    def set_region_by_name(self, name: str) -> CartState:
        """
        Select a region from the pricing table by name.

        Raises:
            UnknownRegionError: If the name is not in the table
        """
        return self.set_region(get_region(name))

    def apply_promo_code(self, promo_code: AppliedPromoCode) -> CartState:
        return self.dispatch(ApplyPromo(promo_code=promo_code))

    def remove_promo_code(self) -> CartState:
        return self.dispatch(RemovePromo())

    def pricing(self) -> PricingSummary:
        """Current totals for the cart"""
        return compute_pricing(
            self._state,
            free_shipping_threshold=self.config.free_shipping_threshold,
            strict_regions=self.config.strict_region_lookup,
        )
