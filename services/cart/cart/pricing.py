"""
Order-level totals derived from a cart state
"""
from pydantic import BaseModel, ConfigDict

from cart.models import CartState
from cart.regions import ShippingTier, find_region, UnknownRegionError
from promo.discount import compute_discount_amount


FREE_SHIPPING_THRESHOLD = 3000


class PricingSummary(BaseModel):
    """Monetary figures for the current cart. Recomputed on every read."""
    subtotal: float
    discount_amount: int
    total_after_discount: float
    shipping_cost: int
    is_free_shipping: bool
    grand_total: float
    total_items: int
    shipping_message: str = ""
    amount_to_free_shipping: float = 0

    model_config = ConfigDict(frozen=True)


def _subtotal(state: CartState) -> float:
    return sum(item.line_total for item in state.items)


def _discount(state: CartState, subtotal: float) -> int:
    if state.applied_promo_code is None:
        return 0
    # Always against the live subtotal, not the snapshot taken at apply time
    return compute_discount_amount(subtotal, state.applied_promo_code.discount_percentage)


def _shipping_message(tier: ShippingTier, cost: int, region_name: str) -> str:
    if tier == ShippingTier.CANAL_ZONE_EXCEPTION:
        return f"Delivery fee: {cost} EGP ({region_name})"
    if tier == ShippingTier.DELTA_NORTH:
        return f"Delivery fee: {cost} EGP (Delta and North governorates)"
    return f"Delivery fee: {cost} EGP (Upper Egypt governorates)"


def compute_pricing(
    state: CartState,
    free_shipping_threshold: float = FREE_SHIPPING_THRESHOLD,
    strict_regions: bool = True,
) -> PricingSummary:
    """
    Derive subtotal, discount, shipping and grand total for a cart.

    Steps run in dependency order: subtotal, discount, total after discount,
    shipping, grand total. Free shipping at or above the threshold overrides
    any regional price.

    Args:
        state: Cart state to price
        free_shipping_threshold: Total after discount from which shipping is free
        strict_regions: Raise for a selected region missing from the table
            instead of charging 0

    Raises:
        UnknownRegionError: If strict_regions and the selected region is unknown
    """
    subtotal = _subtotal(state)
    discount_amount = _discount(state, subtotal)
    total_after_discount = subtotal - discount_amount

    is_free = total_after_discount >= free_shipping_threshold
    shipping_cost = 0
    message = ""

    if is_free:
        message = f"Free shipping on orders over {free_shipping_threshold:g} EGP"
    elif state.region is not None:
        region = find_region(state.region.name)
        if region is None:
            if strict_regions:
                raise UnknownRegionError(state.region.name)
        else:
            shipping_cost = region.shipping_price
            message = _shipping_message(region.tier, shipping_cost, region.name)

    return PricingSummary(
        subtotal=subtotal,
        discount_amount=discount_amount,
        total_after_discount=total_after_discount,
        shipping_cost=shipping_cost,
        is_free_shipping=is_free,
        grand_total=total_after_discount + shipping_cost,
        total_items=state.total_items,
        shipping_message=message,
        amount_to_free_shipping=0 if is_free else free_shipping_threshold - total_after_discount,
    )
