"""
Cart commands and the pure state-transition function that applies them
"""
from dataclasses import dataclass
from typing import Optional, Union

from cart.models import AppliedPromoCode, CartLineItem, CartState, LineItemKey, Product
from cart.regions import Region


@dataclass(frozen=True)
class AddItem:
    product: Product
    size: Optional[str]
    color: Optional[str]
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    product_id: str
    size: Optional[str]
    color: Optional[str]


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    size: Optional[str]
    color: Optional[str]
    quantity: int


@dataclass(frozen=True)
class SetRegion:
    region: Optional[Region]


@dataclass(frozen=True)
class ApplyPromo:
    promo_code: AppliedPromoCode


@dataclass(frozen=True)
class RemovePromo:
    pass


@dataclass(frozen=True)
class Clear:
    pass


CartCommand = Union[AddItem, RemoveItem, UpdateQuantity, SetRegion, ApplyPromo, RemovePromo, Clear]


def _without(state: CartState, key: LineItemKey) -> CartState:
    items = tuple(item for item in state.items if item.key != key)
    return state.model_copy(update={"items": items})


def _add_item(state: CartState, command: AddItem) -> CartState:
    product = command.product
    key = (product.id, command.size, command.color)

    if state.find_item(key) is not None:
        # Merge is additive; name and price stay as first captured
        items = tuple(
            item.model_copy(update={"quantity": item.quantity + command.quantity})
            if item.key == key else item
            for item in state.items
        )
        return state.model_copy(update={"items": items})

    new_item = CartLineItem(
        product_id=product.id,
        name=product.name,
        unit_price=product.price,
        image=product.primary_image,
        size=command.size,
        color=command.color,
        quantity=command.quantity,
    )
    return state.model_copy(update={"items": state.items + (new_item,)})


def _update_quantity(state: CartState, command: UpdateQuantity) -> CartState:
    key = (command.product_id, command.size, command.color)
    if command.quantity <= 0:
        return _without(state, key)

    items = tuple(
        item.model_copy(update={"quantity": command.quantity}) if item.key == key else item
        for item in state.items
    )
    return state.model_copy(update={"items": items})


def apply_command(state: CartState, command: CartCommand) -> CartState:
    """
    Apply a command to a cart state and return the resulting state.

    The input state is never modified. Every command is total: removing or
    updating an absent line item leaves the state unchanged.

    Raises:
        TypeError: If the command type is not a cart command
    """
    if isinstance(command, AddItem):
        return _add_item(state, command)
    if isinstance(command, RemoveItem):
        return _without(state, (command.product_id, command.size, command.color))
    if isinstance(command, UpdateQuantity):
        return _update_quantity(state, command)
    if isinstance(command, SetRegion):
        return state.model_copy(update={"region": command.region})
    if isinstance(command, ApplyPromo):
        return state.model_copy(update={"applied_promo_code": command.promo_code})
    if isinstance(command, RemovePromo):
        return state.model_copy(update={"applied_promo_code": None})
    if isinstance(command, Clear):
        return CartState()
    raise TypeError(f"Unsupported cart command: {type(command).__name__}")
