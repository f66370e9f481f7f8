from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cart.models import CartLineItem


class OrderItem(BaseModel):
    """A line item as persisted with an order"""
    product_id: str
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    color: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_line_item(cls, item: CartLineItem) -> "OrderItem":
        return cls(
            product_id=item.product_id,
            name=item.name,
            price=item.unit_price,
            quantity=item.quantity,
            size=item.size,
            color=item.color,
            image=item.image,
        )
