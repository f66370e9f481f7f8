from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cart.pricing import PricingSummary
from order.models.order_item_model import OrderItem


class Customer(BaseModel):
    """Delivery contact entered at checkout"""
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    phone1: str = Field(..., min_length=1)
    phone2: Optional[str] = None


class OrderPromoCode(BaseModel):
    """Promo code details recorded on the order"""
    code: str
    discount_percentage: int
    discount_amount: int
    original_total: float
    final_total: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderPayload(BaseModel):
    """Finalized order handed to the order store"""
    items: List[OrderItem]
    subtotal: float
    shipping_cost: int
    total: float
    governorate: str
    promo_code: Optional[OrderPromoCode] = None
    customer: Customer
    status: str = "pending"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        """Convert to dictionary for MongoDB storage, camelCase keys"""
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderConfirmation(BaseModel):
    """Returned to the shopper once the order is stored"""
    order_id: str
    pricing: PricingSummary
    promo_code_recorded: bool = False
