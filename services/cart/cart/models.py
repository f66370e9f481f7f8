"""
Data models for the shopping cart using Pydantic
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cart.regions import Region


LineItemKey = Tuple[str, Optional[str], Optional[str]]


class Product(BaseModel):
    """Catalog record as read by the cart. Never mutated here."""
    id: str
    name: str
    price: float = Field(..., ge=0)
    images: List[str] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    sold_out: bool = Field(default=False, alias="soldOut")
    category: Optional[str] = None
    active: bool = True

    model_config = ConfigDict(populate_by_name=True)

    @property
    def primary_image(self) -> Optional[str]:
        """First gallery image, falling back to the thumbnail"""
        if self.images:
            return self.images[0]
        return self.thumbnail or None


class CartLineItem(BaseModel):
    """One (product, size, color) selection in the cart"""
    product_id: str = Field(..., description="Catalog product id")
    name: str = Field(..., description="Name captured when first added")
    unit_price: float = Field(..., ge=0, description="Price captured when first added")
    image: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "product_id": "prod_123",
                "name": "Oversized Hoodie",
                "unit_price": 500,
                "image": "https://cdn.example.com/hoodie.jpg",
                "size": "L",
                "color": "black",
                "quantity": 2,
            }
        },
    )

    @property
    def key(self) -> LineItemKey:
        return (self.product_id, self.size, self.color)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class AppliedPromoCode(BaseModel):
    """Snapshot of a promo code taken when it was applied to the cart"""
    code_id: str = Field(..., description="Promo store document id")
    code: str
    discount_percentage: int = Field(..., ge=0, le=100)
    discount_amount: int = Field(default=0, ge=0, description="Discount at application time, display only")

    model_config = ConfigDict(frozen=True)

    @field_validator("code")
    @classmethod
    def code_uppercase(cls, v: str) -> str:
        return v.strip().upper()


class CartState(BaseModel):
    """Line items plus the selected region and applied promo code"""
    items: Tuple[CartLineItem, ...] = ()
    region: Optional[Region] = None
    applied_promo_code: Optional[AppliedPromoCode] = None

    model_config = ConfigDict(frozen=True)

    def find_item(self, key: LineItemKey) -> Optional[CartLineItem]:
        """Get the line item for a key"""
        for item in self.items:
            if item.key == key:
                return item
        return None

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
