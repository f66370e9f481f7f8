"""
Delivery regions and their shipping tiers
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShippingTier(str, Enum):
    """Shipping bracket a region belongs to"""
    DELTA_NORTH = "delta_north"
    UPPER_EGYPT = "upper_egypt"
    CANAL_ZONE_EXCEPTION = "canal_zone_exception"


class UnknownRegionError(LookupError):
    """Raised when a region name is not in the pricing table"""

    def __init__(self, name: str):
        super().__init__(f"Unknown region: {name!r}")
        self.name = name


class Region(BaseModel):
    """Immutable delivery region"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Region name, unique key")
    arabic_name: str = Field(..., min_length=1, description="Storefront display name")
    tier: ShippingTier
    shipping_price: int = Field(..., ge=0, description="Flat delivery fee")


DELTA_NORTH_PRICE = 70
UPPER_EGYPT_PRICE = 120
SUEZ_PRICE = 50


def _delta(name: str, arabic_name: str) -> Region:
    return Region(name=name, arabic_name=arabic_name,
                  tier=ShippingTier.DELTA_NORTH, shipping_price=DELTA_NORTH_PRICE)


def _upper(name: str, arabic_name: str) -> Region:
    return Region(name=name, arabic_name=arabic_name,
                  tier=ShippingTier.UPPER_EGYPT, shipping_price=UPPER_EGYPT_PRICE)


REGIONS: List[Region] = [
    # Capital, delta, canal zone, Sinai and the north coast
    _delta("Cairo", "القاهرة"),
    _delta("Giza", "الجيزة"),
    _delta("Qalyubia", "القليوبية"),
    _delta("Alexandria", "الإسكندرية"),
    _delta("Beheira", "البحيرة"),
    _delta("Kafr El Sheikh", "كفر الشيخ"),
    _delta("Dakahlia", "الدقهلية"),
    _delta("Sharqia", "الشرقية"),
    _delta("Gharbia", "الغربية"),
    _delta("Monufia", "المنوفية"),
    _delta("Damietta", "دمياط"),
    _delta("Port Said", "بورسعيد"),
    _delta("Ismailia", "الإسماعيلية"),
    Region(name="Suez", arabic_name="السويس",
           tier=ShippingTier.CANAL_ZONE_EXCEPTION, shipping_price=SUEZ_PRICE),
    _delta("North Sinai", "شمال سيناء"),
    _delta("South Sinai", "جنوب سيناء"),
    _delta("Matrouh", "مرسى مطروح"),
    # Upper Egypt
    _upper("Beni Suef", "بني سويف"),
    _upper("Faiyum", "الفيوم"),
    _upper("Minya", "المنيا"),
    _upper("Asyut", "أسيوط"),
    _upper("Sohag", "سوهاج"),
    _upper("Qena", "قنا"),
    _upper("Luxor", "الأقصر"),
    _upper("Aswan", "أسوان"),
    _upper("Red Sea", "البحر الأحمر"),
    _upper("New Valley", "الوادي الجديد"),
]


def _build_index(regions: List[Region]) -> Dict[str, Region]:
    index: Dict[str, Region] = {}
    for region in regions:
        index[region.name.strip().casefold()] = region
        index[region.arabic_name.strip()] = region
    return index


_INDEX = _build_index(REGIONS)


def find_region(name: Optional[str]) -> Optional[Region]:
    """Look up a region by English (case-insensitive) or Arabic name"""
    if not name:
        return None
    key = name.strip()
    return _INDEX.get(key.casefold()) or _INDEX.get(key)


def get_region(name: str) -> Region:
    """
    Look up a region by name.

    Raises:
        UnknownRegionError: If the name is not in the table
    """
    region = find_region(name)
    if region is None:
        raise UnknownRegionError(name)
    return region


def shipping_price_for(name: str, strict: bool = True) -> int:
    """
    Tier price for a region name.

    Unknown names raise UnknownRegionError when strict, otherwise they cost 0.
    """
    region = find_region(name)
    if region is None:
        if strict:
            raise UnknownRegionError(name)
        return 0
    return region.shipping_price


def regions_by_tier() -> Dict[ShippingTier, List[Region]]:
    """Group regions by tier, keeping table order"""
    grouped: Dict[ShippingTier, List[Region]] = {}
    for region in REGIONS:
        grouped.setdefault(region.tier, []).append(region)
    return grouped
