"""
Promo code domain models
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


MIN_DISCOUNT_PERCENTAGE = 5
MAX_DISCOUNT_PERCENTAGE = 70


def normalize_code(code: Optional[str]) -> str:
    """Uppercase and trim a promo code name; anything but a str is empty"""
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PromoStatus(str, Enum):
    """Status derived from a promo code's fields at read time"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    USED_UP = "USED_UP"


class ValidationOutcome(str, Enum):
    """Result tag returned when a shopper submits a code"""
    VALID = "VALID"
    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    USAGE_LIMIT_REACHED = "USAGE_LIMIT_REACHED"
    EMPTY_CODE = "EMPTY_CODE"
    VALIDATION_ERROR = "VALIDATION_ERROR"


OUTCOME_MESSAGES = {
    ValidationOutcome.VALID: "Promo code applied",
    ValidationOutcome.NOT_FOUND: "Invalid promo code",
    ValidationOutcome.INACTIVE: "Promo code is no longer active",
    ValidationOutcome.EXPIRED: "Promo code has expired",
    ValidationOutcome.USAGE_LIMIT_REACHED: "Promo code usage limit reached",
    ValidationOutcome.EMPTY_CODE: "Please enter a promo code",
    ValidationOutcome.VALIDATION_ERROR: "Error validating promo code",
}

STATUS_OUTCOMES = {
    PromoStatus.ACTIVE: ValidationOutcome.VALID,
    PromoStatus.INACTIVE: ValidationOutcome.INACTIVE,
    PromoStatus.EXPIRED: ValidationOutcome.EXPIRED,
    PromoStatus.USED_UP: ValidationOutcome.USAGE_LIMIT_REACHED,
}


class PromoCode(BaseModel):
    """A stored promo code"""
    id: Optional[str] = Field(default=None, description="Store document id")
    code: str
    discount_percentage: int
    usage_limit: int
    used_count: int = 0
    created_at: datetime
    expires_at: datetime
    is_active: bool = True
    created_by: str = "admin"

    @field_validator("code")
    @classmethod
    def code_normalized(cls, v: str) -> str:
        return normalize_code(v)

    @field_validator("created_at", "expires_at")
    @classmethod
    def timestamps_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def is_expired(self, now: datetime) -> bool:
        return _as_utc(now) > self.expires_at

    def status(self, now: datetime) -> PromoStatus:
        """
        Derive the code's status.

        Precedence: inactive flag, then expiry, then usage count.
        """
        if not self.is_active:
            return PromoStatus.INACTIVE
        if self.is_expired(now):
            return PromoStatus.EXPIRED
        if self.used_count >= self.usage_limit:
            return PromoStatus.USED_UP
        return PromoStatus.ACTIVE

    def to_document(self) -> Dict[str, Any]:
        """Convert to dictionary for MongoDB storage"""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "PromoCode":
        """Create PromoCode from MongoDB document"""
        fields = {k: v for k, v in data.items() if k != "_id"}
        if "_id" in data:
            fields["id"] = str(data["_id"])
        return cls(**fields)

    def to_response(self, now: datetime) -> Dict[str, Any]:
        """JSON-ready representation including the derived status"""
        return {
            "id": self.id,
            "code": self.code,
            "discountPercentage": self.discount_percentage,
            "usageLimit": self.usage_limit,
            "usedCount": self.used_count,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "isActive": self.is_active,
            "createdBy": self.created_by,
            "status": self.status(now).value,
        }


class CreatePromoCodeRequest(BaseModel):
    """Admin request to create a promo code"""
    code: str
    discount_percentage: int
    usage_limit: int
    validity_days: int
    created_by: str = "admin"

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "code": "SUMMER20",
                "discountPercentage": 20,
                "usageLimit": 100,
                "validityDays": 7,
            }
        },
    )


class PromoValidationResult(BaseModel):
    """Outcome of validating a promo code submitted by a shopper"""
    outcome: ValidationOutcome
    message: str
    promo_code: Optional[PromoCode] = None

    @property
    def is_valid(self) -> bool:
        return self.outcome == ValidationOutcome.VALID

    @property
    def discount_percentage(self) -> Optional[int]:
        if self.promo_code is None:
            return None
        return self.promo_code.discount_percentage

    @classmethod
    def of(cls, outcome: ValidationOutcome, promo_code: Optional[PromoCode] = None) -> "PromoValidationResult":
        return cls(outcome=outcome, message=OUTCOME_MESSAGES[outcome], promo_code=promo_code)
