"""
Business logic for promo codes
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import structlog

from promo.db import PromoCodeRepository
from promo.discount import Number, compute_discount_amount
from promo.errors import (
    DuplicatePromoCodeError, PromoCodeNotFoundError, PromoCodeValidationError,
    UsageLimitReachedError,
)
from promo.models import (
    MAX_DISCOUNT_PERCENTAGE, MIN_DISCOUNT_PERCENTAGE, STATUS_OUTCOMES, PromoCode,
    PromoValidationResult, ValidationOutcome, normalize_code,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PromoCodeService:
    """Service layer for promo code business logic"""

    def __init__(self, repository: PromoCodeRepository, clock: Optional[Callable[[], datetime]] = None):
        self.repo = repository
        self.clock = clock or _utcnow
        self.logger = structlog.get_logger().bind(component="promo_service")

    def now(self) -> datetime:
        return self.clock()

    @staticmethod
    def validate_create_data(code, discount_percentage, usage_limit, validity_days) -> None:
        """
        Check admin input for a new promo code.

        Raises:
            PromoCodeValidationError: With the message to show the admin
        """
        if not isinstance(code, str) or not code.strip():
            raise PromoCodeValidationError("Promo code name is required")

        if (not _is_int(discount_percentage)
                or not MIN_DISCOUNT_PERCENTAGE <= discount_percentage <= MAX_DISCOUNT_PERCENTAGE):
            raise PromoCodeValidationError(
                f"Discount percentage must be between {MIN_DISCOUNT_PERCENTAGE} and {MAX_DISCOUNT_PERCENTAGE}"
            )

        if not _is_int(usage_limit) or usage_limit < 1:
            raise PromoCodeValidationError("Usage limit must be at least 1")

        if not _is_int(validity_days) or validity_days < 1:
            raise PromoCodeValidationError("Validity days must be at least 1")

    def create_code(
        self,
        code: str,
        discount_percentage: int,
        usage_limit: int,
        validity_days: int,
        created_by: str = "admin",
    ) -> PromoCode:
        """
        Create a new promo code.

        Args:
            code: Code name; stored uppercased and trimmed
            discount_percentage: Whole percent between 5 and 70
            usage_limit: Maximum number of completed orders that may use it
            validity_days: Days from now until the code expires
            created_by: Admin identifier

        Returns:
            The stored promo code

        Raises:
            PromoCodeValidationError: If any field is out of bounds
            DuplicatePromoCodeError: If the normalized name already exists
        """
        try:
            self.validate_create_data(code, discount_percentage, usage_limit, validity_days)

            normalized = normalize_code(code)
            if self.repo.find_by_code(normalized) is not None:
                raise DuplicatePromoCodeError(normalized)

            now = self.now()
            promo = PromoCode(
                code=normalized,
                discount_percentage=discount_percentage,
                usage_limit=usage_limit,
                used_count=0,
                created_at=now,
                expires_at=now + timedelta(days=validity_days),
                is_active=True,
                created_by=created_by,
            )
            promo.id = self.repo.insert(promo.to_document())

            self.logger.info("Promo code created", code=promo.code, code_id=promo.id,
                             discount_percentage=discount_percentage, usage_limit=usage_limit)
            return promo

        except (PromoCodeValidationError, DuplicatePromoCodeError) as e:
            self.logger.warning("Invalid create promo code request", code=code, error=str(e))
            raise
        except Exception as e:
            self.logger.error("Error creating promo code", code=code, error=str(e))
            raise

    def list_codes(self) -> List[PromoCode]:
        """All promo codes, newest first"""
        return [PromoCode.from_document(doc) for doc in self.repo.list_all()]

    def get_code_by_name(self, code_name: str) -> Optional[PromoCode]:
        """Look up a promo code by name, case-insensitively"""
        document = self.repo.find_by_code(normalize_code(code_name))
        if document is None:
            return None
        return PromoCode.from_document(document)

    def validate(self, code_name: str) -> PromoValidationResult:
        """
        Validate a code submitted by a shopper.

        Checks run in order: existence, active flag, expiry, usage limit.
        Store failures are reported as VALIDATION_ERROR, never raised.
        """
        if not normalize_code(code_name):
            return PromoValidationResult.of(ValidationOutcome.EMPTY_CODE)

        try:
            promo = self.get_code_by_name(code_name)
        except Exception as e:
            self.logger.error("Error validating promo code", code=code_name, error=str(e))
            return PromoValidationResult.of(ValidationOutcome.VALIDATION_ERROR)

        if promo is None:
            return PromoValidationResult.of(ValidationOutcome.NOT_FOUND)

        outcome = STATUS_OUTCOMES[promo.status(self.now())]
        self.logger.debug("Promo code validated", code=promo.code, outcome=outcome.value)
        return PromoValidationResult.of(outcome, promo)

    def compute_discount_amount(self, subtotal: Number, discount_percentage: Number) -> int:
        return compute_discount_amount(subtotal, discount_percentage)

    def apply(self, code_id: str) -> PromoCode:
        """
        Record one completed order against a promo code.

        Raises:
            PromoCodeNotFoundError: If no code has this id
            UsageLimitReachedError: If the code has no uses left
        """
        document = self.repo.increment_usage(code_id)
        if document is None:
            existing = self.repo.find_by_id(code_id)
            if existing is None:
                raise PromoCodeNotFoundError(code_id)
            self.logger.warning("Promo code usage limit reached", code_id=code_id, code=existing.get("code"))
            raise UsageLimitReachedError(existing.get("code", code_id))

        promo = PromoCode.from_document(document)
        self.logger.info("Promo code usage updated", code_id=code_id, code=promo.code,
                         used_count=promo.used_count, is_active=promo.is_active)
        return promo

    def delete_code(self, code_id: str) -> bool:
        """Permanently delete a promo code"""
        return self.repo.delete(code_id)
