"""
Promo code domain errors
"""


class PromoCodeError(Exception):
    """Base class for promo code errors"""


class PromoCodeValidationError(PromoCodeError, ValueError):
    """Invalid data supplied when creating a promo code"""


class DuplicatePromoCodeError(PromoCodeError):
    """A promo code with the same normalized name already exists"""

    def __init__(self, code: str):
        super().__init__(f"Promo code {code} already exists")
        self.code = code


class PromoCodeNotFoundError(PromoCodeError, LookupError):
    """No promo code matches the given id"""

    def __init__(self, code_id: str):
        super().__init__(f"Promo code not found: {code_id}")
        self.code_id = code_id


class UsageLimitReachedError(PromoCodeError):
    """The promo code has no uses left"""

    def __init__(self, code: str):
        super().__init__(f"Promo code {code} usage limit reached")
        self.code = code
