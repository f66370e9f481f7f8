"""
Checkout errors
"""


class CheckoutError(Exception):
    """Base class for checkout failures"""


class CheckoutValidationError(CheckoutError, ValueError):
    """The order cannot be placed as entered; the message is shown to the shopper"""


class OrderSubmissionError(CheckoutError):
    """Persisting the order failed; the cart is left untouched"""
