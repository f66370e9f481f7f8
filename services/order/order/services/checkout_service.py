"""
Checkout: promo code application and order submission for a cart session
"""
import structlog

from cart.models import AppliedPromoCode
from cart.regions import UnknownRegionError
from cart.store import CartStore
from order.db import OrderRepository
from order.errors import CheckoutValidationError, OrderSubmissionError
from order.models.order_item_model import OrderItem
from order.models.order_model import Customer, OrderConfirmation, OrderPayload, OrderPromoCode
from promo.models import PromoValidationResult
from promo.service import PromoCodeService


class CheckoutService:
    """Places orders from a cart store and tracks promo code usage"""

    def __init__(self, order_repository: OrderRepository, promo_service: PromoCodeService):
        self.orders = order_repository
        self.promo_service = promo_service
        self.logger = structlog.get_logger().bind(component="checkout_service")

    def apply_promo_code(self, store: CartStore, code_name: str) -> PromoValidationResult:
        """
        Validate a code and, if valid, apply it to the cart.

        The discount snapshot is taken against the current subtotal. Rejections
        are returned, not raised, and leave the cart unchanged.
        """
        result = self.promo_service.validate(code_name)
        if not result.is_valid:
            self.logger.info("Promo code rejected", code=code_name, outcome=result.outcome.value)
            return result

        promo = result.promo_code
        subtotal = store.pricing().subtotal
        store.apply_promo_code(AppliedPromoCode(
            code_id=promo.id,
            code=promo.code,
            discount_percentage=promo.discount_percentage,
            discount_amount=self.promo_service.compute_discount_amount(subtotal, promo.discount_percentage),
        ))
        self.logger.info("Promo code applied", code=promo.code, discount_percentage=promo.discount_percentage)
        return result

    def _check_order(self, store: CartStore, customer: Customer) -> None:
        state = store.state
        if state.is_empty:
            raise CheckoutValidationError("No products in the cart")
        if any(item.quantity < 1 for item in state.items):
            raise CheckoutValidationError("Every item in the cart needs a quantity of at least 1")
        if state.region is None:
            raise CheckoutValidationError("Please select a governorate to calculate the delivery fee")
        if customer.phone2 and customer.phone2 == customer.phone1:
            raise CheckoutValidationError("Second phone number must be different from the first")

    def build_payload(self, store: CartStore, customer: Customer) -> OrderPayload:
        """Order payload for the cart's current contents and totals"""
        state = store.state
        try:
            pricing = store.pricing()
        except UnknownRegionError as e:
            raise CheckoutValidationError("Please select a valid governorate") from e

        promo_code = None
        if state.applied_promo_code is not None:
            promo_code = OrderPromoCode(
                code=state.applied_promo_code.code,
                discount_percentage=state.applied_promo_code.discount_percentage,
                discount_amount=pricing.discount_amount,
                original_total=pricing.subtotal + pricing.shipping_cost,
                final_total=pricing.grand_total,
            )

        return OrderPayload(
            items=[OrderItem.from_line_item(item) for item in state.items],
            subtotal=pricing.subtotal,
            shipping_cost=pricing.shipping_cost,
            total=pricing.grand_total,
            governorate=state.region.name,
            promo_code=promo_code,
            customer=customer,
        )

    def _record_promo_usage(self, code_id: str) -> bool:
        try:
            self.promo_service.apply(code_id)
            return True
        except Exception as e:
            # The order is already placed; usage tracking must not undo it
            self.logger.error("Error updating promo code usage", code_id=code_id, error=str(e))
            return False

    def submit_order(self, store: CartStore, customer: Customer) -> OrderConfirmation:
        """
        Place an order for the cart.

        On success the promo code (if any) is charged one use and the cart is
        cleared. On any failure the cart is left as it was.

        Raises:
            CheckoutValidationError: Empty cart, an item below quantity 1, no
                governorate, or duplicate phone
            OrderSubmissionError: The order could not be stored
        """
        self._check_order(store, customer)
        payload = self.build_payload(store, customer)
        applied = store.state.applied_promo_code

        try:
            order_id = self.orders.insert_order(payload)
        except Exception as e:
            self.logger.error("Order submission failed", error=str(e))
            raise OrderSubmissionError("Could not place the order") from e

        recorded = False
        if applied is not None:
            recorded = self._record_promo_usage(applied.code_id)

        pricing = store.pricing()
        store.clear()

        self.logger.info("Order placed", order_id=order_id, total=payload.total,
                         promo_code=applied.code if applied else None)
        return OrderConfirmation(order_id=order_id, pricing=pricing, promo_code_recorded=recorded)
