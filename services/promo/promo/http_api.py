"""
Flask HTTP server for promo code management and health checks
"""
import logging

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError
import structlog

from promo.db import MongoDB
from promo.errors import (
    DuplicatePromoCodeError, PromoCodeNotFoundError, PromoCodeValidationError,
    UsageLimitReachedError,
)
from promo.models import CreatePromoCodeRequest
from promo.service import PromoCodeService


logger = structlog.get_logger()


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(service: PromoCodeService, mongodb: MongoDB) -> Flask:
    """
    Create Flask app exposing the promo code API

    Args:
        service: Promo code service
        mongodb: MongoDB connection instance, used by the health check

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Disable Flask's default logger to avoid duplicate logs
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    @app.route('/healthz', methods=['GET'])
    def healthz():
        """200 if MongoDB answers a ping, 503 otherwise"""
        if not mongodb.is_healthy():
            logger.error("Health check failed: MongoDB unhealthy")
            return Response("unhealthy: mongodb connection failed", status=503, mimetype='text/plain')
        return Response("healthy", status=200, mimetype='text/plain')

    @app.route('/api/promo-codes', methods=['GET'])
    def list_promo_codes():
        try:
            codes = service.list_codes()
        except Exception as e:
            logger.error("Error listing promo codes", error=str(e))
            return _error("Promo code store unavailable", 503)

        now = service.now()
        return jsonify({"items": [code.to_response(now) for code in codes]})

    @app.route('/api/promo-codes', methods=['POST'])
    def create_promo_code():
        try:
            body = CreatePromoCodeRequest.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return _error(f"Invalid promo code request: {e.error_count()} invalid field(s)", 400)

        try:
            promo = service.create_code(
                body.code,
                body.discount_percentage,
                body.usage_limit,
                body.validity_days,
                created_by=body.created_by,
            )
        except PromoCodeValidationError as e:
            return _error(str(e), 400)
        except DuplicatePromoCodeError as e:
            return _error(str(e), 409)

        return jsonify(promo.to_response(service.now())), 201

    @app.route('/api/promo-codes/validate', methods=['POST'])
    def validate_promo_code():
        """
        Validate a shopper's code. Always 200; the outcome field says why a
        code was rejected. With a subtotal, the discount amount is included.
        """
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        code = body.get("code")
        result = service.validate(code if isinstance(code, str) else "")

        payload = {
            "valid": result.is_valid,
            "outcome": result.outcome.value,
            "message": result.message,
        }
        if result.is_valid:
            payload["codeId"] = result.promo_code.id
            payload["code"] = result.promo_code.code
            payload["discountPercentage"] = result.discount_percentage
            subtotal = body.get("subtotal")
            if isinstance(subtotal, (int, float)) and not isinstance(subtotal, bool):
                payload["discountAmount"] = service.compute_discount_amount(subtotal, result.discount_percentage)
        return jsonify(payload)

    @app.route('/api/promo-codes/<code_id>/apply', methods=['POST'])
    def apply_promo_code(code_id):
        try:
            promo = service.apply(code_id)
        except PromoCodeNotFoundError as e:
            return _error(str(e), 404)
        except UsageLimitReachedError as e:
            return _error(str(e), 409)
        return jsonify(promo.to_response(service.now()))

    @app.route('/api/promo-codes/<code_id>', methods=['DELETE'])
    def delete_promo_code(code_id):
        if not service.delete_code(code_id):
            return _error(f"Promo code not found: {code_id}", 404)
        return Response(status=204)

    logger.info("Flask promo app created")
    return app
