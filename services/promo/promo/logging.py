"""
Structured logging for the promo service
"""
import logging
import sys
import structlog


def configure_logging(service_name: str, log_level: str = "INFO") -> structlog.BoundLogger:
    """
    Route structlog through stdlib logging and render JSON lines

    Args:
        service_name: Bound to every log line as "service"
        log_level: Logging level name; unknown names fall back to INFO

    Returns:
        Logger bound with the service name
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger().bind(service=service_name)
