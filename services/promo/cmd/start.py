#!/usr/bin/env python3
"""
Entry point for Promo Service
"""
import sys

from promo.config import get_config
from promo.db import MongoDB, PromoCodeRepository
from promo.http_api import create_app
from promo.logging import configure_logging
from promo.service import PromoCodeService


def main():
    """Main entry point"""
    config = get_config()
    logger = configure_logging(config.service_name, config.log_level)

    logger.info("Starting Promo Service", port=config.http_port)

    mongodb = MongoDB(config)
    try:
        mongodb.connect()
    except Exception as e:
        logger.error("Failed to connect to MongoDB", error=str(e))
        sys.exit(1)

    service = PromoCodeService(PromoCodeRepository(mongodb))
    app = create_app(service, mongodb)

    try:
        from werkzeug.serving import run_simple
        run_simple(
            config.http_host,
            config.http_port,
            app,
            use_reloader=False,
            use_debugger=False,
            threaded=True
        )
    except KeyboardInterrupt:
        logger.info("Promo Service stopped by user")
    except Exception as e:
        logger.error("Promo Service failed", error=str(e))
        sys.exit(1)
    finally:
        mongodb.close()


if __name__ == '__main__':
    main()
