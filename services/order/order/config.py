"""
Configuration management for Order service
"""
import os
from dataclasses import dataclass


@dataclass
class Config:
    """Order service configuration"""

    # Database
    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "storefront")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
    orders_collection: str = os.getenv("ORDERS_COLLECTION", "orders")
