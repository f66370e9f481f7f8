"""
Order storage in MongoDB
"""
from pymongo import MongoClient
from pymongo.collection import Collection
import structlog

from order.config import Config
from order.models.order_model import OrderPayload


class OrderRepository:
    """Repository for placed orders"""

    def __init__(self, collection: Collection):
        self.collection = collection
        self.logger = structlog.get_logger().bind(component="order_repository")

    @classmethod
    def from_config(cls, config: Config) -> "OrderRepository":
        """Connect to MongoDB and bind to the configured orders collection"""
        client = MongoClient(
            config.mongo_uri,
            serverSelectionTimeoutMS=config.mongo_timeout_ms,
            connectTimeoutMS=config.mongo_timeout_ms,
            tz_aware=True,
        )
        return cls(client[config.mongo_db][config.orders_collection])

    def insert_order(self, payload: OrderPayload) -> str:
        """Store an order and return its id"""
        try:
            result = self.collection.insert_one(payload.to_document())
        except Exception as e:
            self.logger.error("Error inserting order", error=str(e))
            raise

        order_id = str(result.inserted_id)
        self.logger.info("Order inserted", order_id=order_id, total=payload.total)
        return order_id
