"""
MongoDB connection and promo code storage
"""
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from promo.config import Config
from promo.errors import DuplicatePromoCodeError


logger = structlog.get_logger()


class MongoDB:
    """MongoDB connection manager"""

    def __init__(self, config: Config):
        self.config = config
        self.client: Optional[MongoClient] = None
        self.db: Optional[Database] = None

    def connect(self) -> None:
        """Establish connection to MongoDB"""
        try:
            self.client = MongoClient(
                self.config.mongo_uri,
                serverSelectionTimeoutMS=self.config.mongo_timeout_ms,
                connectTimeoutMS=self.config.mongo_timeout_ms,
                tz_aware=True,
            )

            # Test connection
            self.client.admin.command('ping')

            self.db = self.client[self.config.mongo_db]
            self._create_indexes()

            logger.info("Connected to MongoDB",
                        uri=self.config.mongo_uri,
                        database=self.config.mongo_db)

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    def _create_indexes(self) -> None:
        """Create necessary indexes on collections"""
        try:
            self.promo_codes.create_index([("code", ASCENDING)], unique=True)
            self.promo_codes.create_index([("created_at", DESCENDING)])
            logger.info("Database indexes created")
        except Exception as e:
            logger.warning("Error creating indexes", error=str(e))

    def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    def is_healthy(self) -> bool:
        """Check if MongoDB connection is healthy"""
        try:
            if self.client:
                self.client.admin.command('ping')
                return True
        except Exception as e:
            logger.error("MongoDB health check failed", error=str(e))
        return False

    @property
    def promo_codes(self) -> Collection:
        """Get promo codes collection"""
        return self.db[self.config.promo_collection]


def _object_id(code_id: str) -> Optional[ObjectId]:
    # ObjectId(None) would mint a fresh id
    if not code_id:
        return None
    try:
        return ObjectId(code_id)
    except (InvalidId, TypeError):
        return None


class PromoCodeRepository:
    """Repository for promo code documents"""

    def __init__(self, mongodb: MongoDB):
        self.db = mongodb
        self.logger = structlog.get_logger().bind(component="promo_repository")

    def insert(self, document: Dict[str, Any]) -> str:
        """
        Insert a promo code document and return its id.

        Raises:
            DuplicatePromoCodeError: If the unique index on code rejects it
        """
        try:
            result = self.db.promo_codes.insert_one(dict(document))
        except DuplicateKeyError:
            self.logger.warning("Duplicate promo code insert", code=document.get("code"))
            raise DuplicatePromoCodeError(document.get("code", ""))
        except Exception as e:
            self.logger.error("Error inserting promo code", code=document.get("code"), error=str(e))
            raise

        self.logger.info("Promo code inserted", code=document.get("code"), code_id=str(result.inserted_id))
        return str(result.inserted_id)

    def find_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """Get a promo code by its normalized name"""
        try:
            return self.db.promo_codes.find_one({"code": code})
        except Exception as e:
            self.logger.error("Error finding promo code", code=code, error=str(e))
            raise

    def find_by_id(self, code_id: str) -> Optional[Dict[str, Any]]:
        """Get a promo code by document id"""
        oid = _object_id(code_id)
        if oid is None:
            return None
        try:
            return self.db.promo_codes.find_one({"_id": oid})
        except Exception as e:
            self.logger.error("Error finding promo code", code_id=code_id, error=str(e))
            raise

    def list_all(self) -> List[Dict[str, Any]]:
        """All promo codes, newest first"""
        try:
            return list(self.db.promo_codes.find().sort("created_at", DESCENDING))
        except Exception as e:
            self.logger.error("Error listing promo codes", error=str(e))
            raise

    def increment_usage(self, code_id: str) -> Optional[Dict[str, Any]]:
        """
        Atomically record one use of a promo code.

        The increment only matches while used_count < usage_limit, and the
        same update clears is_active once the new count reaches the limit, so
        concurrent checkouts can never push used_count past usage_limit.

        Returns:
            The updated document, or None if no document matched
            (unknown id or no uses left)
        """
        oid = _object_id(code_id)
        if oid is None:
            return None
        try:
            updated = self.db.promo_codes.find_one_and_update(
                {"_id": oid, "$expr": {"$lt": ["$used_count", "$usage_limit"]}},
                [
                    {"$set": {"used_count": {"$add": ["$used_count", 1]}}},
                    {"$set": {"is_active": {
                        "$and": ["$is_active", {"$lt": ["$used_count", "$usage_limit"]}]
                    }}},
                ],
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            self.logger.error("Error incrementing promo code usage", code_id=code_id, error=str(e))
            raise

        self.logger.debug("Increment usage", code_id=code_id, matched=updated is not None)
        return updated

    def delete(self, code_id: str) -> bool:
        """Delete a promo code. Returns True if a document was removed."""
        oid = _object_id(code_id)
        if oid is None:
            return False
        try:
            result = self.db.promo_codes.delete_one({"_id": oid})
        except Exception as e:
            self.logger.error("Error deleting promo code", code_id=code_id, error=str(e))
            raise

        deleted = result.deleted_count > 0
        self.logger.info("Promo code deleted", code_id=code_id, deleted=deleted)
        return deleted
