"""
MongoDB service for profile and scheme rule documents
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from ..config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class MongoService:
    """Service for MongoDB operations"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.db = None

    async def connect(self):
        """Connect to MongoDB"""
        try:
            self.client = AsyncIOMotorClient(self.settings.mongodb_url)
            self.db = self.client[self.settings.mongodb_db_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Connected to MongoDB successfully")

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    async def health_check(self) -> bool:
        """Check MongoDB connection health"""
        try:
            await self.client.admin.command('ping')
            return True
        except Exception:
            return False

    @property
    def users(self):
        return self.db[self.settings.users_collection]

    @property
    def scheme_rules(self):
        return self.db[self.settings.scheme_rules_collection]

    # User operations
    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user document by user ID"""
        try:
            return await self.users.find_one({"user_id": user_id})
        except Exception as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise

    async def upsert_user_profile(self, user_id: str, profile: Dict[str, Any]):
        """Create or replace the profile stored for a user"""
        now = datetime.now(timezone.utc)
        try:
            await self.users.update_one(
                {"user_id": user_id},
                {
                    "$set": {"profile": profile, "updated_at": now},
                    "$setOnInsert": {"user_id": user_id, "created_at": now}
                },
                upsert=True
            )
            logger.info(f"User profile saved: {user_id}")
        except Exception as e:
            logger.error(f"Failed to save user profile {user_id}: {e}")
            raise

    # Scheme rules operations
    async def get_all_scheme_rules(self) -> List[Dict[str, Any]]:
        """Get every scheme rules document that is not disabled"""
        try:
            cursor = self.scheme_rules.find({"status": {"$ne": "disabled"}})
            rules = []
            async for doc in cursor:
                doc.pop("_id", None)
                rules.append(doc)
            return rules
        except Exception as e:
            logger.error(f"Failed to get scheme rules: {e}")
            raise
