"""
aadhaar_auth/db/indexes.py

Purpose: Database index management

- Unique indexes that back the users' identity fields
- Safe to run on every startup
"""

from pymongo import ASCENDING

from aadhaar_auth.db.mongo import MongoDatabase
from aadhaar_auth.core.logging import get_logger

logger = get_logger(__name__)

UNIQUE_USER_FIELDS = ("email", "mobile_number", "aadhaar_number")


async def create_indexes(db: MongoDatabase):
    """
    Creates the users collection indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = db.users

        for field in UNIQUE_USER_FIELDS:
            await users.create_index([(field, ASCENDING)], unique=True, name=f"{field}_unique")
            logger.debug(f"Created unique index on users.{field}")

        user_indexes = await users.index_information()
        logger.info(f"Index summary: Users={len(user_indexes)}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
