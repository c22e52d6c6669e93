"""
aadhaar_auth/services/user_store.py

Purpose: User data management

- Create user records (single atomic insert)
- Look users up by email (login) or id (profile)
- Translate driver errors into service errors
"""

from bson import ObjectId
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError
from typing import Optional, Dict, Any

from aadhaar_auth.core.exceptions import ConflictError, StoreError
from aadhaar_auth.core.logging import get_logger
from aadhaar_auth.models.user import PASSWORD_FIELD

logger = get_logger(__name__)


def _duplicate_field(exc: DuplicateKeyError) -> Optional[str]:
    details = exc.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue") or {}
    return next(iter(key_pattern), None)


class UserStore:
    """
    MongoDB-backed user store.

    Uniqueness of email, mobile_number and aadhaar_number is left to the
    collection's unique indexes; a clash surfaces as ConflictError.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._users = collection

    async def create_user(self, document: Dict[str, Any]) -> str:
        """
        Inserts a new user, stamping created_at and updated_at.

        Args:
            document: User fields with the password already hashed

        Returns:
            The new user's id as a string

        Raises:
            ConflictError: A unique field is already taken
            StoreError: Any other write failure
        """
        now = datetime.now(timezone.utc)
        record = {**document, "created_at": now, "updated_at": now}

        try:
            result = await self._users.insert_one(record)
        except DuplicateKeyError as e:
            field = _duplicate_field(e)
            logger.warning("Duplicate user rejected", extra={"field": field})
            raise ConflictError(f"Duplicate value for {field or 'unique field'}", field=field) from e
        except PyMongoError as e:
            raise StoreError(f"Failed to insert user: {e}") from e

        user_id = str(result.inserted_id)
        logger.info("New user created", extra={"user_id": user_id})
        return user_id

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Retrieves a user by exact email, password hash included.

        Returns:
            User document or None if not found
        """
        try:
            return await self._users.find_one({"email": email})
        except PyMongoError as e:
            raise StoreError(f"Failed to look up user by email: {e}") from e

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieves a user by id with the password field excluded.

        Returns:
            User document or None if not found

        Raises:
            StoreError: user_id is not a valid ObjectId, or the lookup failed
        """
        if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
            raise StoreError(f"Malformed user id: {user_id!r}")

        try:
            return await self._users.find_one({"_id": ObjectId(user_id)}, {PASSWORD_FIELD: 0})
        except PyMongoError as e:
            raise StoreError(f"Failed to look up user by id: {e}") from e
