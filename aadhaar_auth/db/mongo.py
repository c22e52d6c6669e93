"""
aadhaar_auth/db/mongo.py

Purpose: MongoDB connection setup

- Owns the Motor client for the lifetime of the app
- Single collection: users
- Health checks and startup retry logic
- Proper connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConfigurationError, ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio

from aadhaar_auth.core.config import Settings
from aadhaar_auth.core.logging import get_logger

logger = get_logger(__name__)

USERS_COLLECTION = "users"


class MongoDatabase:
    """
    Connection handle for the backing MongoDB database.

    Created once at startup and closed on shutdown.
    """

    def __init__(self, uri: str, default_db_name: str, max_retries: int = 3, retry_delay: float = 2.0):
        self._uri = uri
        self._default_db_name = default_db_name
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDatabase":
        return cls(
            settings.MONGO_URI,
            settings.MONGODB_DB_NAME,
            max_retries=settings.MONGO_CONNECT_RETRIES,
        )

    async def connect(self):
        """
        Establishes connection to MongoDB with retry logic.
        Called during application startup.
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        retry_delay = self._retry_delay

        for attempt in range(1, self._max_retries + 1):
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{self._max_retries})"
                )

                client = AsyncIOMotorClient(
                    self._uri,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    retryWrites=True,
                    retryReads=True,
                )

                try:
                    database = client.get_default_database(default=self._default_db_name)
                except ConfigurationError:
                    database = client[self._default_db_name]

                await client.admin.command("ping")

                self._client = client
                self._database = database
                logger.info(f"Connected to MongoDB: {database.name}")
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                client.close()
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{self._max_retries}): {e}"
                )

                if attempt < self._max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2
                else:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self._database = None

    async def check_health(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if the server answers a ping, False otherwise
        """
        try:
            if self._client is None:
                logger.error("MongoDB client not initialized")
                return False

            await self._client.admin.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """
        Raises:
            RuntimeError: If the database is not connected
        """
        if self._database is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self._database

    @property
    def users(self) -> AsyncIOMotorCollection:
        """
        The users collection.

        Fields:
        - _id: ObjectId
        - name, aadhaar_number, mcp_card_number, mobile_number, email: str
        - password: str (bcrypt hash)
        - created_at, updated_at: datetime
        """
        return self.database[USERS_COLLECTION]
