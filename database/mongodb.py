"""
MongoDB Database Handler for the Bookstore Query Runner
"""

from typing import Any, Callable, Optional

import motor.motor_asyncio
from pymongo.errors import PyMongoError

from config import (
    MONGODB_URI, MONGODB_DB_NAME, MONGODB_COLLECTION,
    MONGODB_CONNECT_TIMEOUT_MS, MONGODB_SERVER_SELECTION_TIMEOUT_MS,
)
from queries.core.errors import DatabaseConnectionError
from queries.core.utils import get_logger

logger = get_logger(__name__)


class MongoDB:
    """MongoDB connection scoped to one run

    Use as ``async with MongoDB() as db:``; the client is closed exactly once
    when the block exits, whether or not it raised.
    """

    def __init__(self, uri: str = MONGODB_URI, db_name: str = MONGODB_DB_NAME,
                 collection_name: str = MONGODB_COLLECTION,
                 client_factory: Optional[Callable[..., Any]] = None):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self._client_factory = client_factory or motor.motor_asyncio.AsyncIOMotorClient
        self.client = None
        self.db = None
        self.is_connected = False

    async def connect(self):
        """Establish connection to MongoDB"""
        try:
            self.client = self._client_factory(
                self.uri,
                connectTimeoutMS=MONGODB_CONNECT_TIMEOUT_MS,
                serverSelectionTimeoutMS=MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            )

            # Test connection
            await self.client.admin.command('ping')

            # Get database
            self.db = self.client[self.db_name]

            self.is_connected = True
            logger.info(f"✅ Connected to MongoDB: {self.db_name}")

        except PyMongoError as e:
            await self.disconnect()
            raise DatabaseConnectionError(f"Could not connect to {self.db_name}: {e}") from e

    async def disconnect(self):
        """Close database connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            self.is_connected = False
            logger.info("🔒 Connection closed")

    @property
    def books(self):
        """Handle to the books collection"""
        if not self.is_connected:
            raise DatabaseConnectionError("Not connected to MongoDB")
        return self.db[self.collection_name]

    async def ping(self) -> bool:
        """Check database connection"""
        if not self.client:
            return False
        try:
            await self.client.admin.command('ping')
            return True
        except PyMongoError:
            return False

    async def __aenter__(self) -> "MongoDB":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.disconnect()
        return False
