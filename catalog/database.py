"""
MongoDB connection management for the catalog store.
Handles connection, indexing, and collection handles for books,
publishers and shops.
"""

from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo import ASCENDING, GEOSPHERE
from pymongo.errors import ConnectionFailure, PyMongoError

logger = structlog.get_logger(__name__)

BOOKS_COLLECTION = "books"
PUBLISHERS_COLLECTION = "publishers"
SHOPS_COLLECTION = "shops"


class MongoDBManager:
    """
    Async MongoDB manager owning the client and its connection pool.
    Repositories receive collection handles from it.
    """

    def __init__(self, connection_url: str, database_name: str):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB and ensure indexes exist."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]

            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB", database=self.database_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    @property
    def books(self) -> AsyncIOMotorCollection:
        return self.database[BOOKS_COLLECTION]

    @property
    def publishers(self) -> AsyncIOMotorCollection:
        return self.database[PUBLISHERS_COLLECTION]

    @property
    def shops(self) -> AsyncIOMotorCollection:
        return self.database[SHOPS_COLLECTION]

    async def _create_indexes(self) -> None:
        """
        Create the indexes the catalog queries rely on.
        The shops location index is required by $near queries.
        """
        try:
            # Cascade deletes and the publisher filter
            await self.books.create_index("publisherId")

            # Format filter and the aggregation $match stage
            await self.books.create_index("format")

            # Listing sort
            await self.books.create_index([("title", ASCENDING)])

            await self.shops.create_index([("location", GEOSPHERE)])

            logger.info("Successfully created MongoDB indexes")

        except PyMongoError as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def ping(self) -> None:
        """Round-trip to the server; raises when it is unreachable."""
        await self.database.command("ping")
