"""
Repositories over the catalog collections.
Every driver failure is logged and re-raised as StoreError.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from .database import MongoDBManager
from .errors import StoreError
from .models import Book, Publisher, Shop, to_object_id

logger = structlog.get_logger(__name__)

T = TypeVar("T", Book, Publisher, Shop)


class MongoRepository(Generic[T]):
    """CRUD operations shared by all catalog collections."""

    def __init__(self, collection: AsyncIOMotorCollection, entity_class: Type[T]):
        self.collection = collection
        self.entity_class = entity_class
        self.entity_name = entity_class.__name__.lower()

    def _store_error(self, operation: str, error: PyMongoError, **context) -> StoreError:
        logger.error(
            "Store operation failed",
            collection=self.collection.name,
            operation=operation,
            error=str(error),
            **context
        )
        return StoreError(f"{self.entity_name}.{operation}", error)

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        """
        Get a single document by id.

        Args:
            entity_id: Hex ObjectId string

        Returns:
            The entity, or None if the id is malformed or unknown
        """
        if not ObjectId.is_valid(entity_id):
            return None

        try:
            doc = await self.collection.find_one({"_id": ObjectId(entity_id)})
        except PyMongoError as e:
            raise self._store_error("find_by_id", e, entity_id=entity_id) from e

        return self.entity_class.from_mongo(doc) if doc else None

    async def find(
        self,
        criteria: Optional[Dict[str, Any]] = None,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0
    ) -> List[T]:
        """
        Find documents matching criteria.

        Args:
            criteria: Filter document, all documents when omitted
            sort: Sort specification as (field, direction) pairs
            skip: Number of documents to skip
            limit: Maximum number of documents, 0 for no limit

        Returns:
            Matching entities in cursor order
        """
        try:
            cursor = self.collection.find(criteria or {})
            if sort:
                cursor = cursor.sort(list(sort))
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._store_error("find", e, criteria=str(criteria)) from e

        return [self.entity_class.from_mongo(doc) for doc in docs]

    async def insert(self, entity: T) -> T:
        try:
            await self.collection.insert_one(entity.to_mongo())
        except PyMongoError as e:
            raise self._store_error("insert", e) from e

        logger.debug("Inserted document", collection=self.collection.name, entity_id=entity.id)
        return entity

    async def save(self, entity: T) -> T:
        """Overwrite the stored document with the entity's current state."""
        try:
            await self.collection.replace_one({"_id": to_object_id(entity.id)}, entity.to_mongo())
        except PyMongoError as e:
            raise self._store_error("save", e, entity_id=entity.id) from e

        logger.debug("Saved document", collection=self.collection.name, entity_id=entity.id)
        return entity

    async def delete(self, entity: T) -> None:
        try:
            await self.collection.delete_one({"_id": to_object_id(entity.id)})
        except PyMongoError as e:
            raise self._store_error("delete", e, entity_id=entity.id) from e

        logger.debug("Deleted document", collection=self.collection.name, entity_id=entity.id)


class BookRepository(MongoRepository[Book]):
    """Books collection, including counts and aggregations."""

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection, Book)

    async def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        try:
            return await self.collection.count_documents(criteria or {})
        except PyMongoError as e:
            raise self._store_error("count", e, criteria=str(criteria)) from e

    async def delete_by_publisher(self, publisher_id: str) -> int:
        """
        Delete every book referencing a publisher.

        Returns:
            Number of deleted books
        """
        try:
            result = await self.collection.delete_many({"publisherId": to_object_id(publisher_id)})
        except PyMongoError as e:
            raise self._store_error("delete_by_publisher", e, publisher_id=publisher_id) from e

        return result.deleted_count

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.aggregate(pipeline)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._store_error("aggregate", e) from e


class PublisherRepository(MongoRepository[Publisher]):
    """Publishers collection; addresses live inside each document."""

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection, Publisher)

    async def find_by_ids(self, publisher_ids: Sequence[str]) -> List[Publisher]:
        """Fetch publishers by set membership. Order is whatever the store returns."""
        return await self.find({"_id": {"$in": [to_object_id(pid) for pid in publisher_ids]}})


class ShopRepository(MongoRepository[Shop]):
    """Shops collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection, Shop)


class Repositories:
    """The catalog repositories bound to one store connection."""

    def __init__(self, manager: MongoDBManager):
        self.manager = manager
        self.books = BookRepository(manager.books)
        self.publishers = PublisherRepository(manager.publishers)
        self.shops = ShopRepository(manager.shops)
