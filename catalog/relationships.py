"""
Referential integrity between books and publishers, and the address list
embedded in each publisher document.
"""

from typing import List, Optional, Tuple

import structlog
from bson import ObjectId

from .errors import NotFoundError, ValidationError
from .models import Address, Publisher
from .repositories import BookRepository, PublisherRepository

logger = structlog.get_logger(__name__)


def _find_address(publisher: Publisher, address_id: str) -> Tuple[int, Address]:
    """Scan the publisher's addresses for an id, returning its current index."""
    for index, address in enumerate(publisher.addresses):
        if address.id == address_id:
            return index, address
    raise NotFoundError("Address not found")


class RelationshipManager:
    """
    Enforces publisher references and owns publisher-side mutations.

    None of the multi-step operations are atomic: concurrent requests on the
    same publisher can interleave between the load and the save.
    """

    def __init__(self, books: BookRepository, publishers: PublisherRepository):
        self.books = books
        self.publishers = publishers

    async def require_publisher(self, publisher_id: Optional[str]) -> Publisher:
        """
        Resolve the publisher a book refers to.

        Args:
            publisher_id: Publisher id from the request body

        Returns:
            The referenced publisher

        Raises:
            ValidationError: If the id is missing, malformed or unknown
        """
        if not publisher_id:
            raise ValidationError("Publisher ID is required")

        if not ObjectId.is_valid(publisher_id):
            raise ValidationError(f"No publisher with ID {publisher_id}")

        publisher = await self.publishers.find_by_id(publisher_id)
        if publisher is None:
            raise ValidationError(f"No publisher with ID {publisher_id}")

        return publisher

    async def delete_publisher(self, publisher: Publisher) -> int:
        """
        Delete a publisher, then every book referencing it.

        There is no compensation: if the second step fails the books are left
        orphaned and the StoreError propagates.

        Returns:
            Number of books deleted with the publisher
        """
        await self.publishers.delete(publisher)
        deleted_books = await self.books.delete_by_publisher(publisher.id)

        logger.info("Deleted publisher", publisher_id=publisher.id, deleted_books=deleted_books)
        return deleted_books

    def list_addresses(self, publisher: Publisher) -> List[Address]:
        return publisher.addresses

    def get_address(self, publisher: Publisher, address_id: str) -> Address:
        _, address = _find_address(publisher, address_id)
        return address

    async def add_address(self, publisher: Publisher, city: str, street: Optional[str] = None) -> Address:
        """Append an address and persist the publisher. Returns the appended address."""
        publisher.addresses.append(Address(city=city, street=street))
        await self.publishers.save(publisher)
        return publisher.addresses[-1]

    async def update_address(
        self,
        publisher: Publisher,
        address_id: str,
        city: str,
        street: Optional[str] = None
    ) -> Address:
        """Overwrite city and street of an address in place and persist the publisher."""
        _, address = _find_address(publisher, address_id)
        address.city = city
        address.street = street
        await self.publishers.save(publisher)
        return address

    async def delete_address(self, publisher: Publisher, address_id: str) -> None:
        """Remove an address and persist the publisher."""
        # Index comes from the list as it is now, never from an earlier lookup.
        index, _ = _find_address(publisher, address_id)
        del publisher.addresses[index]
        await self.publishers.save(publisher)

        logger.debug("Deleted address", publisher_id=publisher.id, address_id=address_id)
