"""
Database service layer for the FastAPI application.

Each public coroutine is one unit of work behind a route.
"""

import asyncio
from typing import Dict, List, Optional

import structlog

from api.models import (
    AddressPayload, BookPage, BookPayload, PublisherPayload,
    PublisherUpdatePayload, ShopPayload
)
from catalog.aggregation import count_books_by_publisher, enrich_publishers
from catalog.criteria import (
    FormatFilter, build_book_criteria, build_offset_limit, build_page,
    build_shop_criteria
)
from catalog.errors import NotFoundError
from catalog.models import Address, Book, Publisher, Shop
from catalog.relationships import RelationshipManager
from catalog.repositories import Repositories

logger = structlog.get_logger(__name__)


class APIDatabaseService:
    """Database service for API operations."""

    def __init__(self, repositories: Repositories, default_page_size: int = 30):
        self.repositories = repositories
        self.books = repositories.books
        self.publishers = repositories.publishers
        self.shops = repositories.shops
        self.relationships = RelationshipManager(self.books, self.publishers)
        self.default_page_size = default_page_size

    # Books

    async def list_books(
        self,
        publisher_id: Optional[str] = None,
        formats: FormatFilter = None,
        page: Optional[str] = None,
        page_size: Optional[str] = None,
        embed_publisher: bool = False
    ) -> BookPage:
        """
        Get books with filtering and pagination, sorted by title.

        The unfiltered count, the filtered count and the page itself are
        queried concurrently; the listing fails if any of them fails.
        """
        criteria = build_book_criteria(publisher_id, formats)
        window = build_page(page, page_size, self.default_page_size)

        total, filtered_total, books = await asyncio.gather(
            self.books.count(),
            self.books.count(criteria),
            self.books.find(criteria, sort=[("title", 1)], skip=window.offset, limit=window.limit),
        )

        publishers: Dict[str, Publisher] = {}
        if embed_publisher and books:
            found = await self.publishers.find_by_ids(sorted({book.publisher_id for book in books}))
            publishers = {publisher.id: publisher for publisher in found}

        logger.debug(
            "Listed books",
            criteria=str(criteria),
            page=window.page,
            page_size=window.page_size,
            returned=len(books),
            filtered_total=filtered_total
        )

        return BookPage(
            books=books,
            publishers=publishers,
            page=window,
            total=total,
            filtered_total=filtered_total
        )

    async def get_book(self, book_id: str) -> Book:
        book = await self.books.find_by_id(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    async def get_book_publisher(self, book: Book) -> Optional[Publisher]:
        return await self.publishers.find_by_id(book.publisher_id)

    async def create_book(self, payload: BookPayload) -> Book:
        """Create a book after checking that its publisher exists."""
        publisher = await self.relationships.require_publisher(payload.publisher_id)
        book = Book(title=payload.title, format=payload.format, publisher_id=publisher.id)
        await self.books.insert(book)

        logger.info("Created book", book_id=book.id, publisher_id=publisher.id)
        return book

    async def update_book(self, book: Book, payload: BookPayload) -> Book:
        """Overwrite title, format and publisher of a book."""
        publisher = await self.relationships.require_publisher(payload.publisher_id)
        book.title = payload.title
        book.format = payload.format
        book.publisher_id = publisher.id
        return await self.books.save(book)

    async def delete_book(self, book: Book) -> None:
        await self.books.delete(book)
        logger.info("Deleted book", book_id=book.id)

    # Publishers

    async def list_publishers(
        self,
        book_formats: FormatFilter = None,
        offset: Optional[str] = None,
        limit: Optional[str] = None
    ) -> List[Dict]:
        """
        List publishers that have books, with their number of books.

        Sorted by number of books, descending. Only books matching
        ``book_formats`` are counted when it is given.
        """
        window = build_offset_limit(offset, limit)
        book_counts = await count_books_by_publisher(
            self.books, book_formats, ascending=False, offset=window.offset, limit=window.limit
        )
        if not book_counts:
            return []

        publishers = await self.publishers.find_by_ids([count.publisher_id for count in book_counts])
        return enrich_publishers(book_counts, publishers)

    async def get_publisher(self, publisher_id: str) -> Publisher:
        publisher = await self.publishers.find_by_id(publisher_id)
        if publisher is None:
            raise NotFoundError("Publisher not found")
        return publisher

    async def create_publisher(self, payload: PublisherPayload) -> Publisher:
        publisher = Publisher(
            name=payload.name,
            addresses=[Address(city=address.city, street=address.street) for address in payload.addresses]
        )
        await self.publishers.insert(publisher)

        logger.info("Created publisher", publisher_id=publisher.id)
        return publisher

    async def update_publisher(self, publisher: Publisher, payload: PublisherUpdatePayload) -> Publisher:
        publisher.name = payload.name
        return await self.publishers.save(publisher)

    async def delete_publisher(self, publisher: Publisher) -> None:
        await self.relationships.delete_publisher(publisher)

    # Publisher addresses

    def list_addresses(self, publisher: Publisher) -> List[Address]:
        return self.relationships.list_addresses(publisher)

    def get_address(self, publisher: Publisher, address_id: str) -> Address:
        return self.relationships.get_address(publisher, address_id)

    async def add_address(self, publisher: Publisher, payload: AddressPayload) -> Address:
        return await self.relationships.add_address(publisher, payload.city, payload.street)

    async def update_address(self, publisher: Publisher, address_id: str, payload: AddressPayload) -> Address:
        return await self.relationships.update_address(publisher, address_id, payload.city, payload.street)

    async def delete_address(self, publisher: Publisher, address_id: str) -> None:
        await self.relationships.delete_address(publisher, address_id)

    # Shops

    async def list_shops(
        self,
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        distance: Optional[str] = None
    ) -> List[Shop]:
        """List shops, nearest first when a location and radius are given."""
        criteria = build_shop_criteria(latitude, longitude, distance)
        return await self.shops.find(criteria)

    async def get_shop(self, shop_id: str) -> Shop:
        shop = await self.shops.find_by_id(shop_id)
        if shop is None:
            raise NotFoundError("Shop not found")
        return shop

    async def create_shop(self, payload: ShopPayload) -> Shop:
        shop = Shop(banner=payload.banner, city=payload.city, location=payload.location)
        await self.shops.insert(shop)

        logger.info("Created shop", shop_id=shop.id)
        return shop

    async def update_shop(self, shop: Shop, payload: ShopPayload) -> Shop:
        shop.banner = payload.banner
        shop.city = payload.city
        shop.location = payload.location
        return await self.shops.save(shop)

    async def delete_shop(self, shop: Shop) -> None:
        await self.shops.delete(shop)
        logger.info("Deleted shop", shop_id=shop.id)

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.repositories.manager.ping()

            books_count = await self.books.count()

            return {
                "status": "healthy",
                "books_count": books_count
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
