"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from catalog.criteria import Page
from catalog.models import Book, Location, Publisher


class BookPayload(BaseModel):
    """Request body for creating or replacing a book."""
    title: str = Field(..., description="Book title")
    format: Optional[str] = Field(None, description="Book format")
    publisher_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("publisherId", "publisher"),
        description="Identifier of an existing publisher"
    )


class AddressPayload(BaseModel):
    """Request body for creating or replacing an address."""
    city: str = Field(..., description="City")
    street: Optional[str] = Field(None, description="Street")


class PublisherPayload(BaseModel):
    """Request body for creating a publisher."""
    name: str = Field(..., description="Publisher name")
    addresses: List[AddressPayload] = Field(default_factory=list, description="Initial addresses")


class PublisherUpdatePayload(BaseModel):
    """Request body for updating a publisher; only the name is mutable."""
    name: str = Field(..., description="Publisher name")


class ShopPayload(BaseModel):
    """Request body for creating or replacing a shop."""
    banner: Optional[str] = Field(None, description="Shop banner")
    city: Optional[str] = Field(None, description="City")
    location: Location = Field(..., description="GeoJSON point")


class BookPage(BaseModel):
    """One page of a book listing with the counts reported in headers."""
    books: List[Book] = Field(..., description="Books on this page")
    publishers: Dict[str, Publisher] = Field(default_factory=dict, description="Embedded publishers by id")
    page: Page = Field(..., description="Resolved pagination window")
    total: int = Field(..., description="Number of books without filters")
    filtered_total: int = Field(..., description="Number of books matching the filters")

    def headers(self) -> Dict[str, str]:
        return {
            "X-Pagination-Page": str(self.page.page),
            "X-Pagination-Page-Size": str(self.page.page_size),
            "X-Pagination-Total": str(self.total),
            "X-Pagination-Filtered-Total": str(self.filtered_total),
        }

    def to_json(self) -> List[Dict]:
        return [book.to_json(self.publishers.get(book.publisher_id)) for book in self.books]


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
