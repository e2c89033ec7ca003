"""
Pydantic models for catalog documents.
Each model converts to and from its MongoDB document shape, where
identifiers are ObjectIds stored under ``_id``.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Generate a fresh document identifier as a hex string."""
    return str(ObjectId())


def to_object_id(value: str) -> Any:
    """Convert a hex identifier to ObjectId, leaving malformed values untouched."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class Address(BaseModel):
    """Address embedded in a publisher document."""
    id: str = Field(default_factory=new_id, description="Address identifier, unique within its publisher")
    city: str = Field(..., description="City")
    street: Optional[str] = Field(None, description="Street")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Address":
        return cls(id=str(doc["_id"]), city=doc.get("city"), street=doc.get("street"))

    def to_mongo(self) -> Dict[str, Any]:
        return {"_id": to_object_id(self.id), "city": self.city, "street": self.street}

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump()


class Publisher(BaseModel):
    """
    Publisher document.
    Addresses keep insertion order; position in the list is observable.
    """
    id: str = Field(default_factory=new_id, description="Publisher identifier")
    name: str = Field(..., description="Publisher name")
    addresses: List[Address] = Field(default_factory=list, description="Embedded addresses")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Publisher":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name"),
            addresses=[Address.from_mongo(address) for address in doc.get("addresses") or []],
        )

    def to_mongo(self) -> Dict[str, Any]:
        return {
            "_id": to_object_id(self.id),
            "name": self.name,
            "addresses": [address.to_mongo() for address in self.addresses],
        }

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump()


class Book(BaseModel):
    """Book document referencing its publisher by id."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id, description="Book identifier")
    title: str = Field(..., description="Book title")
    format: Optional[str] = Field(None, description="Book format, e.g. paperback")
    publisher_id: str = Field(..., alias="publisherId", description="Identifier of the publisher")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Book":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title"),
            format=doc.get("format"),
            publisher_id=str(doc.get("publisherId")),
        )

    def to_mongo(self) -> Dict[str, Any]:
        return {
            "_id": to_object_id(self.id),
            "title": self.title,
            "format": self.format,
            "publisherId": to_object_id(self.publisher_id),
        }

    def to_json(self, publisher: Optional[Publisher] = None) -> Dict[str, Any]:
        """Serialize the book, embedding the publisher when one is given."""
        data = self.model_dump(by_alias=True)
        if publisher is not None:
            data["publisher"] = publisher.to_json()
        return data


class Location(BaseModel):
    """GeoJSON point."""
    type: str = Field(..., description="GeoJSON geometry type, usually Point")
    coordinates: List[float] = Field(..., min_length=2, max_length=2, description="[longitude, latitude]")


class Shop(BaseModel):
    """Shop document with a geospatially indexed location."""
    id: str = Field(default_factory=new_id, description="Shop identifier")
    banner: Optional[str] = Field(None, description="Shop banner")
    city: Optional[str] = Field(None, description="City")
    location: Location = Field(..., description="Shop location")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Shop":
        return cls(
            id=str(doc["_id"]),
            banner=doc.get("banner"),
            city=doc.get("city"),
            location=Location(**doc["location"]),
        )

    def to_mongo(self) -> Dict[str, Any]:
        return {
            "_id": to_object_id(self.id),
            "banner": self.banner,
            "city": self.city,
            "location": self.location.model_dump(),
        }

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump()


class BookCount(BaseModel):
    """Number of books attributed to one publisher by the aggregation."""
    publisher_id: str = Field(..., description="Publisher identifier")
    total: int = Field(..., ge=1, description="Number of matching books")
