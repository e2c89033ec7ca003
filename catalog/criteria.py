"""
Translate query-string parameters into store criteria and pagination.
All builders are pure: they return plain filter documents and never touch
the store.
"""

from typing import Any, Dict, Optional, Sequence, Union

from pydantic import BaseModel, Field

from .errors import ValidationError
from .models import to_object_id

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 30
DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 30

FormatFilter = Union[str, Sequence[str], None]


class Page(BaseModel):
    """Pagination window resolved from page/pageSize or offset/limit."""
    page: int = Field(DEFAULT_PAGE, description="1-based page number")
    page_size: int = Field(DEFAULT_PAGE_SIZE, description="Items per page")
    offset: int = Field(0, description="Number of items to skip")
    limit: int = Field(DEFAULT_PAGE_SIZE, description="Maximum number of items")


def _to_int(name: str, value: Union[str, int, None], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Query parameter '{name}' must be an integer")


def _to_float(name: str, value: Union[str, float]) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Query parameter '{name}' must be a number")


def format_condition(formats: FormatFilter) -> Optional[Any]:
    """
    Match condition for the book format field.

    A string matches exactly, a sequence matches any of its members, and
    nothing (or an empty sequence) means no condition.
    """
    if not formats:
        return None
    if isinstance(formats, str):
        return formats
    return {"$in": list(formats)}


def build_book_criteria(
    publisher_id: Optional[str] = None,
    formats: FormatFilter = None
) -> Dict[str, Any]:
    """
    Build the filter document for book listings.

    Args:
        publisher_id: Only books from this publisher
        formats: Single format or several formats

    Returns:
        Filter document for find/count_documents
    """
    criteria: Dict[str, Any] = {}

    if publisher_id:
        criteria["publisherId"] = to_object_id(publisher_id)

    condition = format_condition(formats)
    if condition is not None:
        criteria["format"] = condition

    return criteria


def build_page(
    page: Union[str, int, None] = None,
    page_size: Union[str, int, None] = None,
    default_page_size: int = DEFAULT_PAGE_SIZE
) -> Page:
    """
    Convert page/pageSize to an offset/limit pair.

    Values are not bounds checked; a zero or negative page yields a
    negative offset which the driver rejects.
    """
    page_number = _to_int("page", page, DEFAULT_PAGE)
    size = _to_int("pageSize", page_size, default_page_size)
    return Page(page=page_number, page_size=size, offset=(page_number - 1) * size, limit=size)


def build_offset_limit(
    offset: Union[str, int, None] = None,
    limit: Union[str, int, None] = None
) -> Page:
    """Offset/limit pagination as used by the publisher listing."""
    skip = _to_int("offset", offset, DEFAULT_OFFSET)
    size = _to_int("limit", limit, DEFAULT_LIMIT)
    page_number = skip // size + 1 if size > 0 else DEFAULT_PAGE
    return Page(page=page_number, page_size=size, offset=skip, limit=size)


def build_shop_criteria(
    latitude: Union[str, float, None] = None,
    longitude: Union[str, float, None] = None,
    distance: Union[str, int, None] = None
) -> Dict[str, Any]:
    """
    Build the nearest-within-radius filter for shop listings.

    The filter applies only when latitude, longitude and distance are all
    given; distance is in meters.
    """
    if latitude in (None, "") or longitude in (None, "") or distance in (None, ""):
        return {}

    return {
        "location": {
            "$near": {
                "$geometry": {
                    "type": "Point",
                    "coordinates": [_to_float("longitude", longitude), _to_float("latitude", latitude)],
                },
                "$maxDistance": _to_int("distance", distance, 0),
            }
        }
    }
