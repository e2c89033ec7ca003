"""
Per-publisher book counts.

The pipeline stages run in a fixed order: the format match must precede the
group, and skip/limit must follow the sort for pagination to be stable.
"""

from typing import Any, Dict, List, Sequence

import structlog

from .criteria import FormatFilter, format_condition
from .models import BookCount, Publisher
from .repositories import BookRepository

logger = structlog.get_logger(__name__)


def build_book_count_pipeline(
    formats: FormatFilter = None,
    ascending: bool = False,
    offset: int = 0,
    limit: int = 30
) -> List[Dict[str, Any]]:
    """
    Build the aggregation counting books by publisher.

    Args:
        formats: Only count books with this format (or one of these formats)
        ascending: Sort by count ascending instead of descending
        offset: Number of publishers to skip
        limit: Maximum number of publishers

    Returns:
        Pipeline of match, group, sort, skip and limit stages
    """
    pipeline: List[Dict[str, Any]] = []

    condition = format_condition(formats)
    if condition is not None:
        pipeline.append({"$match": {"format": condition}})

    pipeline.append({"$group": {"_id": "$publisherId", "total": {"$sum": 1}}})
    pipeline.append({"$sort": {"total": 1 if ascending else -1}})
    pipeline.append({"$skip": offset})
    pipeline.append({"$limit": limit})

    return pipeline


async def count_books_by_publisher(
    books: BookRepository,
    formats: FormatFilter = None,
    ascending: bool = False,
    offset: int = 0,
    limit: int = 30
) -> List[BookCount]:
    """Run the book count aggregation; results are sorted and paginated."""
    pipeline = build_book_count_pipeline(formats, ascending, offset, limit)
    results = await books.aggregate(pipeline)

    logger.debug("Counted books by publisher", formats=formats, publishers=len(results))
    return [BookCount(publisher_id=str(result["_id"]), total=result["total"]) for result in results]


def enrich_publishers(
    book_counts: Sequence[BookCount],
    publishers: Sequence[Publisher]
) -> List[Dict[str, Any]]:
    """
    Join aggregation counts with their publishers.

    The output follows the order of ``book_counts``, not the order the
    publishers were fetched in. Publishers without a count are left out, and
    counts whose publisher no longer exists are skipped.
    """
    by_id = {publisher.id: publisher for publisher in publishers}

    enriched = []
    for book_count in book_counts:
        publisher = by_id.get(book_count.publisher_id)
        if publisher is None:
            logger.warning(
                "Books reference a missing publisher",
                publisher_id=book_count.publisher_id,
                total=book_count.total
            )
            continue

        record = publisher.to_json()
        record["numberOfBooks"] = book_count.total
        enriched.append(record)

    return enriched
