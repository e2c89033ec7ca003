"""
Unit tests for the publisher book-count aggregation and enrichment.
"""

from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from catalog.aggregation import build_book_count_pipeline, count_books_by_publisher, enrich_publishers
from catalog.models import BookCount, Publisher
from catalog.repositories import BookRepository

P1 = "5f1d7c2e9b1e8a3d4c6b2a10"
P2 = "5f1d7c2e9b1e8a3d4c6b2a11"
P3 = "5f1d7c2e9b1e8a3d4c6b2a12"


class TestPipeline:
    """Test cases for pipeline construction."""

    def test_stage_order_without_format(self):
        pipeline = build_book_count_pipeline(offset=5, limit=10)
        assert pipeline == [
            {"$group": {"_id": "$publisherId", "total": {"$sum": 1}}},
            {"$sort": {"total": -1}},
            {"$skip": 5},
            {"$limit": 10},
        ]

    def test_single_format_match_comes_first(self):
        pipeline = build_book_count_pipeline("ebook")
        assert pipeline[0] == {"$match": {"format": "ebook"}}
        assert list(pipeline[1]) == ["$group"]

    def test_multiple_formats_match(self):
        pipeline = build_book_count_pipeline(["ebook", "audio"])
        assert pipeline[0] == {"$match": {"format": {"$in": ["ebook", "audio"]}}}

    def test_ascending_sort(self):
        pipeline = build_book_count_pipeline(ascending=True)
        assert {"$sort": {"total": 1}} in pipeline


class TestCountBooksByPublisher:
    """Test cases for running the aggregation."""

    @pytest.mark.asyncio
    async def test_results_are_converted_in_order(self):
        books = AsyncMock(spec=BookRepository)
        books.aggregate.return_value = [
            {"_id": ObjectId(P1), "total": 2},
            {"_id": ObjectId(P2), "total": 1},
        ]

        counts = await count_books_by_publisher(books, offset=0, limit=30)

        assert counts == [BookCount(publisher_id=P1, total=2), BookCount(publisher_id=P2, total=1)]
        books.aggregate.assert_awaited_once_with(build_book_count_pipeline(None, False, 0, 30))

    @pytest.mark.asyncio
    async def test_format_filter_reaches_pipeline(self):
        books = AsyncMock(spec=BookRepository)
        books.aggregate.return_value = []

        counts = await count_books_by_publisher(books, formats="A", offset=0, limit=5)

        assert counts == []
        pipeline = books.aggregate.await_args.args[0]
        assert pipeline[0] == {"$match": {"format": "A"}}
        assert pipeline[-1] == {"$limit": 5}


class TestEnrichPublishers:
    """Test cases for joining counts with publishers."""

    def test_order_follows_counts_not_fetch_order(self):
        counts = [BookCount(publisher_id=P1, total=2), BookCount(publisher_id=P2, total=1)]
        fetched = [Publisher(id=P2, name="Second"), Publisher(id=P1, name="First")]

        enriched = enrich_publishers(counts, fetched)

        assert [record["name"] for record in enriched] == ["First", "Second"]
        assert [record["numberOfBooks"] for record in enriched] == [2, 1]
        assert enriched[0]["id"] == P1
        assert enriched[0]["addresses"] == []

    def test_publishers_without_counts_are_excluded(self):
        counts = [BookCount(publisher_id=P1, total=3)]
        fetched = [Publisher(id=P1, name="First"), Publisher(id=P3, name="No books")]

        enriched = enrich_publishers(counts, fetched)

        assert len(enriched) == 1
        assert enriched[0]["id"] == P1

    def test_counts_for_missing_publishers_are_skipped(self):
        counts = [BookCount(publisher_id=P1, total=3), BookCount(publisher_id=P2, total=1)]
        fetched = [Publisher(id=P2, name="Second")]

        enriched = enrich_publishers(counts, fetched)

        assert [record["id"] for record in enriched] == [P2]
