"""
Query, aggregation and relationship layer for the bookstore catalog.

This package holds everything that talks to MongoDB:
- Document models and repositories for books, publishers and shops
- Filter and pagination criteria
- Publisher book-count aggregation
- Publisher/book integrity and embedded addresses
"""
