"""
FastAPI RESTful API for the Bookstore Catalog.

This module provides a REST API for:
- Books, filtered by publisher and format with header-based pagination
- Publishers ranked by number of books, with cascade deletion
- Addresses embedded in publishers
- Shops with nearest-first geospatial search
"""
