"""API routers."""

from api.routes import books, health, publishers, shops

__all__ = ["books", "health", "publishers", "shops"]
