"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.database import APIDatabaseService
from api.dependencies import get_db_service
from api.main import app
from catalog.models import Address, Book, Location, Publisher, Shop
from catalog.repositories import BookRepository, PublisherRepository, Repositories, ShopRepository

PUBLISHER_ID = "5f1d7c2e9b1e8a3d4c6b2a10"
OTHER_PUBLISHER_ID = "5f1d7c2e9b1e8a3d4c6b2a11"
BOOK_ID = "5f1d7c2e9b1e8a3d4c6b2b20"
SHOP_ID = "5f1d7c2e9b1e8a3d4c6b2c30"


@pytest.fixture
def sample_publisher():
    """Publisher with two addresses."""
    return Publisher(
        id=PUBLISHER_ID,
        name="Penguin",
        addresses=[
            Address(id="5f1d7c2e9b1e8a3d4c6b2d01", city="London", street="80 Strand"),
            Address(id="5f1d7c2e9b1e8a3d4c6b2d02", city="New York", street="1745 Broadway"),
        ]
    )


@pytest.fixture
def sample_book():
    return Book(id=BOOK_ID, title="Dune", format="paperback", publisher_id=PUBLISHER_ID)


@pytest.fixture
def sample_shop():
    return Shop(
        id=SHOP_ID,
        banner="Payot",
        city="Lausanne",
        location=Location(type="Point", coordinates=[6.6323, 46.5197])
    )


@pytest.fixture
def mock_repositories():
    """Repositories with every collection operation mocked."""
    repositories = MagicMock(spec=Repositories)
    repositories.books = AsyncMock(spec=BookRepository)
    repositories.publishers = AsyncMock(spec=PublisherRepository)
    repositories.shops = AsyncMock(spec=ShopRepository)
    repositories.manager = AsyncMock()
    return repositories


@pytest.fixture
def db_service(mock_repositories):
    """Database service over mocked repositories."""
    return APIDatabaseService(mock_repositories)


@pytest.fixture
def mock_db_service():
    """Mocked database service injected into the routes."""
    mock = AsyncMock(spec=APIDatabaseService)
    app.dependency_overrides[get_db_service] = lambda: mock
    yield mock
    app.dependency_overrides.pop(get_db_service, None)


@pytest.fixture
def client(mock_db_service):
    """Create test client. The lifespan is not run, so no database is needed."""
    return TestClient(app)
