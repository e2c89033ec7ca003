"""
Tests for the shop endpoints, the health check and generic error handling.
"""

from fastapi.testclient import TestClient

from api.main import app
from catalog.errors import NotFoundError

SHOP_ID = "5f1d7c2e9b1e8a3d4c6b2c30"
SHOP_BODY = {
    "banner": "Payot",
    "city": "Lausanne",
    "location": {"type": "Point", "coordinates": [6.6323, 46.5197]},
}


def test_list_shops_near(client, mock_db_service, sample_shop):
    mock_db_service.list_shops.return_value = [sample_shop]

    response = client.get("/api/shops?latitude=46.5&longitude=6.6&distance=2000")

    assert response.status_code == 200
    assert response.json()[0]["location"]["coordinates"] == [6.6323, 46.5197]
    mock_db_service.list_shops.assert_awaited_once_with("46.5", "6.6", "2000")


def test_list_shops_without_location(client, mock_db_service):
    mock_db_service.list_shops.return_value = []

    response = client.get("/api/shops")

    assert response.status_code == 200
    mock_db_service.list_shops.assert_awaited_once_with(None, None, None)


def test_create_shop(client, mock_db_service, sample_shop):
    mock_db_service.create_shop.return_value = sample_shop

    response = client.post("/api/shops", json=SHOP_BODY)

    assert response.status_code == 200
    assert response.json()["id"] == SHOP_ID


def test_create_shop_requires_coordinate_pair(client, mock_db_service):
    body = dict(SHOP_BODY, location={"type": "Point", "coordinates": [6.6]})

    response = client.post("/api/shops", json=body)

    assert response.status_code == 400
    mock_db_service.create_shop.assert_not_awaited()


def test_get_shop(client, mock_db_service, sample_shop):
    mock_db_service.get_shop.return_value = sample_shop

    response = client.get(f"/api/shops/{SHOP_ID}")

    assert response.status_code == 200
    assert response.json()["banner"] == "Payot"


def test_shop_not_found(client, mock_db_service):
    mock_db_service.get_shop.side_effect = NotFoundError("Shop not found")

    response = client.get(f"/api/shops/{SHOP_ID}")

    assert response.status_code == 404


def test_update_shop(client, mock_db_service, sample_shop):
    mock_db_service.get_shop.return_value = sample_shop
    mock_db_service.update_shop.return_value = sample_shop

    response = client.put(f"/api/shops/{SHOP_ID}", json=SHOP_BODY)

    assert response.status_code == 200
    shop, payload = mock_db_service.update_shop.await_args.args
    assert shop is sample_shop
    assert payload.city == "Lausanne"


def test_delete_shop(client, mock_db_service, sample_shop):
    mock_db_service.get_shop.return_value = sample_shop

    response = client.delete(f"/api/shops/{SHOP_ID}")

    assert response.status_code == 204
    mock_db_service.delete_shop.assert_awaited_once_with(sample_shop)


def test_unexpected_errors_are_500(mock_db_service):
    mock_db_service.list_shops.side_effect = RuntimeError("boom")
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/shops")

    assert response.status_code == 500


def test_health_check_without_database():
    """Test health check endpoint before the database is attached."""
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["database_status"] == "unknown"
    assert "timestamp" in data
    assert "version" in data
