from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from dish_audit.main import app, get_handler


@pytest.fixture
def handler():
    fake = MagicMock()
    app.dependency_overrides[get_handler] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_audit_dish_passes_body_and_status_through(handler):
    handler.handle.return_value = (200, {"status": "success", "message": "Dish verified: Poha", "data": {}})

    response = TestClient(app).post("/api/audit-dish", json={"orderId": "o1", "photoUrls": ["AAAA"]})

    assert response.status_code == 200
    assert response.json()["message"] == "Dish verified: Poha"
    handler.handle.assert_called_once_with({"orderId": "o1", "photoUrls": ["AAAA"]})


def test_audit_dish_internal_error_status(handler):
    handler.handle.return_value = (500, {"status": "error", "message": "Internal Server Error", "debug": "x"})

    response = TestClient(app).post("/api/audit-dish", json={})

    assert response.status_code == 500


def test_audit_dish_invalid_json_body(handler):
    response = TestClient(app).post(
        "/api/audit-dish",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert body["message"] == "Internal Server Error"
    assert "debug" in body
    handler.handle.assert_not_called()
