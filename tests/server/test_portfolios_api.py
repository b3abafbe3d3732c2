"""Integration tests for Portfolio API endpoints.

Covers create, view, priced view, edit-load, update and delete,
including error bodies and status codes.
"""

import pytest
from fastapi.testclient import TestClient

from folioshare.server.storage.backends import MemoryBackend

PAYLOAD = {
    "holdings": [
        {"ticker": "aapl", "quantity": 10, "category": "Tech"},
        {"ticker": "  ", "quantity": 5},
        {"ticker": "XYZ", "quantity": 2, "category": "Growth"},
    ],
    "categories": {"Tech": {"color": "#3b82f6"}, "Growth": {"color": "#ef4444"}},
    "categoryOrder": ["Growth", "Tech"],
    "duration": "1 Week",
    "email": "owner@example.com",
}


def _create(client: TestClient, payload=None) -> dict:
    response = client.post("/api/v1/portfolios", json=payload or PAYLOAD)
    assert response.status_code == 201
    return response.json()


def _secret(created: dict) -> str:
    return created["editUrl"].rsplit("/", 1)[-1]


class TestPortfolioCreate:
    """Test cases for creating portfolios."""

    def test_create_returns_links(self, client: TestClient):
        data = _create(client)

        assert data["success"] is True
        assert data["viewUrl"] == f"http://testserver/view/{data['id']}"
        assert data["editUrl"].startswith(f"http://testserver/edit/{data['id']}/")
        assert _secret(data) != data["id"]

    def test_create_strips_blank_tickers(self, client: TestClient):
        data = _create(client)

        view = client.get(f"/api/v1/portfolios/{data['id']}").json()
        assert [h["ticker"] for h in view["holdings"]] == ["AAPL", "XYZ"]
        assert view["categoryOrder"] == ["Growth", "Tech"]
        assert view["duration"] == "1 Week"

    def test_create_empty_portfolio(self, client: TestClient):
        data = _create(client, {"holdings": []})

        view = client.get(f"/api/v1/portfolios/{data['id']}").json()
        assert view["holdings"] == []
        assert view["expiresAt"] is None

    def test_create_missing_holdings_is_400(self, client: TestClient):
        response = client.post("/api/v1/portfolios", json={"duration": "1 Day"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["details"]

    def test_create_negative_quantity_is_400(self, client: TestClient):
        response = client.post(
            "/api/v1/portfolios",
            json={"holdings": [{"ticker": "AAPL", "quantity": -1}]},
        )

        assert response.status_code == 400

    def test_create_storage_failure_is_500(
        self, client: TestClient, store, primary: MemoryBackend, monkeypatch
    ):
        def fail(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(store.secondary, "save", fail)

        response = client.post("/api/v1/portfolios", json=PAYLOAD)

        assert response.status_code == 500
        assert response.json()["error"] == "StorageError"
        assert len(primary) == 0


class TestPortfolioView:
    """Test cases for viewing portfolios."""

    def test_view_hides_secret(self, client: TestClient):
        data = _create(client)

        response = client.get(f"/api/v1/portfolios/{data['id']}")

        assert response.status_code == 200
        assert _secret(data) not in response.text
        assert "editSecret" not in response.json()

    def test_view_unknown_is_404(self, client: TestClient):
        response = client.get("/api/v1/portfolios/doesnotexist")

        assert response.status_code == 404
        assert response.json() == {"error": "NotFoundError", "details": "Portfolio not found"}

    def test_view_expired_is_404(self, client: TestClient, clock):
        data = _create(client, {"holdings": [], "duration": "1 Day"})

        clock.advance(hours=25)
        response = client.get(f"/api/v1/portfolios/{data['id']}")

        assert response.status_code == 404

    def test_prices_decorate_holdings(self, client: TestClient):
        data = _create(client)

        response = client.get(f"/api/v1/portfolios/{data['id']}/prices")

        assert response.status_code == 200
        holdings = response.json()["holdings"]
        aapl, xyz = holdings
        assert aapl["ticker"] == "AAPL"
        assert aapl["currentPrice"] == 150.0
        assert aapl["change"] == 2.0
        assert aapl["totalValue"] == 1500.0
        assert aapl["priceError"] is None
        assert xyz["currentPrice"] == 0
        assert xyz["changePercent"] == 0
        assert xyz["priceError"]

    def test_prices_unknown_is_404(self, client: TestClient):
        response = client.get("/api/v1/portfolios/doesnotexist/prices")

        assert response.status_code == 404


class TestPortfolioEdit:
    """Test cases for the edit loader."""

    def test_edit_load_returns_full_record(self, client: TestClient):
        data = _create(client)

        response = client.get(f"/api/v1/edit/{data['id']}/{_secret(data)}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        portfolio = body["portfolio"]
        assert portfolio["id"] == data["id"]
        assert portfolio["email"] == "owner@example.com"
        assert portfolio["categories"]["Tech"] == {"color": "#3b82f6"}
        assert portfolio["expiresAt"] is not None
        assert "editSecret" not in portfolio

    def test_edit_load_wrong_secret_is_403(self, client: TestClient):
        data = _create(client)

        response = client.get(f"/api/v1/edit/{data['id']}/not-the-secret")

        assert response.status_code == 403
        assert response.json()["error"] == "ForbiddenError"

    def test_edit_load_unknown_is_404(self, client: TestClient):
        response = client.get("/api/v1/edit/doesnotexist/whatever")

        assert response.status_code == 404


class TestPortfolioUpdate:
    """Test cases for updating portfolios."""

    def test_update_replaces_holdings(self, client: TestClient):
        data = _create(client)

        response = client.put(
            f"/api/v1/portfolios/{data['id']}/{_secret(data)}",
            json={
                "holdings": [{"ticker": "msft", "quantity": 3}, {"ticker": "", "quantity": 1}],
                "categoryOrder": ["Tech"],
                "duration": "Forever",
            },
        )

        assert response.status_code == 200
        assert response.json()["editUrl"] == data["editUrl"]

        view = client.get(f"/api/v1/portfolios/{data['id']}").json()
        assert view["holdings"] == [{"ticker": "MSFT", "quantity": 3.0, "category": None}]
        assert view["categoryOrder"] == ["Tech"]
        assert view["expiresAt"] is None

    def test_update_wrong_secret_keeps_data(self, client: TestClient):
        data = _create(client)

        response = client.put(
            f"/api/v1/portfolios/{data['id']}/wrong",
            json={"holdings": []},
        )

        assert response.status_code == 403
        view = client.get(f"/api/v1/portfolios/{data['id']}").json()
        assert [h["ticker"] for h in view["holdings"]] == ["AAPL", "XYZ"]

    def test_update_unknown_is_404(self, client: TestClient):
        response = client.put("/api/v1/portfolios/doesnotexist/secret", json={"holdings": []})

        assert response.status_code == 404


class TestPortfolioDelete:
    """Test cases for deleting portfolios."""

    def test_delete_then_view_is_404(self, client: TestClient):
        data = _create(client)

        response = client.delete(f"/api/v1/portfolios/{data['id']}/{_secret(data)}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Portfolio deleted successfully"}
        assert client.get(f"/api/v1/portfolios/{data['id']}").status_code == 404

    def test_delete_wrong_secret_is_403(self, client: TestClient):
        data = _create(client)

        response = client.delete(f"/api/v1/portfolios/{data['id']}/wrong")

        assert response.status_code == 403
        assert client.get(f"/api/v1/portfolios/{data['id']}").status_code == 200

    def test_delete_reaches_both_tiers(
        self, client: TestClient, primary: MemoryBackend, secondary: MemoryBackend
    ):
        data = _create(client)
        assert data["id"] in primary
        assert data["id"] in secondary

        client.delete(f"/api/v1/portfolios/{data['id']}/{_secret(data)}")

        assert data["id"] not in primary
        assert data["id"] not in secondary
