"""Integration tests for price lookup and ticker validation endpoints."""

from fastapi.testclient import TestClient


class TestGetPrices:
    """Test cases for POST /api/v1/get-prices."""

    def test_prices_in_request_order(self, client: TestClient):
        response = client.post("/api/v1/get-prices", json={"tickers": ["MSFT", "aapl"]})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [p["ticker"] for p in data["prices"]] == ["MSFT", "AAPL"]

        msft = data["prices"][0]
        assert msft["currentPrice"] == 400.0
        assert msft["change"] == -10.0
        assert msft["changePercent"] == -2.44
        assert msft["success"] is True

    def test_failed_ticker_is_zeroed(self, client: TestClient):
        response = client.post("/api/v1/get-prices", json={"tickers": ["AAPL", "XYZ"]})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        xyz = data["prices"][1]
        assert xyz["currentPrice"] == 0
        assert xyz["change"] == 0
        assert xyz["success"] is False
        assert "XYZ" in xyz["error"]

    def test_empty_list(self, client: TestClient):
        response = client.post("/api/v1/get-prices", json={"tickers": []})

        assert response.status_code == 200
        assert response.json()["prices"] == []

    def test_missing_tickers_is_400(self, client: TestClient):
        response = client.post("/api/v1/get-prices", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"


class TestValidateTicker:
    """Test cases for GET /api/v1/validate-ticker/{ticker}."""

    def test_known_ticker_is_valid(self, client: TestClient):
        response = client.get("/api/v1/validate-ticker/aapl")

        assert response.status_code == 200
        assert response.json() == {"valid": True, "ticker": "AAPL", "source": "market"}

    def test_unknown_ticker_is_invalid(self, client: TestClient):
        response = client.get("/api/v1/validate-ticker/GOOG")

        assert response.json() == {"valid": False, "ticker": "GOOG", "source": "market"}

    def test_crypto_pair_accepted(self, client: TestClient, quotes):
        quotes.symbols = ["BTC-USD"]

        response = client.get("/api/v1/validate-ticker/BTC", params={"category": "Crypto"})

        assert response.json()["valid"] is True

    def test_search_failure_uses_format(self, client: TestClient, quotes):
        quotes.search_fails = True

        good = client.get("/api/v1/validate-ticker/shop.to").json()
        bad = client.get("/api/v1/validate-ticker/NOT_A_TICKER1").json()

        assert good == {"valid": True, "ticker": "SHOP.TO", "source": "format"}
        assert bad["valid"] is False
        assert bad["source"] == "format"
