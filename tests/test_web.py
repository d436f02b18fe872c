"""
Tests for the FastAPI web interface.

Tests cover:
- JSON payload shapes for each endpoint
- Window validation and unknown symbols
- Heatmap PNG and HTML overview
"""

import pytest
from fastapi.testclient import TestClient
from stockdash.web import create_app


@pytest.fixture
def client(seeded_engine, fast_settings):
    return TestClient(create_app(seeded_engine, fast_settings))


class TestApi:
    """Tests for the JSON endpoints."""

    def test_symbols(self, client):
        response = client.get("/api/symbols")
        assert response.status_code == 200
        assert response.json()["symbols"][0] == "AAPL"
        assert len(response.json()["symbols"]) == 8

    def test_stocks(self, client):
        """Test one quote per symbol with dashboard field names."""
        response = client.get("/api/stocks")
        assert response.status_code == 200

        stocks = response.json()
        assert len(stocks) == 8
        assert {"symbol", "name", "price", "change", "changePercent",
                "volume", "marketCap", "timestamp"} <= set(stocks[0])

    def test_history_default_window(self, client):
        """Test the default 30 minute window."""
        response = client.get("/api/stocks/AAPL/history")
        assert response.status_code == 200

        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["minutes"] == 30
        assert len(data["points"]) == 31
        assert data["standardDeviation"] >= 0

    def test_history_lowercase_symbol(self, client):
        response = client.get("/api/stocks/msft/history", params={"minutes": 5})
        assert response.status_code == 200
        assert response.json()["symbol"] == "MSFT"
        assert len(response.json()["points"]) == 6

    def test_history_unknown_symbol(self, client):
        response = client.get("/api/stocks/XYZ/history")
        assert response.status_code == 404
        assert "XYZ" in response.json()["detail"]

    @pytest.mark.parametrize("minutes", [7, 65, 0])
    def test_history_invalid_window(self, client, minutes):
        response = client.get("/api/stocks/AAPL/history", params={"minutes": minutes})
        assert response.status_code == 400

    def test_stats(self, client):
        response = client.get("/api/stocks/NVDA/stats", params={"minutes": 15})
        assert response.status_code == 200

        data = response.json()
        assert data["stock"]["symbol"] == "NVDA"
        assert data["minutes"] == 15
        assert data["statistics"]["latestPrice"] == data["stock"]["price"]

    def test_correlation(self, client):
        """Test the symmetric matrix payload."""
        response = client.get("/api/correlation", params={"minutes": 10})
        assert response.status_code == 200

        payload = response.json()
        assert payload["minutes"] == 10
        assert len(payload["symbols"]) == 8
        data = payload["data"]
        for i in range(8):
            assert data[i][i] == 1.0
            for j in range(8):
                assert data[i][j] == data[j][i]
        assert set(payload["averages"]) == set(payload["symbols"])
        assert set(payload["standardDeviations"]) == set(payload["symbols"])


class TestPages:
    """Tests for the HTML page and images."""

    def test_heatmap_png(self, client):
        response = client.get("/api/correlation/heatmap.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_home_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "AAPL" in response.text
        assert "BRK.A" in response.text
