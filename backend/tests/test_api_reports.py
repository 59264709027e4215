"""Tests for report API endpoints."""

from decimal import Decimal


class TestReportsAPI:
    """Test report endpoints."""

    def test_daily_report(self, client, sample_sale):
        response = client.get("/api/v1/reports/daily", params={"day": "2026-03-10"})
        assert response.status_code == 200
        data = response.json()
        assert data["sales_count"] == 1
        assert Decimal(data["net_sales"]) == Decimal("40")

    def test_daily_report_today(self, client):
        client.post("/api/v1/transactions", json={"amount": "20", "wallet": "cash"})
        data = client.get("/api/v1/reports/daily").json()
        assert data["sales_count"] == 1
        assert Decimal(data["theoretical_cash"]) == Decimal("20")

    def test_range_report(self, client, sample_sale):
        response = client.get("/api/v1/reports/range", params={
            "start": "2026-03-01T00:00:00", "end": "2026-04-01T00:00:00",
        })
        assert response.status_code == 200
        assert Decimal(response.json()["total_sales"]) == Decimal("120")

    def test_range_report_bad_window(self, client):
        response = client.get("/api/v1/reports/range", params={
            "start": "2026-03-02T00:00:00", "end": "2026-03-01T00:00:00",
        })
        assert response.status_code == 400
