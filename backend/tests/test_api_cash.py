"""Tests for cash operation API endpoints."""

from decimal import Decimal


def balances(client):
    return {w["id"]: Decimal(w["balance"]) for w in client.get("/api/v1/wallets").json()["items"]}


class TestCashAPI:
    """Test cash endpoints."""

    def test_status_empty(self, client):
        response = client.get("/api/v1/cash/status")
        assert response.status_code == 200
        data = response.json()
        assert data["daily_state"]["is_opened"] is False
        assert Decimal(data["total"]) == 0
        codes = [a["code"] for a in data["alerts"]]
        assert "opening_pending" in codes
        assert "low_cash" in codes

    def test_open_transfer_close(self, client):
        response = client.post("/api/v1/cash/open", json={"amount": "100"})
        assert response.status_code == 201
        assert Decimal(response.json()["balance_after"]) == Decimal("100")

        response = client.post("/api/v1/cash/transfer", json={
            "from_wallet": "cash", "to_wallet": "safe", "amount": "30", "reason": "bank run",
        })
        assert response.status_code == 201
        rows = response.json()["rows"]
        assert len(rows) == 2
        assert rows[0]["transfer_id"] == rows[1]["transfer_id"]

        response = client.post("/api/v1/cash/close", json={"keep_amount": "50"})
        assert response.status_code == 201
        assert Decimal(response.json()["transferred"]) == Decimal("20")

        assert balances(client)["cash"] == Decimal("50")
        assert balances(client)["safe"] == Decimal("50")

        state = client.get("/api/v1/cash/status").json()["daily_state"]
        assert state["is_opened"] is True
        assert state["is_closed"] is True

        transfers = client.get("/api/v1/cash/transfers").json()
        assert len(transfers) == 2

    def test_open_twice(self, client):
        client.post("/api/v1/cash/open", json={"amount": "100"})
        response = client.post("/api/v1/cash/open", json={"amount": "100"})
        assert response.status_code == 409
        assert response.json()["error"] == "state_conflict"

    def test_open_bad_mode(self, client):
        response = client.post("/api/v1/cash/open", json={"amount": "100", "mode": "double"})
        assert response.status_code == 422

    def test_transfer_insufficient(self, client):
        response = client.post("/api/v1/cash/transfer", json={
            "from_wallet": "cash", "to_wallet": "safe", "amount": "30",
        })
        assert response.status_code == 422
        assert response.json()["error"] == "insufficient_funds"

    def test_transfer_same_wallet(self, client):
        client.post("/api/v1/cash/open", json={"amount": "100"})
        response = client.post("/api/v1/cash/transfer", json={
            "from_wallet": "cash", "to_wallet": "cash", "amount": "30",
        })
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_reconcile(self, client):
        client.post("/api/v1/cash/open", json={"amount": "70"})

        response = client.post("/api/v1/cash/reconcile", json={"physical_count": "71"})
        assert response.status_code == 200
        assert response.json()["rows"] == []

        response = client.post("/api/v1/cash/reconcile", json={"physical_count": "75"})
        data = response.json()
        assert len(data["rows"]) == 1
        assert Decimal(data["difference"]) == Decimal("5")
        assert balances(client)["cash"] == Decimal("75")

    def test_adjust(self, client):
        response = client.post("/api/v1/cash/adjust", json={
            "wallet": "safe", "new_balance": "300", "reason": "opening count",
        })
        assert response.status_code == 200
        assert balances(client)["safe"] == Decimal("300")

    def test_adjust_needs_reason(self, client):
        response = client.post("/api/v1/cash/adjust", json={
            "wallet": "safe", "new_balance": "300", "reason": "",
        })
        assert response.status_code == 422

    def test_suggestions(self, client):
        client.post("/api/v1/transactions", json={"amount": "700", "wallet": "cash"})
        suggestions = client.get("/api/v1/cash/suggestions").json()
        assert suggestions[0]["type"] == "excess"
        assert Decimal(suggestions[0]["amount"]) == Decimal("600")

    def test_auto(self, client):
        client.post("/api/v1/transactions", json={"amount": "1200", "wallet": "cash"})
        response = client.post("/api/v1/cash/auto", json={"auto_mode": True})
        assert response.status_code == 200
        results = response.json()
        assert len(results) == 1
        assert Decimal(results[0]["transferred"]) == Decimal("700")

    def test_alerts(self, client):
        client.post("/api/v1/transactions", json={"amount": "1200", "wallet": "cash"})
        alerts = client.get("/api/v1/cash/alerts").json()
        assert alerts[0]["code"] == "security_risk"
        assert alerts[0]["severity"] == "critical"
