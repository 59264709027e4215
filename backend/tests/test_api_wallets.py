"""Tests for wallet API endpoints."""

from datetime import datetime
from decimal import Decimal

from app.models.transaction import TransactionType


class TestWalletsAPI:
    """Test wallet endpoints."""

    def test_list_wallets(self, client):
        response = client.get("/api/v1/wallets")
        assert response.status_code == 200
        data = response.json()
        assert [w["id"] for w in data["items"]] == ["cash", "bank", "safe", "postal_card", "banker_card"]
        assert Decimal(data["total"]) == 0

    def test_get_wallet(self, client, sample_sale):
        response = client.get("/api/v1/wallets/bank")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Banque"
        assert Decimal(data["balance"]) == Decimal("120")

    def test_get_wallet_by_label(self, client):
        assert client.get("/api/v1/wallets/Coffre").json()["id"] == "safe"

    def test_unknown_wallet(self, client):
        assert client.get("/api/v1/wallets/piggy").status_code == 404
        assert client.get("/api/v1/wallets/piggy/history").status_code == 404

    def test_history(self, client, make_transaction):
        make_transaction(amount="100", created_at=datetime(2026, 3, 10, 9, 0))
        make_transaction(type=TransactionType.expense, amount="30", description="Ink")
        history = client.get("/api/v1/wallets/cash/history").json()
        assert [Decimal(h["balance_after"]) for h in history] == [Decimal("70"), Decimal("100")]

    def test_audit_and_rebuild(self, client):
        client.post("/api/v1/transactions", json={"amount": "80", "wallet": "cash"})
        data = client.get("/api/v1/wallets/audit").json()
        assert data["consistent"] is True

        response = client.post("/api/v1/wallets/rebuild")
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("80")
