"""Tests for sales reports and transfer listings."""

from datetime import datetime
from decimal import Decimal

from app.services import cash_service, report_service
from app.services.daily_state_service import day_bounds


class TestReports:
    """Test the daily summary."""

    def test_sales_summary(self, db_session, sample_sale, now, rules):
        """Internal movements never count as sales or expenses."""
        cash_service.open_day(db_session, "cash", 100, now=now, rules=rules)
        cash_service.record_expense(db_session, 15, "cash", "Cleaning", now=now.replace(hour=11))
        cash_service.transfer(db_session, "cash", "safe", 30, now=now.replace(hour=12), rules=rules)

        start, end = day_bounds(now.date())
        summary = report_service.sales_summary(db_session, start, end)

        assert summary["sales_count"] == 1
        assert summary["total_sales"] == Decimal("120")
        assert summary["total_cost"] == Decimal("80")
        assert summary["net_sales"] == Decimal("40")
        assert summary["expenses_count"] == 1
        assert summary["total_expenses"] == Decimal("15")
        assert summary["cash_in"] == Decimal("100")
        assert summary["cash_out"] == Decimal("45")
        assert summary["theoretical_cash"] == Decimal("55")
        assert summary["net_cash"] == Decimal("25")

    def test_other_days_excluded(self, db_session, sample_sale):
        start, end = day_bounds(datetime(2026, 3, 11).date())
        summary = report_service.sales_summary(db_session, start, end)
        assert summary["sales_count"] == 0
        assert summary["total_sales"] == 0

    def test_list_transfers(self, db_session, now, rules):
        cash_service.record_sale(db_session, 200, "cash", now=now)
        cash_service.open_day(db_session, "cash", 50, now=now, rules=rules)
        cash_service.transfer(db_session, "cash", "safe", 30, now=now.replace(hour=10), rules=rules)
        cash_service.transfer(db_session, "cash", "bank", 40, now=now.replace(hour=11), rules=rules)

        start, end = day_bounds(now.date())
        transfers = report_service.list_transfers(db_session, start, end)

        assert [(t["from_wallet"], t["to_wallet"], t["amount"]) for t in transfers] == [
            ("cash", "bank", Decimal("40")),
            ("cash", "safe", Decimal("30")),
        ]
        assert all(len(t["legs"]) == 2 for t in transfers)
