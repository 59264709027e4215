"""Tests for daily opening/closure detection."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from app.models.transaction import TransactionKind, TransactionType
from app.services.daily_state_service import day_bounds, detect_daily_state, opening_amount_of
from app.services.wallet_registry import WalletId

DAY = date(2026, 3, 10)


def row(hour, minute=0, day=DAY, **fields):
    defaults = dict(
        type=TransactionType.revenue, kind=None, amount=Decimal("0"),
        wallet="cash", method=None, source=None, description=None,
        is_internal=False, cost_total=None, declared_balance=None,
    )
    defaults.update(fields)
    return SimpleNamespace(created_at=datetime.combine(day, datetime.min.time()).replace(hour=hour, minute=minute), **defaults)


def test_day_bounds():
    start, end = day_bounds(DAY)
    assert start == datetime(2026, 3, 10)
    assert end == datetime(2026, 3, 11)


class TestDetectDailyState:
    """Test finding the day's opening and closure rows."""

    def test_empty_day(self):
        state = detect_daily_state([], DAY)
        assert not state.is_opened
        assert not state.is_closed
        assert state.opening_amount is None

    def test_first_opening_wins(self):
        """With two openings the earliest one counts."""
        late = row(11, kind=TransactionKind.opening_fund, amount=Decimal("80"), declared_balance=Decimal("80"))
        early = row(8, kind=TransactionKind.opening_fund, amount=Decimal("50"), declared_balance=Decimal("50"))
        state = detect_daily_state([late, early], DAY)
        assert state.opening_fund is early
        assert state.opening_amount == Decimal("50")

    def test_closure(self):
        rows = [
            row(8, kind=TransactionKind.opening_fund, amount=Decimal("50")),
            row(20, type=TransactionType.closure, kind=TransactionKind.closure, amount=Decimal("50")),
        ]
        state = detect_daily_state(rows, DAY)
        assert state.is_opened
        assert state.is_closed

    def test_other_days_ignored(self):
        rows = [
            row(8, day=date(2026, 3, 9), kind=TransactionKind.opening_fund),
            row(0, day=date(2026, 3, 11), kind=TransactionKind.closure, type=TransactionType.closure),
        ]
        state = detect_daily_state(rows, DAY)
        assert not state.is_opened
        assert not state.is_closed

    def test_midnight_belongs_to_new_day(self):
        rows = [row(0, kind=TransactionKind.opening_fund)]
        assert detect_daily_state(rows, DAY).is_opened

    def test_wallet_filter(self):
        """An opening of the bank wallet does not open the drawer."""
        rows = [row(8, wallet="bank", kind=TransactionKind.opening_fund)]
        assert not detect_daily_state(rows, DAY, WalletId.cash).is_opened
        assert detect_daily_state(rows, DAY, WalletId.bank).is_opened

    def test_legacy_rows(self):
        """Rows without a kind are recognised from their text."""
        rows = [
            row(8, wallet="Caisse", is_internal=True, source="ouverture",
                amount=Decimal("30"), cost_total=Decimal("50")),
            row(21, wallet="Caisse", is_internal=True, type=TransactionType.expense,
                description="Clôture de caisse"),
        ]
        state = detect_daily_state(rows, DAY, WalletId.cash)
        assert state.is_opened
        assert state.is_closed
        assert state.opening_amount == Decimal("50")

    def test_sale_mentioning_opening_is_not_an_opening(self):
        rows = [row(9, description="Ouverture nouveau client")]
        assert not detect_daily_state(rows, DAY).is_opened


class TestOpeningAmount:
    """Test the nominal opening amount of a row."""

    def test_declared_balance_first(self):
        txn = row(8, amount=Decimal("20"), cost_total=Decimal("40"), declared_balance=Decimal("60"))
        assert opening_amount_of(txn) == Decimal("60")

    def test_cost_total_then_amount(self):
        assert opening_amount_of(row(8, amount=Decimal("20"), cost_total=Decimal("40"))) == Decimal("40")
        assert opening_amount_of(row(8, amount=Decimal("20"))) == Decimal("20")
