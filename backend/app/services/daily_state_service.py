"""Service for finding a day's opening and closure records."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional, Tuple

from app.services.balance_service import chronological
from app.services.classifier_service import classify_wallet, is_closure, is_opening_fund
from app.services.wallet_registry import WalletId


@dataclass
class DailyState:
    day: date
    opening_fund: Optional[Any] = None
    closure_record: Optional[Any] = None
    opening_amount: Optional[Decimal] = None

    @property
    def is_opened(self) -> bool:
        return self.opening_fund is not None

    @property
    def is_closed(self) -> bool:
        return self.closure_record is not None


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return [start, end) of a local calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def opening_amount_of(txn: Any) -> Decimal:
    """Nominal opening fund recorded on an opening row."""
    if getattr(txn, "declared_balance", None) is not None:
        return Decimal(txn.declared_balance)
    if getattr(txn, "cost_total", None) is not None:
        return Decimal(txn.cost_total)
    return Decimal(txn.amount or 0)


def detect_daily_state(
    transactions: Iterable[Any],
    day: date,
    wallet: Optional[WalletId] = None
) -> DailyState:
    """
    Find the first opening and the first closure row of ``day``.
    When ``wallet`` is given only that wallet's rows count.
    """
    start, end = day_bounds(day)
    state = DailyState(day=day)

    for txn in chronological(transactions):
        created = getattr(txn, "created_at", None)
        if created is None or not (start <= created < end):
            continue
        if wallet is not None and classify_wallet(txn) != wallet:
            continue
        if state.opening_fund is None and is_opening_fund(txn):
            state.opening_fund = txn
            state.opening_amount = opening_amount_of(txn)
        elif state.closure_record is None and is_closure(txn):
            state.closure_record = txn

    return state
