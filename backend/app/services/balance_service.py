"""Service for folding ledger rows into wallet balances."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.models.transaction import TransactionType
from app.services.classifier_service import classify_wallet, is_opening_fund
from app.services.wallet_registry import WalletId, list_wallets

ZERO = Decimal("0")


def chronological(transactions: Iterable[Any]) -> List[Any]:
    return sorted(transactions, key=lambda t: getattr(t, "created_at", None) or datetime.min)


def signed_amount(txn: Any) -> Decimal:
    """
    Contribution of one row to its wallet balance.
    Revenue adds, expense subtracts, closure markers count for nothing.
    Revenue opening rows that carry ``cost_total`` (only legacy rows do)
    count that value instead of ``amount``. Expense openings always count
    ``amount``; their ``cost_total`` is the target fund.
    """
    if txn.type == TransactionType.closure:
        return ZERO

    amount = Decimal(txn.amount or 0)
    if (
        txn.type == TransactionType.revenue
        and getattr(txn, "cost_total", None) is not None
        and is_opening_fund(txn)
    ):
        amount = Decimal(txn.cost_total)

    if txn.type == TransactionType.revenue:
        return amount
    if txn.type == TransactionType.expense:
        return -amount
    return ZERO


def empty_balances() -> Dict[WalletId, Decimal]:
    return {wallet.id: ZERO for wallet in list_wallets()}


def compute_balances(transactions: Iterable[Any]) -> Dict[WalletId, Decimal]:
    """Fold rows, oldest first, into a balance for every registered wallet."""
    balances = empty_balances()
    for txn in chronological(transactions):
        balances[classify_wallet(txn)] += signed_amount(txn)
    return balances


def running_balances(
    transactions: Iterable[Any],
    wallet: Optional[WalletId] = None
) -> List[Tuple[Any, WalletId, Decimal]]:
    """Return (row, wallet, balance after row) in chronological order."""
    balances = empty_balances()
    history = []
    for txn in chronological(transactions):
        txn_wallet = classify_wallet(txn)
        balances[txn_wallet] += signed_amount(txn)
        if wallet is None or txn_wallet == wallet:
            history.append((txn, txn_wallet, balances[txn_wallet]))
    return history


def total_balance(balances: Dict[WalletId, Decimal]) -> Decimal:
    return sum(balances.values(), ZERO)
