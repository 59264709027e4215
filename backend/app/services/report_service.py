"""Service for sales summaries and transfer listings."""

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.models.transaction import TransactionKind, TransactionType
from app.services import ledger_store
from app.services.balance_service import ZERO, signed_amount
from app.services.classifier_service import classify_kind, classify_wallet
from app.services.wallet_registry import WalletId


def sales_summary(db: Session, start: datetime, end: datetime) -> Dict[str, Any]:
    """
    Sales, margin and cash movement for [start, end).
    Internal movements count for the cash figures, never for sales or profit.
    """
    rows = ledger_store.load_transactions(db, start, end)

    sales = [
        t for t in rows
        if t.type == TransactionType.revenue and not t.is_internal and classify_kind(t) == TransactionKind.sale
    ]
    expenses = [
        t for t in rows
        if t.type == TransactionType.expense and not t.is_internal and classify_kind(t) == TransactionKind.expense
    ]

    total_sales = sum((Decimal(t.amount) for t in sales), ZERO)
    total_cost = sum((Decimal(t.cost_total or 0) for t in sales), ZERO)
    total_expenses = sum((Decimal(t.amount) for t in expenses), ZERO)

    cash_in = ZERO
    cash_out = ZERO
    for t in rows:
        if classify_wallet(t) != WalletId.cash:
            continue
        contribution = signed_amount(t)
        if contribution > 0:
            cash_in += contribution
        else:
            cash_out -= contribution

    net_sales = total_sales - total_cost
    return {
        "start": start,
        "end": end,
        "sales_count": len(sales),
        "total_sales": total_sales,
        "total_cost": total_cost,
        "net_sales": net_sales,
        "expenses_count": len(expenses),
        "total_expenses": total_expenses,
        "cash_in": cash_in,
        "cash_out": cash_out,
        "theoretical_cash": cash_in - cash_out,
        "net_cash": net_sales - total_expenses,
    }


def list_transfers(db: Session, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Transfers in [start, end), newest first, legs grouped by transfer id."""
    rows = ledger_store.load_transactions(db, start, end)
    groups: "OrderedDict[str, List[Any]]" = OrderedDict()
    for t in rows:
        if not t.transfer_id and classify_kind(t) != TransactionKind.transfer:
            continue
        groups.setdefault(t.transfer_id or t.id, []).append(t)

    entries = []
    for legs in groups.values():
        debit = next((t for t in legs if t.type == TransactionType.expense), None)
        credit = next((t for t in legs if t.type == TransactionType.revenue), None)
        first = debit or credit
        entries.append({
            "transfer_id": legs[0].transfer_id,
            "created_at": first.created_at,
            "amount": Decimal(first.amount),
            "from_wallet": classify_wallet(debit).value if debit else None,
            "to_wallet": classify_wallet(credit).value if credit else None,
            "description": first.description,
            "legs": [
                {"id": t.id, "wallet": t.wallet, "type": t.type.value, "amount": Decimal(t.amount)}
                for t in legs
            ],
        })

    return sorted(entries, key=lambda e: e["created_at"], reverse=True)
