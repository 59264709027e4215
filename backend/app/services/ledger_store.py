"""
Store accessor for ledger rows and wallet balance snapshots.

Every write goes through here so that the snapshot table moves in the same
commit as the rows it summarises.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.exceptions import NotFoundError
from app.models.transaction import Transaction, TransactionKind, TransactionType
from app.models.wallet_balance import WalletBalance
from app.services.balance_service import ZERO, compute_balances, signed_amount
from app.services.classifier_service import classify_wallet
from app.services.wallet_registry import WalletId, find_wallet, get_wallet, list_wallets

logger = logging.getLogger(__name__)


def query_transactions(
    db: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    wallet: Optional[WalletId] = None,
    txn_type: Optional[TransactionType] = None,
    kind: Optional[TransactionKind] = None,
    is_internal: Optional[bool] = None,
    search: Optional[str] = None
) -> Query:
    """
    Build a filtered query. ``end`` is exclusive.
    The wallet filter also matches legacy display labels such as "Caisse";
    rows with no wallet at all only match after `app.backfill` has run.
    """
    query = db.query(Transaction)

    if start:
        query = query.filter(Transaction.created_at >= start)
    if end:
        query = query.filter(Transaction.created_at < end)
    if wallet:
        config = get_wallet(WalletId(wallet))
        query = query.filter(func.lower(Transaction.wallet).in_([config.id.value, config.name.lower()]))
    if txn_type:
        query = query.filter(Transaction.type == txn_type)
    if kind:
        query = query.filter(Transaction.kind == kind)
    if is_internal is not None:
        query = query.filter(Transaction.is_internal == is_internal)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Transaction.description.ilike(search_term),
                Transaction.source.ilike(search_term)
            )
        )

    return query


def load_transactions(
    db: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[Transaction]:
    """Load rows oldest first, optionally bounded to [start, end)."""
    return query_transactions(db, start=start, end=end).order_by(Transaction.created_at.asc()).all()


def get_transaction(db: Session, transaction_id: str) -> Transaction:
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundError("Transaction not found")
    return transaction


def _snapshot_rows(db: Session, lock: bool = False) -> Dict[WalletId, WalletBalance]:
    """
    Return the snapshot row of every wallet, seeding missing rows from the
    full fold. Seeded rows are added to the session but not committed.
    """
    query = db.query(WalletBalance)
    if lock:
        query = query.with_for_update()
    rows = {}
    for row in query.all():
        wallet = find_wallet(row.wallet)
        if wallet:
            rows[wallet] = row

    missing = [w.id for w in list_wallets() if w.id not in rows]
    if missing:
        _flush(db, "snapshot seeding")
        balances = compute_balances(db.query(Transaction).all())
        for wallet in missing:
            row = WalletBalance(wallet=wallet.value, balance=balances[wallet])
            db.add(row)
            rows[wallet] = row
        logger.info("Seeded balance snapshots for %s", ", ".join(w.value for w in missing))
    return rows


def get_balances(db: Session, lock: bool = False) -> Dict[WalletId, Decimal]:
    """Current balance of every wallet, read from the snapshot table."""
    rows = _snapshot_rows(db, lock=lock)
    if db.new:
        db.commit()
    return {wallet: Decimal(row.balance) for wallet, row in rows.items()}


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ledger write failed during %s", action)
        raise


def _flush(db: Session, action: str) -> None:
    try:
        db.flush()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ledger flush failed during %s", action)
        raise


def write_transactions(
    db: Session,
    rows: Iterable[Transaction],
    remove: Iterable[Transaction] = (),
    action: str = "write"
) -> List[Transaction]:
    """
    Insert ``rows`` and delete ``remove`` in a single commit, moving the
    balance snapshots by each row's contribution.
    """
    rows = list(rows)
    remove = list(remove)
    snapshots = _snapshot_rows(db, lock=True)

    for txn in remove:
        wallet = classify_wallet(txn)
        snapshots[wallet].balance = Decimal(snapshots[wallet].balance) - signed_amount(txn)
        db.delete(txn)

    for txn in rows:
        wallet = classify_wallet(txn)
        snapshots[wallet].balance = Decimal(snapshots[wallet].balance) + signed_amount(txn)
        db.add(txn)

    _commit(db, action)
    for txn in rows:
        db.refresh(txn)

    logger.info("%s: %d row(s) written, %d removed", action, len(rows), len(remove))
    return rows


def rebuild_snapshots(
    db: Session,
    commit: bool = True,
    action: str = "snapshot rebuild"
) -> Dict[WalletId, Decimal]:
    """Recompute every snapshot from the full history. Pending edits are flushed first."""
    _flush(db, action)
    balances = compute_balances(db.query(Transaction).all())
    snapshots = _snapshot_rows(db)
    for wallet, row in snapshots.items():
        row.balance = balances[wallet]
    if commit:
        _commit(db, action)
    return balances


def update_transaction(db: Session, transaction: Transaction, changes: dict) -> Transaction:
    """Edit a row in place and resync the snapshots."""
    for field, value in changes.items():
        setattr(transaction, field, value)
    rebuild_snapshots(db, commit=False, action="transaction update")
    _commit(db, "transaction update")
    db.refresh(transaction)
    logger.info("Transaction %s updated: %s", transaction.id, ", ".join(changes))
    return transaction


def delete_transaction(db: Session, transaction: Transaction) -> None:
    """Hard delete a row and resync the snapshots."""
    db.delete(transaction)
    rebuild_snapshots(db, commit=False, action="transaction delete")
    _commit(db, "transaction delete")
    logger.info("Transaction %s deleted", transaction.id)


def audit_snapshots(db: Session) -> List[dict]:
    """Compare stored snapshots with a fresh fold of the whole history."""
    computed = compute_balances(db.query(Transaction).all())
    stored = get_balances(db)
    return [
        {
            "wallet": wallet,
            "snapshot": stored.get(wallet, ZERO),
            "computed": computed[wallet],
            "difference": stored.get(wallet, ZERO) - computed[wallet],
        }
        for wallet in computed
    ]
