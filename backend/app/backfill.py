"""
Backfill script for legacy ledger rows.

Rows written by the old cash screens may lack a wallet or a kind. This
script stores the classifier's answer on each such row, then rebuilds the
balance snapshots so the hot path never needs the heuristics again.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import SessionLocal, init_db
from app.models import INTERNAL_KINDS, Transaction
from app.services import ledger_store
from app.services.classifier_service import classify_kind, classify_wallet
from app.services.wallet_registry import find_wallet

logger = logging.getLogger(__name__)


def backfill_transactions(db: Session) -> int:
    """Fill missing wallet/kind values. Returns the number of rows touched."""
    legacy = db.query(Transaction).filter(
        or_(Transaction.wallet.is_(None), Transaction.kind.is_(None))
    ).all()
    # Labels such as "Caisse" are known but not canonical
    labelled = [
        t for t in db.query(Transaction).filter(Transaction.wallet.isnot(None)).all()
        if find_wallet(t.wallet) and find_wallet(t.wallet).value != t.wallet
    ]

    touched = {}
    for txn in legacy + labelled:
        txn.wallet = classify_wallet(txn).value
        if txn.kind is None:
            txn.kind = classify_kind(txn)
            # Transfers written before the flag existed
            txn.is_internal = txn.is_internal or txn.kind in INTERNAL_KINDS
        touched[txn.id] = txn

    ledger_store.rebuild_snapshots(db, commit=False)
    db.commit()
    return len(touched)


def run_backfill():
    """Backfill the configured database."""
    init_db()
    db = SessionLocal()

    try:
        count = backfill_transactions(db)
        print(f"Backfilled {count} legacy transactions")
    except Exception as e:
        logger.exception("Backfill failed")
        print(f"Error backfilling transactions: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_backfill()
