"""Tests for the legacy row backfill."""

from decimal import Decimal

from app.backfill import backfill_transactions
from app.models.transaction import TransactionKind, TransactionType
from app.services import ledger_store
from app.services.wallet_registry import WalletId


def test_backfill_legacy_rows(db_session, make_transaction):
    card = make_transaction(type=TransactionType.revenue, amount="40", wallet=None, method="Carte")
    opening = make_transaction(
        type=TransactionType.revenue, amount="30", wallet="Caisse",
        is_internal=True, source="ouverture", cost_total=Decimal("50"),
    )
    safe = make_transaction(type=TransactionType.revenue, amount="100", wallet=None, source="Coffre")
    modern = make_transaction(type=TransactionType.revenue, kind=TransactionKind.sale, amount="10", wallet="bank")

    count = backfill_transactions(db_session)

    assert count == 3
    assert (card.wallet, card.kind) == ("bank", TransactionKind.sale)
    assert (opening.wallet, opening.kind) == ("cash", TransactionKind.opening_fund)
    assert (safe.wallet, safe.kind) == ("safe", TransactionKind.sale)
    assert modern.wallet == "bank"

    balances = ledger_store.get_balances(db_session)
    assert balances[WalletId.cash] == Decimal("50")
    assert balances[WalletId.bank] == Decimal("50")
    assert balances[WalletId.safe] == Decimal("100")


def test_backfill_is_idempotent(db_session, make_transaction):
    make_transaction(type=TransactionType.expense, amount="5", wallet=None, method="Espèces")
    assert backfill_transactions(db_session) == 1
    assert backfill_transactions(db_session) == 0


def test_backfill_flags_old_transfers(db_session, make_transaction):
    txn = make_transaction(type=TransactionType.expense, amount="20", wallet="cash", description="Transfert vers coffre")
    backfill_transactions(db_session)
    assert txn.kind == TransactionKind.transfer
    assert txn.is_internal is True
