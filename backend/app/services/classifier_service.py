"""
Service for mapping ledger rows to wallets and kinds.

Rows written by this application carry an explicit wallet and kind. Rows
imported from the old cash screens may not, so the keyword heuristics below
fill the gap. They run in the balance path only when a field is missing;
``app.backfill`` uses them to fix such rows permanently.
"""

from typing import Any, Optional

from app.models.transaction import TransactionKind, TransactionType
from app.services.wallet_registry import WalletId, find_wallet

CASH_METHOD_TERMS = ("espèces", "especes", "cash")
CASH_SOURCE_TERMS = ("caisse", "cash")
CARD_TERMS = ("carte", "card")
SAFE_TERMS = ("coffre", "safe")

OPENING_TERMS = ("ouverture", "opening", "fond de caisse")
CLOSURE_TERMS = ("clôture", "cloture", "closure")
TRANSFER_TERMS = ("transfert", "transfer")


def _text(value: Optional[str]) -> str:
    return (value or "").lower()


def _contains(text: str, terms) -> bool:
    return any(term in text for term in terms)


def classify_wallet(txn: Any) -> WalletId:
    """
    Return the wallet a row belongs to.

    1. An explicit, known ``wallet`` wins.
    2. Otherwise keywords in method/source/description decide.
    3. Anything left over is cash.
    """
    explicit = find_wallet(getattr(txn, "wallet", None))
    if explicit:
        return explicit

    method = _text(getattr(txn, "method", None))
    source = _text(getattr(txn, "source", None))
    description = _text(getattr(txn, "description", None))

    if _contains(method, CASH_METHOD_TERMS) or _contains(source, CASH_SOURCE_TERMS):
        return WalletId.cash

    if _contains(method, CARD_TERMS) or _contains(source, CARD_TERMS) or _contains(description, CARD_TERMS):
        if "postal" in source or "postal" in description:
            return WalletId.postal_card
        if "banker" in source or "banker" in description:
            return WalletId.banker_card
        return WalletId.bank

    if _contains(source, SAFE_TERMS) or _contains(description, SAFE_TERMS):
        return WalletId.safe

    return WalletId.cash


def classify_kind(txn: Any) -> TransactionKind:
    """Return the row kind, inferring it from free text for legacy rows."""
    if getattr(txn, "kind", None):
        return TransactionKind(txn.kind)

    if getattr(txn, "type", None) == TransactionType.closure:
        return TransactionKind.closure

    text = _text(getattr(txn, "source", None)) + " " + _text(getattr(txn, "description", None))

    if getattr(txn, "is_internal", False):
        if _contains(text, OPENING_TERMS):
            return TransactionKind.opening_fund
        if _contains(text, CLOSURE_TERMS):
            return TransactionKind.closure
        if _contains(text, TRANSFER_TERMS):
            return TransactionKind.transfer
        return TransactionKind.adjustment

    # Transfers written before is_internal existed
    if _contains(text, TRANSFER_TERMS):
        return TransactionKind.transfer
    if getattr(txn, "type", None) == TransactionType.revenue:
        return TransactionKind.sale
    return TransactionKind.expense


def is_opening_fund(txn: Any) -> bool:
    if getattr(txn, "kind", None):
        return txn.kind == TransactionKind.opening_fund
    return bool(getattr(txn, "is_internal", False)) and classify_kind(txn) == TransactionKind.opening_fund


def is_closure(txn: Any) -> bool:
    if getattr(txn, "kind", None):
        return txn.kind == TransactionKind.closure
    return bool(getattr(txn, "is_internal", False)) and classify_kind(txn) == TransactionKind.closure
