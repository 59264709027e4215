"""
Wallet API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.schemas.wallet import (
    WalletResponse,
    WalletList,
    WalletHistoryEntry,
    WalletAuditEntry,
    WalletAuditResponse,
)
from app.services import ledger_store
from app.services.balance_service import ZERO, running_balances, total_balance
from app.services.wallet_registry import WalletConfig, find_wallet, get_wallet, list_wallets

router = APIRouter(prefix="/wallets", tags=["wallets"])


def _wallet_response(config: WalletConfig, balance) -> WalletResponse:
    return WalletResponse(
        id=config.id,
        name=config.name,
        is_physical=config.is_physical,
        balance=balance,
        min_balance=config.min_balance,
        max_balance=config.max_balance,
        optimal_balance=config.optimal_balance,
        transfer_excess_to=config.transfer_excess_to,
        replenish_from=config.replenish_from,
        alert_threshold=config.alert_threshold,
    )


@router.get("", response_model=WalletList)
def list_wallet_balances(db: Session = Depends(get_db)):
    """List every wallet with its current balance."""
    balances = ledger_store.get_balances(db)
    return WalletList(
        items=[_wallet_response(w, balances.get(w.id, ZERO)) for w in list_wallets()],
        total=total_balance(balances)
    )


@router.get("/audit", response_model=WalletAuditResponse)
def audit_wallets(db: Session = Depends(get_db)):
    """Compare stored balances with a full recomputation."""
    entries = [WalletAuditEntry(**entry) for entry in ledger_store.audit_snapshots(db)]
    return WalletAuditResponse(
        consistent=all(e.difference == 0 for e in entries),
        wallets=entries
    )


@router.post("/rebuild", response_model=WalletList)
def rebuild_wallets(db: Session = Depends(get_db)):
    """Recompute stored balances from the full history."""
    balances = ledger_store.rebuild_snapshots(db)
    return WalletList(
        items=[_wallet_response(w, balances.get(w.id, ZERO)) for w in list_wallets()],
        total=total_balance(balances)
    )


@router.get("/{wallet_id}", response_model=WalletResponse)
def get_wallet_balance(wallet_id: str, db: Session = Depends(get_db)):
    """Get one wallet with its balance."""
    wallet = find_wallet(wallet_id)
    if not wallet:
        raise HTTPException(status_code=404, detail="Wallet not found")
    balances = ledger_store.get_balances(db)
    return _wallet_response(get_wallet(wallet), balances[wallet])


@router.get("/{wallet_id}/history", response_model=list[WalletHistoryEntry])
def get_wallet_history(wallet_id: str, db: Session = Depends(get_db)):
    """Rows of one wallet with the running balance after each."""
    wallet = find_wallet(wallet_id)
    if not wallet:
        raise HTTPException(status_code=404, detail="Wallet not found")

    history = running_balances(ledger_store.load_transactions(db), wallet)
    return [
        WalletHistoryEntry(
            transaction_id=t.id,
            created_at=t.created_at,
            type=t.type.value,
            kind=t.kind.value if t.kind else None,
            amount=t.amount,
            description=t.description,
            balance_after=balance
        )
        for t, _, balance in reversed(history)
    ]
