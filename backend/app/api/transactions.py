"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from app.dependencies import get_db
from app.models.transaction import Transaction, TransactionKind, TransactionType
from app.schemas.transaction import (
    SaleCreate,
    ExpenseCreate,
    TransactionResponse,
    TransactionUpdate,
    TransactionListResponse
)
from app.services import cash_service, ledger_store
from app.services.wallet_registry import WalletId

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    wallet: Optional[WalletId] = None,
    type: Optional[TransactionType] = None,
    kind: Optional[TransactionKind] = None,
    is_internal: Optional[bool] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List transactions with filtering and pagination"""
    query = ledger_store.query_transactions(
        db,
        start=start,
        end=end,
        wallet=wallet,
        txn_type=type,
        kind=kind,
        is_internal=is_internal,
        search=search
    )

    total = query.count()

    query = query.order_by(Transaction.created_at.desc())
    query = query.offset((page - 1) * per_page).limit(per_page)

    transactions = query.all()
    pages = (total + per_page - 1) // per_page

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db)
):
    """Record a sale or a paid repair ticket"""
    transaction = cash_service.record_sale(
        db,
        amount=sale.amount,
        wallet=sale.wallet,
        cost_total=sale.cost_total,
        method=sale.method,
        source=sale.source,
        description=sale.description,
        user_id=sale.user_id
    )
    return TransactionResponse.model_validate(transaction)


@router.post("/expense", response_model=TransactionResponse, status_code=201)
def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Record an operating expense"""
    transaction = cash_service.record_expense(
        db,
        amount=expense.amount,
        wallet=expense.wallet,
        description=expense.description,
        method=expense.method,
        source=expense.source,
        user_id=expense.user_id
    )
    return TransactionResponse.model_validate(transaction)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db)
):
    """Get a single transaction"""
    return TransactionResponse.model_validate(ledger_store.get_transaction(db, transaction_id))


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    db: Session = Depends(get_db)
):
    """Edit amount, cost, text or timestamp of a transaction"""
    transaction = ledger_store.get_transaction(db, transaction_id)
    update_data = update.model_dump(exclude_unset=True)
    transaction = ledger_store.update_transaction(db, transaction, update_data)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db)
):
    """Permanently delete a transaction"""
    transaction = ledger_store.get_transaction(db, transaction_id)
    ledger_store.delete_transaction(db, transaction)
    return {"deleted": True}
