"""API endpoints for cash operations."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime

from app.config import Settings
from app.dependencies import get_db, get_rules
from app.schemas.cash import (
    AdjustRequest,
    AutoRequest,
    CashAlert,
    CashStatusResponse,
    CloseRequest,
    DailyStateResponse,
    OpenRequest,
    OperationResponse,
    ReconcileRequest,
    TransferEntry,
    TransferRequest,
    TransferSuggestion,
)
from app.schemas.transaction import TransactionResponse
from app.services import alerts_service, cash_service, ledger_store, report_service
from app.services.cash_service import OperationResult
from app.services.daily_state_service import day_bounds
from app.services.wallet_registry import WalletId

router = APIRouter(prefix="/cash", tags=["cash"])


def _operation_response(result: OperationResult) -> OperationResponse:
    return OperationResponse(
        operation=result.operation,
        wallet=result.wallet,
        rows=[TransactionResponse.model_validate(t) for t in result.rows],
        balance_before=result.balance_before,
        balance_after=result.balance_after,
        transferred=result.transferred,
        difference=result.difference,
        deficit=result.deficit,
        message=result.message,
    )


@router.get("/status", response_model=CashStatusResponse)
def get_status(
    wallet: WalletId = Query(WalletId.cash),
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Balances, today's opening/closure state and current alerts."""
    status = cash_service.cash_status(db, wallet=wallet, rules=rules)
    state = status["daily_state"]
    return CashStatusResponse(
        balances=status["balances"],
        total=status["total"],
        daily_state=DailyStateResponse(
            day=state.day,
            wallet=wallet,
            is_opened=state.is_opened,
            is_closed=state.is_closed,
            opening_amount=state.opening_amount,
            opening_fund_id=state.opening_fund.id if state.opening_fund else None,
            closure_record_id=state.closure_record.id if state.closure_record else None,
        ),
        alerts=status["alerts"],
        auto_mode=rules.auto_mode,
    )


@router.get("/alerts", response_model=List[CashAlert])
def get_alerts(db: Session = Depends(get_db), rules: Settings = Depends(get_rules)):
    """Current cash alerts, most severe first."""
    return cash_service.cash_status(db, rules=rules)["alerts"]


@router.get("/suggestions", response_model=List[TransferSuggestion])
def get_suggestions(db: Session = Depends(get_db), rules: Settings = Depends(get_rules)):
    """Transfers that would bring wallets back inside their limits."""
    return alerts_service.suggest_transfers(ledger_store.get_balances(db), rules)


@router.get("/transfers", response_model=List[TransferEntry])
def get_transfers(
    day: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Transfers of one day (today by default)."""
    start, end = day_bounds(day or datetime.now().date())
    return report_service.list_transfers(db, start, end)


@router.post("/open", response_model=OperationResponse, status_code=201)
def open_day(
    request: OpenRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Open the business day."""
    result = cash_service.open_day(
        db,
        wallet=request.wallet,
        amount=request.amount,
        mode=request.mode,
        replenish_from=request.replenish_from,
        overwrite=request.overwrite,
        user_id=request.user_id,
        rules=rules,
    )
    return _operation_response(result)


@router.post("/close", response_model=OperationResponse, status_code=201)
def close_day(
    request: CloseRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Close the business day and sweep the excess."""
    result = cash_service.close_day(
        db,
        wallet=request.wallet,
        keep_amount=request.keep_amount,
        user_id=request.user_id,
        rules=rules,
    )
    return _operation_response(result)


@router.post("/transfer", response_model=OperationResponse, status_code=201)
def transfer(
    request: TransferRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Move money between two wallets."""
    result = cash_service.transfer(
        db,
        request.from_wallet,
        request.to_wallet,
        request.amount,
        reason=request.reason,
        user_id=request.user_id,
        rules=rules,
    )
    return _operation_response(result)


@router.post("/reconcile", response_model=OperationResponse)
def reconcile(
    request: ReconcileRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Compare a physical count with the computed balance."""
    result = cash_service.reconcile(
        db,
        request.wallet,
        request.physical_count,
        user_id=request.user_id,
        rules=rules,
    )
    return _operation_response(result)


@router.post("/adjust", response_model=OperationResponse)
def adjust(
    request: AdjustRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Manually set a wallet balance."""
    result = cash_service.adjust_balance(
        db,
        request.wallet,
        request.new_balance,
        request.reason,
        user_id=request.user_id,
        rules=rules,
    )
    return _operation_response(result)


@router.post("/auto", response_model=List[OperationResponse])
def run_auto(
    request: AutoRequest,
    db: Session = Depends(get_db),
    rules: Settings = Depends(get_rules)
):
    """Execute the transfers suggested by critical alerts."""
    results = cash_service.run_auto_actions(
        db,
        auto_mode=request.auto_mode,
        user_id=request.user_id,
        rules=rules,
    )
    return [_operation_response(r) for r in results]
