"""
Service for cash operations: opening, closure, transfers, reconciliation.

All business validation lives here so every entry point enforces the same
rules. Each operation writes its rows in one commit through ``ledger_store``.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config import Settings, settings as default_settings
from app.exceptions import InsufficientFundsError, LedgerError, StateConflictError, ValidationError
from app.models.transaction import Transaction, TransactionKind, TransactionType
from app.schemas.cash import CashAlert, Severity
from app.services import ledger_store
from app.services.alerts_service import SEVERITY_RANK, evaluate, low_balance_alerts
from app.services.balance_service import ZERO, signed_amount, total_balance
from app.services.classifier_service import classify_kind, classify_wallet
from app.services.daily_state_service import DailyState, day_bounds, detect_daily_state
from app.services.wallet_registry import WalletId, find_wallet, get_wallet

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class OperationResult:
    operation: str
    wallet: Optional[WalletId] = None
    rows: List[Transaction] = field(default_factory=list)
    balance_before: Optional[Decimal] = None
    balance_after: Optional[Decimal] = None
    transferred: Decimal = ZERO
    difference: Decimal = ZERO
    deficit: Decimal = ZERO
    message: str = ""


def _money(value: Any, label: str = "Amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{label} is not a valid number")
    if not amount.is_finite():
        raise ValidationError(f"{label} is not a valid number")
    return amount.quantize(CENT)


def _require_wallet(value: Any) -> WalletId:
    wallet = find_wallet(value)
    if wallet is None:
        raise ValidationError(f"Unknown wallet: {value}")
    return wallet


def _fmt(amount: Decimal, rules: Settings) -> str:
    return f"{amount:.2f} {rules.currency}"


def get_daily_state(db: Session, wallet: WalletId, day: date) -> DailyState:
    start, end = day_bounds(day)
    return detect_daily_state(ledger_store.load_transactions(db, start, end), day, wallet)


def count_transfers(db: Session, day: date) -> int:
    """Number of transfers made on ``day`` (one per debit leg)."""
    start, end = day_bounds(day)
    return sum(
        1 for t in ledger_store.load_transactions(db, start, end)
        if t.type == TransactionType.expense and classify_kind(t) == TransactionKind.transfer
    )


def _transfer_legs(
    from_wallet: WalletId,
    to_wallet: WalletId,
    amount: Decimal,
    reason: str,
    user_id: Optional[str],
    created_at: datetime
) -> List[Transaction]:
    """Debit on ``from_wallet`` and credit on ``to_wallet`` sharing a transfer id."""
    transfer_id = str(uuid.uuid4())
    suffix = f" - {reason}" if reason else ""
    debit = Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.expense,
        kind=TransactionKind.transfer,
        amount=amount,
        wallet=from_wallet.value,
        source="transfer",
        description=f"Transfer to {get_wallet(to_wallet).name}{suffix}",
        is_internal=True,
        user_id=user_id,
        transfer_id=transfer_id,
        created_at=created_at,
    )
    credit = Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.revenue,
        kind=TransactionKind.transfer,
        amount=amount,
        wallet=to_wallet.value,
        source="transfer",
        description=f"Transfer from {get_wallet(from_wallet).name}{suffix}",
        is_internal=True,
        user_id=user_id,
        transfer_id=transfer_id,
        created_at=created_at,
    )
    return [debit, credit]


def _check_transfer(
    balances: Dict[WalletId, Decimal],
    from_wallet: WalletId,
    to_wallet: WalletId,
    amount: Decimal,
    rules: Settings
) -> None:
    if amount <= 0:
        raise ValidationError("Transfer amount must be positive")
    if amount < rules.min_transfer_amount:
        raise ValidationError(f"Minimum transfer amount is {_fmt(rules.min_transfer_amount, rules)}")
    if from_wallet == to_wallet:
        raise ValidationError("Source and destination wallets must differ")
    available = balances.get(from_wallet, ZERO)
    if amount > available:
        raise InsufficientFundsError(
            f"Insufficient balance in {get_wallet(from_wallet).name}: {_fmt(available, rules)}"
        )


def transfer(
    db: Session,
    from_wallet: Any,
    to_wallet: Any,
    amount: Any,
    reason: str = "",
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> OperationResult:
    """Move money between two wallets."""
    rules = rules or default_settings
    now = now or datetime.now()
    source = _require_wallet(from_wallet)
    destination = _require_wallet(to_wallet)
    amount = _money(amount)

    balances = ledger_store.get_balances(db, lock=True)
    try:
        _check_transfer(balances, source, destination, amount, rules)
    except LedgerError as e:
        logger.warning("Transfer %s -> %s refused: %s", source.value, destination.value, e.message)
        raise

    rows = _transfer_legs(source, destination, amount, (reason or "").strip(), user_id, now)
    ledger_store.write_transactions(db, rows, action="transfer")

    before = balances[source]
    return OperationResult(
        operation="transfer",
        wallet=source,
        rows=rows,
        balance_before=before,
        balance_after=before - amount,
        transferred=amount,
        message=f"Transferred {_fmt(amount, rules)}: {get_wallet(source).name} -> {get_wallet(destination).name}",
    )


def open_day(
    db: Session,
    wallet: Any = WalletId.cash,
    amount: Any = None,
    mode: str = "add",
    replenish_from: Any = None,
    overwrite: bool = False,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> OperationResult:
    """
    Open the business day for a wallet.

    ``add`` puts ``amount`` of new money in the wallet, or draws it from
    ``replenish_from`` when given. ``set`` brings the wallet to exactly
    ``amount`` with a single signed row.
    """
    rules = rules or default_settings
    now = now or datetime.now()
    wallet = _require_wallet(wallet)
    amount = _money(rules.opening_fund_amount if amount is None else amount)
    if amount <= 0:
        raise ValidationError("Opening amount must be positive")
    if mode not in ("add", "set"):
        raise ValidationError(f"Unknown opening mode: {mode}")

    config = get_wallet(wallet)
    state = get_daily_state(db, wallet, now.date())
    if state.is_closed:
        raise StateConflictError(f"{config.name} is already closed for {now.date().isoformat()}")

    remove: List[Transaction] = []
    if state.is_opened:
        if not overwrite:
            raise StateConflictError(f"{config.name} is already opened for {now.date().isoformat()}")
        previous = state.opening_fund
        if previous.transfer_id:
            remove = db.query(Transaction).filter(Transaction.transfer_id == previous.transfer_id).all()
        else:
            remove = [previous]
        logger.info("Replacing opening %s of %s", previous.id, wallet.value)

    balances = dict(ledger_store.get_balances(db, lock=True))
    for txn in remove:
        balances[classify_wallet(txn)] -= signed_amount(txn)
    current = balances[wallet]
    label = now.strftime("%d/%m/%Y")

    if mode == "set":
        delta = amount - current
        rows = [Transaction(
            id=str(uuid.uuid4()),
            type=TransactionType.revenue if delta >= 0 else TransactionType.expense,
            kind=TransactionKind.opening_fund,
            amount=abs(delta),
            wallet=wallet.value,
            source="opening",
            description=f"Opening {config.name} - {label} - exact fund {_fmt(amount, rules)} (adjustment {delta:+.2f})",
            is_internal=True,
            user_id=user_id,
            declared_balance=amount,
            created_at=now,
        )]
        after = amount
    elif replenish_from is not None:
        backup = _require_wallet(replenish_from)
        if backup == wallet:
            raise ValidationError("A wallet cannot be replenished from itself")
        if balances[backup] < amount:
            logger.warning("Opening of %s refused: %s holds %s", wallet.value, backup.value, balances[backup])
            raise InsufficientFundsError(
                f"Insufficient funds for opening. Required: {_fmt(amount, rules)}, "
                f"available in {get_wallet(backup).name}: {_fmt(balances[backup], rules)}"
            )
        rows = _transfer_legs(backup, wallet, amount, f"opening {label}", user_id, now)
        credit = rows[1]
        credit.kind = TransactionKind.opening_fund
        credit.source = "opening"
        credit.declared_balance = current + amount
        after = current + amount
    else:
        rows = [Transaction(
            id=str(uuid.uuid4()),
            type=TransactionType.revenue,
            kind=TransactionKind.opening_fund,
            amount=amount,
            wallet=wallet.value,
            source="opening",
            description=f"Opening {config.name} - {label} - fund {_fmt(amount, rules)}",
            is_internal=True,
            user_id=user_id,
            declared_balance=current + amount,
            created_at=now,
        )]
        after = current + amount

    ledger_store.write_transactions(db, rows, remove=remove, action="opening")

    if mode == "set":
        message = f"{config.name} set to exactly {_fmt(amount, rules)}"
    else:
        message = f"{config.name} opened with {_fmt(amount, rules)} added"
    return OperationResult(
        operation="open",
        wallet=wallet,
        rows=rows,
        balance_before=current,
        balance_after=after,
        transferred=amount if replenish_from is not None and mode == "add" else ZERO,
        message=message,
    )


def close_day(
    db: Session,
    wallet: Any = WalletId.cash,
    keep_amount: Any = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> OperationResult:
    """
    Close the business day: sweep the excess above ``keep_amount`` to the
    wallet's excess destination, then write the closure marker.
    """
    rules = rules or default_settings
    now = now or datetime.now()
    wallet = _require_wallet(wallet)
    config = get_wallet(wallet)

    state = get_daily_state(db, wallet, now.date())
    if state.is_closed:
        raise StateConflictError(f"{config.name} is already closed for {now.date().isoformat()}")

    if keep_amount is not None:
        keep = _money(keep_amount, "Kept amount")
    elif state.opening_amount is not None:
        keep = _money(state.opening_amount)
    else:
        keep = _money(rules.opening_fund_amount)
    if keep < 0:
        raise ValidationError("Kept amount cannot be negative")

    balances = ledger_store.get_balances(db, lock=True)
    balance = balances[wallet]
    excess = max(ZERO, balance - keep)
    deficit = max(ZERO, keep - balance)
    destination = config.transfer_excess_to or WalletId.safe

    rows: List[Transaction] = []
    transferred = ZERO
    if excess > 0 and excess >= rules.closure_min_transfer and destination != wallet:
        rows.extend(_transfer_legs(wallet, destination, excess, "daily closure", user_id, now))
        transferred = excess

    final = balance - transferred
    rows.append(Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.closure,
        kind=TransactionKind.closure,
        amount=max(final, ZERO),
        wallet=wallet.value,
        source="closure",
        description=f"Closure {config.name} - {now.strftime('%d/%m/%Y')} - kept {_fmt(final, rules)}",
        is_internal=True,
        user_id=user_id,
        declared_balance=final,
        created_at=now,
    ))
    ledger_store.write_transactions(db, rows, action="closure")

    if deficit > 0:
        logger.warning("%s closed with a deficit of %s", wallet.value, deficit)
        message = f"{config.name} closed. Deficit of {_fmt(deficit, rules)} against the {_fmt(keep, rules)} to keep"
    elif transferred > 0:
        message = f"{config.name} closed. {_fmt(transferred, rules)} moved to {get_wallet(destination).name}, {_fmt(final, rules)} kept"
    else:
        message = f"{config.name} closed. {_fmt(final, rules)} kept, no transfer needed"

    return OperationResult(
        operation="close",
        wallet=wallet,
        rows=rows,
        balance_before=balance,
        balance_after=final,
        transferred=transferred,
        deficit=deficit,
        message=message,
    )


def _adjustment(
    wallet: WalletId,
    difference: Decimal,
    source: str,
    description: str,
    user_id: Optional[str],
    now: datetime
) -> Transaction:
    return Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.revenue if difference > 0 else TransactionType.expense,
        kind=TransactionKind.adjustment,
        amount=abs(difference),
        wallet=wallet.value,
        source=source,
        description=description,
        is_internal=True,
        user_id=user_id,
        created_at=now,
    )


def reconcile(
    db: Session,
    wallet: Any,
    physical_count: Any,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> OperationResult:
    """Book the gap between a physical count and the computed balance."""
    rules = rules or default_settings
    now = now or datetime.now()
    wallet = _require_wallet(wallet)
    counted = _money(physical_count, "Physical count")
    if counted < 0:
        raise ValidationError("Physical count cannot be negative")

    theoretical = ledger_store.get_balances(db, lock=True)[wallet]
    difference = counted - theoretical

    if abs(difference) <= rules.reconciliation_tolerance:
        return OperationResult(
            operation="reconcile",
            wallet=wallet,
            balance_before=theoretical,
            balance_after=theoretical,
            difference=difference,
            message=f"Reconciled, difference {difference:+.2f} within tolerance",
        )

    row = _adjustment(
        wallet,
        difference,
        "reconciliation",
        f"Reconciliation adjustment - difference {difference:+.2f} "
        f"(theoretical {_fmt(theoretical, rules)}, counted {_fmt(counted, rules)})",
        user_id,
        now,
    )
    ledger_store.write_transactions(db, [row], action="reconciliation")
    logger.info("Reconciled %s with a %s difference", wallet.value, difference)

    return OperationResult(
        operation="reconcile",
        wallet=wallet,
        rows=[row],
        balance_before=theoretical,
        balance_after=counted,
        difference=difference,
        message=f"Adjustment booked: {difference:+.2f} {rules.currency}",
    )


def adjust_balance(
    db: Session,
    wallet: Any,
    new_balance: Any,
    reason: str,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> OperationResult:
    """Manually correct a wallet balance. A reason is mandatory."""
    rules = rules or default_settings
    now = now or datetime.now()
    wallet = _require_wallet(wallet)
    target = _money(new_balance, "New balance")
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required for a manual adjustment")

    current = ledger_store.get_balances(db, lock=True)[wallet]
    difference = target - current
    if abs(difference) < CENT:
        return OperationResult(
            operation="adjust",
            wallet=wallet,
            balance_before=current,
            balance_after=current,
            message="No change detected",
        )

    row = _adjustment(
        wallet,
        difference,
        "manual adjustment",
        f"Manual adjustment of {get_wallet(wallet).name}: {_fmt(current, rules)} -> {_fmt(target, rules)}. Reason: {reason}",
        user_id,
        now,
    )
    ledger_store.write_transactions(db, [row], action="manual adjustment")

    return OperationResult(
        operation="adjust",
        wallet=wallet,
        rows=[row],
        balance_before=current,
        balance_after=target,
        difference=difference,
        message=f"{get_wallet(wallet).name} adjusted by {difference:+.2f} {rules.currency}",
    )


def record_sale(
    db: Session,
    amount: Any,
    wallet: Any,
    cost_total: Any = None,
    method: Optional[str] = None,
    source: Optional[str] = None,
    description: Optional[str] = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Transaction:
    """Record a POS sale or a paid repair ticket."""
    wallet = _require_wallet(wallet)
    amount = _money(amount)
    if amount <= 0:
        raise ValidationError("Sale amount must be positive")
    cost = None
    if cost_total is not None:
        cost = _money(cost_total, "Cost")
        if cost < 0:
            raise ValidationError("Cost cannot be negative")

    row = Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.revenue,
        kind=TransactionKind.sale,
        amount=amount,
        cost_total=cost,
        wallet=wallet.value,
        source=source or "sale",
        description=description,
        method=method,
        is_internal=False,
        user_id=user_id,
        created_at=now or datetime.now(),
    )
    ledger_store.write_transactions(db, [row], action="sale")
    return row


def record_expense(
    db: Session,
    amount: Any,
    wallet: Any,
    description: str,
    method: Optional[str] = None,
    source: Optional[str] = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Transaction:
    """Record an operating expense paid from a wallet."""
    wallet = _require_wallet(wallet)
    amount = _money(amount)
    if amount <= 0:
        raise ValidationError("Expense amount must be positive")
    if not (description or "").strip():
        raise ValidationError("An expense needs a description")

    row = Transaction(
        id=str(uuid.uuid4()),
        type=TransactionType.expense,
        kind=TransactionKind.expense,
        amount=amount,
        wallet=wallet.value,
        source=source or "expense",
        description=description.strip(),
        method=method,
        is_internal=False,
        user_id=user_id,
        created_at=now or datetime.now(),
    )
    ledger_store.write_transactions(db, [row], action="expense")
    return row


def cash_status(
    db: Session,
    wallet: Any = WalletId.cash,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> Dict[str, Any]:
    """Balances, the day's state and every alert that applies now."""
    rules = rules or default_settings
    now = now or datetime.now()
    wallet = _require_wallet(wallet)

    balances = ledger_store.get_balances(db)
    state = get_daily_state(db, wallet, now.date())
    alerts: List[CashAlert] = evaluate(balances, state, now, rules, count_transfers(db, now.date()))
    # Cash is already covered by the operating-minimum rule
    alerts += [a for a in low_balance_alerts(balances, rules) if a.wallet != WalletId.cash]
    alerts.sort(key=lambda a: SEVERITY_RANK[a.severity], reverse=True)

    return {
        "balances": balances,
        "total": total_balance(balances),
        "wallet": wallet,
        "daily_state": state,
        "alerts": alerts,
    }


def run_auto_actions(
    db: Session,
    auto_mode: Optional[bool] = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rules: Optional[Settings] = None
) -> List[OperationResult]:
    """
    Execute the transfers suggested by critical alerts when auto mode is on.
    Alerts without a destination wallet stay advisory.
    """
    rules = rules or default_settings
    enabled = rules.auto_mode if auto_mode is None else auto_mode
    if not enabled:
        return []

    now = now or datetime.now()
    status = cash_status(db, now=now, rules=rules)
    results = []
    for alert in status["alerts"]:
        if alert.severity != Severity.critical or not alert.transfer or not alert.transfer.to_wallet:
            continue
        try:
            results.append(transfer(
                db,
                alert.transfer.from_wallet,
                alert.transfer.to_wallet,
                alert.transfer.amount,
                reason="automatic security transfer",
                user_id=user_id,
                now=now,
                rules=rules,
            ))
        except LedgerError as e:
            logger.warning("Automatic transfer for %s skipped: %s", alert.code, e.message)
    return results
