"""Service for cash alerts and transfer suggestions."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from app.config import Settings, settings as default_settings
from app.schemas.cash import (
    CashAlert,
    Priority,
    Severity,
    SuggestedAction,
    SuggestedTransfer,
    TransferSuggestion,
)
from app.services.daily_state_service import DailyState
from app.services.wallet_registry import WalletId, get_wallet, list_wallets, physical_wallets

ZERO = Decimal("0")

SEVERITY_RANK = {
    Severity.critical: 4,
    Severity.error: 3,
    Severity.warning: 2,
    Severity.info: 1,
}

PRIORITY_RANK = {
    Priority.critical: 4,
    Priority.high: 3,
    Priority.medium: 2,
    Priority.low: 1,
}


def evaluate(
    balances: Dict[WalletId, Decimal],
    daily_state: DailyState,
    now: datetime,
    rules: Optional[Settings] = None,
    transfers_today: int = 0
) -> List[CashAlert]:
    """
    Apply the cash threshold rules to current balances and the day's state.
    Returns alerts, most severe first. Nothing is executed here.
    """
    rules = rules or default_settings
    currency = rules.currency
    alerts: List[CashAlert] = []

    cash = balances.get(WalletId.cash, ZERO)
    opening_amount = daily_state.opening_amount if daily_state.opening_amount is not None else rules.opening_fund_amount

    # Check 1: Too much cash in the drawer
    if cash > opening_amount + rules.auto_transfer_threshold:
        excess = cash - opening_amount
        alerts.append(CashAlert(
            code="high_cash",
            severity=Severity.warning,
            message=f"High cash level: {cash:.2f} {currency}. Move the {excess:.2f} {currency} excess to the safe.",
            wallet=WalletId.cash,
            action=SuggestedAction.transfer_to_safe,
            transfer=SuggestedTransfer(from_wallet=WalletId.cash, to_wallet=WalletId.safe, amount=excess),
        ))

    # Check 2: Not enough cash to operate
    if cash < rules.min_operating_amount:
        alerts.append(CashAlert(
            code="low_cash",
            severity=Severity.error,
            message=f"Insufficient cash: {cash:.2f} {currency} < {rules.min_operating_amount:.2f} {currency} required.",
            wallet=WalletId.cash,
            action=SuggestedAction.add_funds,
        ))

    # Check 3: Day not opened
    if not daily_state.is_opened:
        alerts.append(CashAlert(
            code="opening_pending",
            severity=Severity.info,
            message="Daily opening not done yet. Choose the opening fund amount.",
            wallet=WalletId.cash,
            action=SuggestedAction.daily_opening,
        ))

    # Check 4: Closure hour passed without a closure
    if now.hour >= rules.closure_hour and not daily_state.is_closed:
        alerts.append(CashAlert(
            code="closure_pending",
            severity=Severity.warning,
            message=f"Daily closure pending. {opening_amount:.2f} {currency} will be kept in the drawer.",
            wallet=WalletId.cash,
            action=SuggestedAction.daily_closure,
        ))

    # Check 5: Too much physical money in one place
    for wallet in physical_wallets():
        balance = balances.get(wallet.id, ZERO)
        if balance > rules.risk_high:
            alerts.append(CashAlert(
                code="security_risk",
                severity=Severity.critical,
                message=f"Security risk: {balance:.2f} {currency} held in {wallet.name}.",
                wallet=wallet.id,
                action=SuggestedAction.secure_transfer,
                transfer=SuggestedTransfer(
                    from_wallet=wallet.id,
                    to_wallet=wallet.transfer_excess_to,
                    amount=balance - rules.risk_medium,
                ),
            ))

    if transfers_today > rules.max_daily_transfers * 0.8:
        alerts.append(CashAlert(
            code="transfer_limit",
            severity=Severity.info,
            message=f"Daily transfers: {transfers_today}/{rules.max_daily_transfers}.",
        ))

    return sorted(alerts, key=lambda a: SEVERITY_RANK[a.severity], reverse=True)


def low_balance_alerts(
    balances: Dict[WalletId, Decimal],
    rules: Optional[Settings] = None
) -> List[CashAlert]:
    """Warn for every wallet under its alert threshold."""
    rules = rules or default_settings
    alerts = []
    for wallet in list_wallets():
        balance = balances.get(wallet.id, ZERO)
        if balance < wallet.alert_threshold:
            alerts.append(CashAlert(
                code="low_balance",
                severity=Severity.warning,
                message=f"{wallet.name}: low balance ({balance:.2f} {rules.currency}).",
                wallet=wallet.id,
            ))
    return alerts


def suggest_transfers(
    balances: Dict[WalletId, Decimal],
    rules: Optional[Settings] = None
) -> List[TransferSuggestion]:
    """Suggest moves that bring wallets back inside their limits."""
    rules = rules or default_settings
    currency = rules.currency
    suggestions: List[TransferSuggestion] = []

    for wallet in list_wallets():
        balance = balances.get(wallet.id, ZERO)

        if wallet.max_balance is not None and balance > wallet.max_balance and wallet.transfer_excess_to:
            target = wallet.optimal_balance if wallet.optimal_balance is not None else wallet.max_balance
            excess = balance - target
            suggestions.append(TransferSuggestion(
                type="excess",
                priority=Priority.high,
                from_wallet=wallet.id,
                to_wallet=wallet.transfer_excess_to,
                amount=excess,
                reason=f"Excess of {excess:.2f} {currency} in {wallet.name}; move it to {get_wallet(wallet.transfer_excess_to).name}.",
            ))

        if balance < wallet.min_balance and wallet.replenish_from:
            target = wallet.optimal_balance if wallet.optimal_balance is not None else wallet.min_balance
            needed = target - balance
            if balances.get(wallet.replenish_from, ZERO) >= needed:
                suggestions.append(TransferSuggestion(
                    type="replenish",
                    priority=Priority.medium,
                    from_wallet=wallet.replenish_from,
                    to_wallet=wallet.id,
                    amount=needed,
                    reason=f"Low balance in {wallet.name}: {balance:.2f} {currency}; top up from {get_wallet(wallet.replenish_from).name}.",
                ))

        if wallet.is_physical and balance > rules.risk_high:
            suggestions.append(TransferSuggestion(
                type="security",
                priority=Priority.critical,
                from_wallet=wallet.id,
                to_wallet=wallet.transfer_excess_to,
                amount=balance - rules.risk_medium,
                reason=f"Security risk: {balance:.2f} {currency} in {wallet.name}.",
            ))

    return sorted(suggestions, key=lambda s: PRIORITY_RANK[s.priority], reverse=True)
