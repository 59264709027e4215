"""Pydantic schemas for cash operations, daily state and alerts."""

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.transaction import TransactionResponse
from app.services.wallet_registry import WalletId


class Severity(str, enum.Enum):
    """Alert severity enumeration."""
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class SuggestedAction(str, enum.Enum):
    transfer_to_safe = "transfer_to_safe"
    add_funds = "add_funds"
    daily_opening = "daily_opening"
    daily_closure = "daily_closure"
    secure_transfer = "secure_transfer"


class Priority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class SuggestedTransfer(BaseModel):
    from_wallet: WalletId
    to_wallet: Optional[WalletId] = None  # None: advisory only
    amount: Decimal


class CashAlert(BaseModel):
    code: str
    severity: Severity
    message: str
    wallet: Optional[WalletId] = None
    action: Optional[SuggestedAction] = None
    transfer: Optional[SuggestedTransfer] = None


class TransferSuggestion(BaseModel):
    type: str  # excess, replenish, security
    priority: Priority
    from_wallet: WalletId
    to_wallet: Optional[WalletId] = None
    amount: Decimal
    reason: str


class DailyStateResponse(BaseModel):
    day: date
    wallet: WalletId
    is_opened: bool
    is_closed: bool
    opening_amount: Optional[Decimal] = None
    opening_fund_id: Optional[str] = None
    closure_record_id: Optional[str] = None


class CashStatusResponse(BaseModel):
    balances: Dict[WalletId, Decimal]
    total: Decimal
    daily_state: DailyStateResponse
    alerts: List[CashAlert]
    auto_mode: bool


class OpenRequest(BaseModel):
    wallet: WalletId = WalletId.cash
    amount: Decimal = Field(..., gt=0)
    mode: str = Field("add", pattern="^(add|set)$")
    replenish_from: Optional[WalletId] = None
    overwrite: bool = False
    user_id: Optional[str] = None


class CloseRequest(BaseModel):
    wallet: WalletId = WalletId.cash
    keep_amount: Optional[Decimal] = Field(None, ge=0)
    user_id: Optional[str] = None


class TransferRequest(BaseModel):
    from_wallet: WalletId
    to_wallet: WalletId
    amount: Decimal = Field(..., gt=0)
    reason: str = ""
    user_id: Optional[str] = None


class ReconcileRequest(BaseModel):
    wallet: WalletId = WalletId.cash
    physical_count: Decimal = Field(..., ge=0)
    user_id: Optional[str] = None


class AdjustRequest(BaseModel):
    wallet: WalletId
    new_balance: Decimal
    reason: str
    user_id: Optional[str] = None


class AutoRequest(BaseModel):
    auto_mode: Optional[bool] = None
    user_id: Optional[str] = None


class OperationResponse(BaseModel):
    operation: str
    wallet: Optional[WalletId] = None
    rows: List[TransactionResponse]
    balance_before: Optional[Decimal] = None
    balance_after: Optional[Decimal] = None
    transferred: Decimal = Decimal("0")
    difference: Decimal = Decimal("0")
    deficit: Decimal = Decimal("0")
    message: str


class TransferLeg(BaseModel):
    id: str
    wallet: Optional[str]
    type: str
    amount: Decimal


class TransferEntry(BaseModel):
    transfer_id: Optional[str]
    created_at: datetime
    amount: Decimal
    from_wallet: Optional[str] = None
    to_wallet: Optional[str] = None
    description: Optional[str] = None
    legs: List[TransferLeg]
