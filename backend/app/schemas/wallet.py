"""
Wallet schemas.
"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.services.wallet_registry import WalletId


class WalletResponse(BaseModel):
    id: WalletId
    name: str
    is_physical: bool
    balance: Decimal
    min_balance: Decimal
    max_balance: Optional[Decimal] = None
    optimal_balance: Optional[Decimal] = None
    transfer_excess_to: Optional[WalletId] = None
    replenish_from: Optional[WalletId] = None
    alert_threshold: Decimal


class WalletList(BaseModel):
    items: List[WalletResponse]
    total: Decimal


class WalletHistoryEntry(BaseModel):
    transaction_id: str
    created_at: datetime
    type: str
    kind: Optional[str]
    amount: Decimal
    description: Optional[str]
    balance_after: Decimal


class WalletAuditEntry(BaseModel):
    wallet: WalletId
    snapshot: Decimal
    computed: Decimal
    difference: Decimal


class WalletAuditResponse(BaseModel):
    consistent: bool
    wallets: List[WalletAuditEntry]
