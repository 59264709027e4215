"""
Pydantic schemas package.
"""

from app.schemas.transaction import (
    SaleCreate,
    ExpenseCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
)
from app.schemas.wallet import (
    WalletResponse,
    WalletList,
    WalletHistoryEntry,
    WalletAuditEntry,
    WalletAuditResponse,
)
from app.schemas.cash import (
    Severity,
    SuggestedAction,
    Priority,
    SuggestedTransfer,
    CashAlert,
    TransferSuggestion,
    DailyStateResponse,
    CashStatusResponse,
    OperationResponse,
)
from app.schemas.report import SalesSummary

__all__ = [
    "SaleCreate",
    "ExpenseCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "WalletResponse",
    "WalletList",
    "WalletHistoryEntry",
    "WalletAuditEntry",
    "WalletAuditResponse",
    "Severity",
    "SuggestedAction",
    "Priority",
    "SuggestedTransfer",
    "CashAlert",
    "TransferSuggestion",
    "DailyStateResponse",
    "CashStatusResponse",
    "OperationResponse",
    "SalesSummary",
]
