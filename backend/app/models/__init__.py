"""
Database models package.
"""

from app.models.transaction import Transaction, TransactionType, TransactionKind, INTERNAL_KINDS
from app.models.wallet_balance import WalletBalance

__all__ = [
    "Transaction",
    "TransactionType",
    "TransactionKind",
    "INTERNAL_KINDS",
    "WalletBalance",
]
