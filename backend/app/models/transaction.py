"""
Transaction database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Numeric, Text, Index
import enum
from app.database import Base


class TransactionType(str, enum.Enum):
    """Monetary direction of a row."""
    revenue = "revenue"
    expense = "expense"
    closure = "closure"  # Marker, never moves money


class TransactionKind(str, enum.Enum):
    """What the row represents. Missing only on legacy rows."""
    sale = "sale"
    expense = "expense"
    transfer = "transfer"
    opening_fund = "opening_fund"
    closure = "closure"
    adjustment = "adjustment"


INTERNAL_KINDS = frozenset({
    TransactionKind.transfer,
    TransactionKind.opening_fund,
    TransactionKind.closure,
    TransactionKind.adjustment,
})


class Transaction(Base):
    """Append-mostly ledger row."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(Enum(TransactionType), nullable=False, index=True)
    kind = Column(Enum(TransactionKind), nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    cost_total = Column(Numeric(12, 2), nullable=True)
    wallet = Column(String(32), nullable=True, index=True)  # WalletId value; legacy rows may hold a label or nothing
    source = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    method = Column(String(50), nullable=True)
    is_internal = Column(Boolean, default=False, nullable=False)
    user_id = Column(String(36), nullable=True)
    transfer_id = Column(String(36), nullable=True, index=True)  # Shared by both legs of a transfer
    declared_balance = Column(Numeric(12, 2), nullable=True)  # Opening fund / kept amount
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    __table_args__ = (
        Index("idx_transaction_wallet_created", "wallet", "created_at"),
    )
