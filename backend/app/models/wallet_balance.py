"""
Persisted per-wallet balance snapshot.
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, String, DateTime, Numeric
from app.database import Base


class WalletBalance(Base):
    """Running balance per wallet, kept in step with every ledger write."""

    __tablename__ = "wallet_balances"

    wallet = Column(String(32), primary_key=True)
    balance = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
