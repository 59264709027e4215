"""
Transaction schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.models.transaction import TransactionKind, TransactionType
from app.services.wallet_registry import WalletId


class SaleCreate(BaseModel):
    """A POS sale or a paid repair ticket."""
    amount: Decimal = Field(..., gt=0)
    wallet: WalletId
    cost_total: Optional[Decimal] = Field(None, ge=0)
    method: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[str] = None


class ExpenseCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    wallet: WalletId
    method: Optional[str] = None
    source: Optional[str] = None
    description: str = Field(..., min_length=1)
    user_id: Optional[str] = None


class TransactionUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=0)
    cost_total: Optional[Decimal] = Field(None, ge=0)
    source: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("amount", "created_at")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


class TransactionResponse(BaseModel):
    id: str
    type: TransactionType
    kind: Optional[TransactionKind]
    amount: Decimal
    cost_total: Optional[Decimal]
    wallet: Optional[str]
    source: Optional[str]
    description: Optional[str]
    method: Optional[str]
    is_internal: bool
    user_id: Optional[str]
    transfer_id: Optional[str]
    declared_balance: Optional[Decimal]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    pages: int
