"""
Report schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal


class SalesSummary(BaseModel):
    start: datetime
    end: datetime
    sales_count: int
    total_sales: Decimal
    total_cost: Decimal
    net_sales: Decimal  # Margin
    expenses_count: int
    total_expenses: Decimal
    cash_in: Decimal
    cash_out: Decimal
    theoretical_cash: Decimal
    net_cash: Decimal
