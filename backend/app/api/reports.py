"""
Report API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Optional

from app.dependencies import get_db
from app.schemas.report import SalesSummary
from app.services import report_service
from app.services.daily_state_service import day_bounds

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/daily", response_model=SalesSummary)
def get_daily_report(
    day: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """
    Sales summary for one day.
    Returns: sales, cost, margin, expenses and theoretical cash
    """
    start, end = day_bounds(day or datetime.now().date())
    return SalesSummary(**report_service.sales_summary(db, start, end))


@router.get("/range", response_model=SalesSummary)
def get_range_report(
    start: datetime,
    end: datetime,
    db: Session = Depends(get_db)
):
    """Sales summary for an arbitrary [start, end) window."""
    if end <= start:
        raise HTTPException(status_code=400, detail="end must be after start")
    return SalesSummary(**report_service.sales_summary(db, start, end))
