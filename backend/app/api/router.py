"""
Main API router.
"""

from fastapi import APIRouter
from app.api import cash, reports, transactions, wallets

api_router = APIRouter()

api_router.include_router(wallets.router)
api_router.include_router(transactions.router)
api_router.include_router(cash.router)
api_router.include_router(reports.router)
