"""
FastAPI dependencies.
"""

from typing import Generator
from sqlalchemy.orm import Session
from app.config import Settings, settings
from app.database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_rules() -> Settings:
    """Cash thresholds used by the cash endpoints. Overridden in tests."""
    return settings
