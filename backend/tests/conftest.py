"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import datetime
from decimal import Decimal
import uuid

from app.config import Settings
from app.database import Base
from app.dependencies import get_db, get_rules
from app.main import app
from app.models.transaction import Transaction, TransactionKind, TransactionType
from app.services.wallet_registry import WalletId


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session, rules):
    """Create a test client with database and cash rules overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rules] = lambda: rules
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def now():
    """A fixed business-day morning."""
    return datetime(2026, 3, 10, 9, 0)


@pytest.fixture
def make_transaction(db_session):
    """Insert a raw row, bypassing the cash rules (legacy data, fixtures)."""
    def _make(
        type=TransactionType.revenue,
        amount="0",
        wallet=WalletId.cash.value,
        kind=None,
        created_at=None,
        **fields
    ):
        txn = Transaction(
            id=str(uuid.uuid4()),
            type=type,
            kind=kind,
            amount=Decimal(str(amount)),
            wallet=wallet,
            created_at=created_at or datetime(2026, 3, 10, 10, 0),
            **fields
        )
        db_session.add(txn)
        db_session.commit()
        db_session.refresh(txn)
        return txn
    return _make


@pytest.fixture
def sample_sale(make_transaction):
    """A card sale with a cost of goods."""
    return make_transaction(
        type=TransactionType.revenue,
        kind=TransactionKind.sale,
        amount="120.00",
        cost_total=Decimal("80.00"),
        wallet=WalletId.bank.value,
        method="Card",
        source="POS",
        description="Ticket 42 | Phone case",
    )


@pytest.fixture
def rules():
    """Default cash rules, ignoring any local .env file."""
    return Settings(_env_file=None)
