"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credit_settlement.api.main import create_app
from credit_settlement.api.dependencies import get_purchase_client, get_today
from credit_settlement.domain.exceptions import (
    PurchaseAlreadyRepaidError,
    PurchaseNotFoundError,
    PurchaseServiceError,
)
from credit_settlement.domain.models import Purchase, RateTier, RateTierTable
from credit_settlement.infrastructure.database.models import Base
from credit_settlement.infrastructure.database.repositories import RateTierRepository
from credit_settlement.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Every API test is priced as of this date
TODAY = date(2026, 3, 31)


def purchase_aged(purchase_id: str, days: int, amount: str = "10000", hour: int = 10) -> Purchase:
    """Purchase created `days` calendar days before TODAY"""
    created = datetime.combine(TODAY - timedelta(days=days), datetime.min.time()).replace(hour=hour)
    return Purchase(purchase_id=purchase_id, principal_amount=Decimal(amount), created_at=created)


class FakePurchaseClient:
    """In-memory stand-in for the purchase service"""

    def __init__(self, purchases: Dict[str, Purchase]):
        self.purchases = purchases

    async def get_purchase(self, purchase_id: str) -> Purchase:
        if purchase_id == "cp_repaid":
            raise PurchaseAlreadyRepaidError(f"Credit purchase {purchase_id} has already been repaid")
        if purchase_id == "cp_unavailable":
            raise PurchaseServiceError("Purchase service timeout after 5.0s")
        if purchase_id not in self.purchases:
            raise PurchaseNotFoundError(f"Credit purchase {purchase_id} not found")
        return self.purchases[purchase_id]


@pytest.fixture
def standard_table() -> RateTierTable:
    """10% to day 30, 5% to day 60, neutral 61-90, 2% from day 91 onwards"""
    return RateTierTable(
        discount_tiers=(
            RateTier(start=0, end=30, rate=Decimal("10")),
            RateTier(start=31, end=60, rate=Decimal("5")),
        ),
        interest_tiers=(RateTier(start=91, end=None, rate=Decimal("2")),),
    )


@pytest.fixture
def purchases() -> Dict[str, Purchase]:
    return {
        p.purchase_id: p
        for p in [
            purchase_aged("cp_day0", 0, hour=8),
            purchase_aged("cp_day10", 10),
            purchase_aged("cp_day45", 45),
            purchase_aged("cp_day75", 75),
            purchase_aged("cp_day120", 120),
        ]
    }


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database seeded with the default tier table"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    RateTierRepository(db).seed_defaults()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, purchases: Dict[str, Purchase]) -> TestClient:
    """Create FastAPI test client with test database, fake purchase service and fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_purchase_client] = lambda: FakePurchaseClient(purchases)
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)
