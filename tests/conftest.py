"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from dpa_portal.api.main import create_app
from dpa_portal.api.dependencies import get_today
from dpa_portal.infrastructure.database.models import Base
from dpa_portal.infrastructure.database.session import get_db
from dpa_portal.domain.models import LoanRecord, LoanStatus, SavingsRecord, ShareRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed reference day: falls in the 2023-2024 financial year
TODAY = date(2024, 3, 15)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed today"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def sample_savings() -> list[SavingsRecord]:
    """Savings across two financial years for two members"""
    return [
        SavingsRecord(id=1, user_id=1, amount="5,000.00", payment_date="2023-11-05", payment_month="November"),
        SavingsRecord(id=2, user_id=2, amount="2500.00", payment_date="2023-12-05T00:00:00", payment_month="December"),
        SavingsRecord(id=3, user_id=1, amount="5000.00", payment_date="2024-01-05", payment_month="January"),
        SavingsRecord(id=4, user_id=1, amount="4000.00", payment_date="2022-11-20", payment_month="November"),
    ]


@pytest.fixture
def sample_shares() -> list[ShareRecord]:
    return [
        ShareRecord(id=10, user_id=1, shares_count=5, share_value="5000", purchase_date="2023-12-01"),
        ShareRecord(id=11, user_id=2, shares_count=2, share_value="5000", purchase_date="2022-12-01"),
    ]


@pytest.fixture
def sample_loans() -> list[LoanRecord]:
    return [
        LoanRecord(
            id=20,
            user_id=1,
            loan_amount="100000",
            interest_rate="10",
            duration_months=12,
            total_repayable="110000",
            amount_paid="55000",
            status=LoanStatus.ACTIVE,
            application_date="2024-01-05",
        ),
        LoanRecord(
            id=21,
            user_id=2,
            loan_amount="50000",
            interest_rate="10",
            duration_months=6,
            total_repayable="52000",
            status="",
            application_date="2024-02-10",
        ),
    ]
