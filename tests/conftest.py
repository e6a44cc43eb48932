"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from propcalc.api.main import create_app
from propcalc.config import settings
from propcalc.infrastructure.database.models import Base
from propcalc.infrastructure.database.session import get_db
from propcalc.domain.models import ForecastTransaction, PropertyRef


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def cron_headers() -> Dict[str, str]:
    """Authorization header accepted by the /v1/jobs endpoints"""
    return {"Authorization": f"Bearer {settings.cron_secret}"}


@pytest.fixture
def forecast_properties() -> list[PropertyRef]:
    return [
        PropertyRef(id="prop-1", address="12 Smith St, Richmond VIC"),
        PropertyRef(id="prop-2", address="4/88 Beach Rd, Manly NSW"),
    ]


@pytest.fixture
def forecast_transactions() -> list[ForecastTransaction]:
    """
    FY2026 July-September actuals plus a full FY2025 for prop-1.

    Rent is $2,000 a month. Insurance is a single $1,800 premium paid in March
    of the prior year.
    """
    transactions = []

    for month in range(1, 13):
        year = 2024 if month >= 7 else 2025
        transactions.append(ForecastTransaction(date(year, month, 1), 2000.0, "rental_income", "prop-1"))
    transactions.append(ForecastTransaction(date(2025, 3, 15), -1800.0, "insurance", "prop-1"))

    for month in (7, 8, 9):
        transactions.append(ForecastTransaction(date(2025, month, 1), 2000.0, "rental_income", "prop-1"))
        transactions.append(ForecastTransaction(date(2025, month, 20), -150.0, "water_charges", "prop-2"))

    return transactions
