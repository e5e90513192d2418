"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crux_analytics.calculations.models import CalculationInput
from crux_analytics.main import app
from crux_analytics.db.database import get_db
# Import all models to ensure all tables are created
from crux_analytics.db.models import Base, Project, Snapshot


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def base_inputs():
    """Expected case: 5,000 net per month for 24 months on a 100,000 outlay."""
    return CalculationInput(
        initial_investment=100000,
        discount_rate=10,
        project_duration_months=24,
        yearly_revenue=120000,
        revenue_growth_percent=0,
        operating_costs_yearly=60000,
        maintenance_costs_yearly=0,
        multiplier=1.0,
    )
