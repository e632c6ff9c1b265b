import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from db.engine import Base
from db import models  # noqa: F401
from schemas.domain import FinancialMetrics


@pytest.fixture()
def session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture()
def make_metrics():
    def _make(savings: float = 0.0, checking: float = 10000.0, **overrides) -> FinancialMetrics:
        fields = {
            "safe_to_spend": 1000.0,
            "current_checking_balance": checking,
            "total_checking": checking,
            "total_savings": savings,
            "current_savings": savings,
            "total_invested": savings,
        }
        fields.update(overrides)
        return FinancialMetrics(**fields)

    return _make
