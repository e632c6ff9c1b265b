from datetime import date

from db import models
from schemas.domain import SavingsTier
from services.profile import save_safety_thresholds
from services.recommendations import build_recommendation_result
from services.metrics import compute_financial_metrics
from services.snapshot import load_financial_snapshot


def _seed(session):
    checking = models.Account(name="Checking", type="checking", balance=3000)
    savings = models.Account(name="Savings", type="Savings", balance=12000)
    cash = models.Account(name="Wallet", type="cash", balance=80)
    closed = models.Account(name="Old", type="checking", balance=999, is_active=False)
    session.add_all([checking, savings, cash, closed])
    session.flush()

    food = models.Category(name="Food", type="expense", is_variable=True)
    rent = models.Category(name="Rent", type="expense")
    session.add_all([food, rent])
    session.flush()

    session.add_all(
        [
            models.Transaction(account_id=checking.id, category_id=food.id, date=date(2026, 3, 4), amount=-120),
            models.Transaction(account_id=checking.id, category_id=rent.id, date=date(2026, 3, 1), amount=-800, is_recurring=True),
            models.Transaction(account_id=checking.id, date=date(2026, 3, 9), amount=-15),
            models.Project(name="Bike", target_amount=900, monthly_allocation=150, status="on_hold"),
            models.Project(name="Trip", target_amount=1200, monthly_allocation=200, status="active"),
        ]
    )
    session.commit()


def test_snapshot_maps_rows_to_records(session):
    _seed(session)

    snapshot = load_financial_snapshot(session)

    assert [(a.name, a.type) for a in snapshot.accounts] == [
        ("Checking", "checking"),
        ("Savings", "savings"),
        ("Wallet", "other"),
    ]
    food = next(t for t in snapshot.transactions if t.category == "Food")
    assert food.is_variable
    uncategorized = next(t for t in snapshot.transactions if t.category is None)
    assert not uncategorized.is_variable
    assert {p.name: p.status for p in snapshot.projects} == {"Bike": "paused", "Trip": "active"}


def test_snapshot_reads_profile_thresholds(session):
    save_safety_thresholds(session, 1000, 4000, 8000)

    snapshot = load_financial_snapshot(session)

    assert snapshot.thresholds.safety_threshold_optimal == 4000


def test_snapshot_feeds_the_engine(session):
    _seed(session)
    snapshot = load_financial_snapshot(session)

    metrics = compute_financial_metrics(
        snapshot.accounts,
        snapshot.transactions,
        snapshot.projects,
        snapshot.objectives,
        snapshot.thresholds,
        today=date(2026, 3, 20),
    )
    result = build_recommendation_result(metrics)

    assert metrics.safe_to_spend == 3000 - 800 - 200
    assert result.tier == SavingsTier.HEALTHY
    assert sum(r.percentage for r in result.recommendations) == 100
