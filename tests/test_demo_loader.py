from datetime import date

from sqlalchemy import select, func

from db import models
from schemas.domain import SavingsTier
from services.demo_loader import load_demo_data
from services.recommendations import recommend_for_records
from services.snapshot import load_financial_snapshot

TODAY = date(2026, 3, 15)


def test_demo_loader_idempotency(session):
    first = load_demo_data(session, today=TODAY)
    first_accounts = session.scalar(select(func.count()).select_from(models.Account))
    first_tx = session.scalar(select(func.count()).select_from(models.Transaction))

    second = load_demo_data(session, today=TODAY)
    second_accounts = session.scalar(select(func.count()).select_from(models.Account))
    second_tx = session.scalar(select(func.count()).select_from(models.Transaction))

    assert first["transactions_created"] == 21
    assert second["transactions_created"] == 0
    assert first_accounts == second_accounts == 3
    assert first_tx == second_tx


def test_demo_data_produces_recommendations(session):
    load_demo_data(session, today=TODAY)
    snapshot = load_financial_snapshot(session)

    result = recommend_for_records(
        snapshot.accounts,
        snapshot.transactions,
        snapshot.projects,
        snapshot.objectives,
        snapshot.thresholds,
        today=TODAY,
    )

    assert result.metrics.remaining_fixed_expenses == 1070
    assert result.metrics.safe_to_spend == 4500 - 1070 - 300
    assert result.metrics.avg_variable_expenses_3m == 365
    assert result.tier == SavingsTier.BELOW_OPTIMAL
    assert result.allocation.total() == 100
    assert result.metrics.projects_with_progress[0].name == "Summer Trip"
