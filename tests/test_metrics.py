from datetime import date

import pytest

from schemas.domain import AccountRecord, ObjectiveRecord, ProjectRecord, RecoType, SafetyThresholds, TransactionRecord
from services.metrics import compute_financial_metrics, variable_expense_trend

TODAY = date(2026, 1, 15)


def _accounts(checking=4500.0, savings=7000.0, invested=800.0):
    return [
        AccountRecord(id=1, name="Checking", type="checking", balance=checking),
        AccountRecord(id=2, name="Savings", type="savings", balance=savings),
        AccountRecord(id=3, name="Broker", type="investment", balance=invested),
        AccountRecord(id=4, name="Wallet", type="other", balance=250.0),
    ]


def test_safe_to_spend_subtracts_fixed_and_committed():
    txs = [
        TransactionRecord(date=date(2026, 1, 3), amount=-900, is_recurring=True),
        TransactionRecord(date=date(2026, 1, 28), amount=-300, is_forecast=True),
        TransactionRecord(date=date(2026, 1, 1), amount=2500, is_recurring=True),
        TransactionRecord(date=date(2026, 1, 9), amount=-75),
        TransactionRecord(date=date(2025, 12, 3), amount=-900, is_recurring=True),
    ]
    projects = [
        ProjectRecord(id=1, name="Trip", target_amount=2000, monthly_allocation=300, status="active"),
        ProjectRecord(id=2, name="Old", target_amount=500, monthly_allocation=100, status="completed"),
    ]

    metrics = compute_financial_metrics(_accounts(), txs, projects, [], today=TODAY)

    assert metrics.total_checking == 4500
    assert metrics.remaining_fixed_expenses == 1200
    assert metrics.committed_allocations == 300
    assert metrics.safe_to_spend == 3000
    assert metrics.current_savings == metrics.total_savings == 7000
    assert metrics.total_invested == 800


def test_safe_to_spend_is_never_negative():
    txs = [TransactionRecord(date=date(2026, 1, 5), amount=-1200, is_recurring=True)]
    projects = [ProjectRecord(id=1, name="Trip", monthly_allocation=300)]

    metrics = compute_financial_metrics(_accounts(checking=0.0), txs, projects, [], today=TODAY)

    assert metrics.safe_to_spend == 0.0


def test_variable_average_uses_fixed_divisor_across_year_boundary():
    txs = [
        TransactionRecord(date=date(2025, 10, 20), amount=-999, is_variable=True),
        TransactionRecord(date=date(2025, 11, 10), amount=-90, is_variable=True),
        TransactionRecord(date=date(2025, 12, 10), amount=-60, category="Variable - restaurants"),
        TransactionRecord(date=date(2026, 1, 5), amount=-150, is_variable=True),
        TransactionRecord(date=date(2026, 1, 6), amount=40, is_variable=True),
        TransactionRecord(date=date(2026, 1, 7), amount=-500, category="Rent"),
    ]

    avg, current, trend = variable_expense_trend(txs, TODAY)

    assert avg == pytest.approx(100.0)
    assert current == pytest.approx(150.0)
    assert trend == pytest.approx(150.0)


def test_single_month_of_data_still_divides_by_three():
    txs = [TransactionRecord(date=date(2026, 1, 5), amount=-300, is_variable=True)]

    avg, current, trend = variable_expense_trend(txs, TODAY)

    assert avg == pytest.approx(100.0)
    assert trend == pytest.approx(300.0)


def test_zero_average_gives_zero_trend():
    metrics = compute_financial_metrics(_accounts(), [], [], [], today=TODAY)

    assert metrics.avg_variable_expenses_3m == 0
    assert metrics.variable_trend_percentage == 0


def test_missing_thresholds_use_defaults():
    metrics = compute_financial_metrics(_accounts(), [], [], [], today=TODAY)

    assert metrics.safety_threshold_min == 5000
    assert metrics.safety_threshold_optimal == 10000
    assert metrics.safety_threshold_comfort == 20000
    assert metrics.savings_focus == RecoType.SAVE


def test_thresholds_must_be_ordered():
    with pytest.raises(ValueError):
        SafetyThresholds(safety_threshold_min=10000, safety_threshold_optimal=5000, safety_threshold_comfort=20000)


def test_projected_surplus_and_available_savings():
    thresholds = SafetyThresholds(safety_threshold_min=1000, safety_threshold_optimal=5000, safety_threshold_comfort=9000)
    txs = [
        TransactionRecord(date=date(2025, 12, 10), amount=-600, is_variable=True),
        TransactionRecord(date=date(2026, 1, 5), amount=-100, is_variable=True),
    ]

    metrics = compute_financial_metrics(_accounts(checking=1000.0), txs, [], [], thresholds=thresholds, today=TODAY)

    # avg = 700 / 3, current = 100, so ~133.33 of typical spend is still ahead.
    assert metrics.projected_surplus == pytest.approx(1000 - (700 / 3 - 100))
    assert metrics.available_savings == 2000
    assert metrics.savings_focus == RecoType.INVEST


def test_project_progress_for_same_and_separate_accounts():
    projects = [
        ProjectRecord(id=1, name="Sofa", target_amount=1000, monthly_allocation=200, source_account_id=1, linked_account_id=1),
        ProjectRecord(id=2, name="Trip", target_amount=1000, monthly_allocation=100, source_account_id=1, linked_account_id=2),
        ProjectRecord(id=3, name="Paused", target_amount=1000, monthly_allocation=100, status="paused"),
    ]
    txs = [
        TransactionRecord(date=date(2025, 12, 1), amount=0, project_id=1),
        TransactionRecord(date=date(2026, 1, 1), amount=0, project_id=1),
        TransactionRecord(date=date(2026, 2, 1), amount=0, project_id=1),
        TransactionRecord(date=date(2025, 12, 2), amount=-250, project_id=2),
        TransactionRecord(date=date(2026, 1, 2), amount=-250, project_id=2),
    ]

    metrics = compute_financial_metrics(_accounts(), txs, projects, [], today=TODAY)

    progress = {p.name: p.progress_percentage for p in metrics.projects_with_progress}
    assert progress == {"Sofa": pytest.approx(40.0), "Trip": pytest.approx(50.0)}
    assert metrics.global_projects_percentage == pytest.approx(45.0)


def test_objective_progress_counts_current_year_inflows_to_linked_account():
    objectives = [ObjectiveRecord(id=1, name="Invest", target_yearly_amount=1200, linked_account_id=3)]
    txs = [
        TransactionRecord(date=date(2026, 1, 2), amount=300, account_id=3),
        TransactionRecord(date=date(2025, 12, 2), amount=300, account_id=3),
        TransactionRecord(date=date(2026, 1, 3), amount=-50, account_id=3),
    ]

    metrics = compute_financial_metrics(_accounts(), txs, [], objectives, today=TODAY)

    objective = metrics.objectives_with_progress[0]
    assert objective.current_year_invested == 300
    assert objective.progress_percentage == pytest.approx(25.0)
    assert objective.account_type == "investment"
    assert metrics.global_objectives_percentage == pytest.approx(25.0)
