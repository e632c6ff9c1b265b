from __future__ import annotations

import logging
from datetime import date

from schemas.domain import (
    DEFAULT_ALLOCATION_CONFIG,
    AccountRecord,
    AllocationConfig,
    FinancialMetrics,
    ObjectiveProgress,
    ObjectiveRecord,
    ProjectProgress,
    ProjectRecord,
    RecoType,
    SafetyThresholds,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

VARIABLE_WINDOW_MONTHS = 3


def _month_key(d: date) -> tuple[int, int]:
    return d.year, d.month


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + offset
    return idx // 12, idx % 12 + 1


def _trailing_month_keys(today: date, months: int = VARIABLE_WINDOW_MONTHS) -> list[tuple[int, int]]:
    return [shift_month(today.year, today.month, -i) for i in range(months - 1, -1, -1)]


def _sum_balances(accounts: list[AccountRecord], account_type: str) -> float:
    return sum(float(a.balance) for a in accounts if a.type == account_type)


def is_variable_expense(tx: TransactionRecord, markers: tuple[str, ...]) -> bool:
    if tx.amount >= 0:
        return False
    if tx.is_variable:
        return True
    name = (tx.category or "").lower()
    return bool(name) and any(marker in name for marker in markers)


def remaining_fixed_expenses(transactions: list[TransactionRecord], today: date) -> float:
    month = _month_key(today)
    return sum(
        abs(float(t.amount))
        for t in transactions
        if _month_key(t.date) == month and (t.is_recurring or t.is_forecast) and t.amount < 0
    )


def committed_allocations(projects: list[ProjectRecord]) -> float:
    return sum(float(p.monthly_allocation or 0.0) for p in projects if p.status == "active")


def variable_expense_trend(
    transactions: list[TransactionRecord],
    today: date,
    markers: tuple[str, ...] = ("variable",),
) -> tuple[float, float, float]:
    """Return ``(avg_3m, current_month, trend_pct)`` for variable spending.

    The average always divides by three, whatever the number of months that
    actually carry data.
    """
    by_month = {key: 0.0 for key in _trailing_month_keys(today)}
    for t in transactions:
        key = _month_key(t.date)
        if key in by_month and is_variable_expense(t, markers):
            by_month[key] += abs(float(t.amount))

    avg = sum(by_month.values()) / VARIABLE_WINDOW_MONTHS
    current = by_month[_month_key(today)]
    trend = (current / avg) * 100 if avg > 0 else 0.0
    return avg, current, trend


def _project_progress(project: ProjectRecord, transactions: list[TransactionRecord], today: date) -> ProjectProgress:
    monthly = float(project.monthly_allocation or 0.0)
    past = [t for t in transactions if project.id is not None and t.project_id == project.id and t.date <= today]
    same_account = bool(project.source_account_id) and project.source_account_id == project.linked_account_id

    if same_account:
        accumulated = len(past) * monthly
    else:
        debits = [abs(float(t.amount)) for t in past if t.amount < 0]
        accumulated = sum(debits) if debits else sum(abs(float(t.amount)) for t in past)

    target = float(project.target_amount or 0.0)
    progress = (accumulated / target) * 100 if target > 0 else 0.0
    return ProjectProgress(
        id=project.id,
        name=project.name,
        target_amount=target,
        monthly_allocation=monthly,
        progress_percentage=min(progress, 100.0),
        status=project.status,
    )


def _objective_progress(
    objective: ObjectiveRecord,
    transactions: list[TransactionRecord],
    accounts: list[AccountRecord],
    today: date,
) -> ObjectiveProgress:
    invested = sum(
        float(t.amount)
        for t in transactions
        if t.date.year == today.year
        and objective.linked_account_id is not None
        and t.account_id == objective.linked_account_id
        and t.amount > 0
    )
    target = float(objective.target_yearly_amount or 0.0)
    account = next((a for a in accounts if a.id is not None and a.id == objective.linked_account_id), None)
    return ObjectiveProgress(
        id=objective.id,
        name=objective.name,
        target_yearly_amount=target,
        current_year_invested=invested,
        progress_percentage=(invested / target) * 100 if target > 0 else 0.0,
        account_name=account.name if account else None,
        account_type=account.type if account else None,
        status=objective.status,
    )


def compute_financial_metrics(
    accounts: list[AccountRecord],
    transactions: list[TransactionRecord],
    projects: list[ProjectRecord],
    objectives: list[ObjectiveRecord],
    thresholds: SafetyThresholds | None = None,
    today: date | None = None,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> FinancialMetrics:
    today = today or date.today()
    thresholds = thresholds or SafetyThresholds()

    total_checking = _sum_balances(accounts, "checking")
    total_savings = _sum_balances(accounts, "savings")
    total_invested = _sum_balances(accounts, "investment")

    fixed = remaining_fixed_expenses(transactions, today)
    committed = committed_allocations(projects)
    safe_to_spend = max(0.0, total_checking - fixed - committed)

    avg_variable, current_variable, trend = variable_expense_trend(transactions, today, config.variable_markers)

    current_savings = total_savings
    projects_progress = tuple(_project_progress(p, transactions, today) for p in projects if p.status == "active")
    project_targets = sum(p.target_amount for p in projects_progress)
    global_projects = (
        sum((p.progress_percentage / 100) * p.target_amount for p in projects_progress) / project_targets * 100
        if project_targets > 0
        else 0.0
    )

    objectives_progress = tuple(
        _objective_progress(o, transactions, accounts, today) for o in objectives if o.status == "active"
    )
    yearly_targets = sum(o.target_yearly_amount for o in objectives_progress)
    global_objectives = (
        sum(o.current_year_invested for o in objectives_progress) / yearly_targets * 100 if yearly_targets > 0 else 0.0
    )

    metrics = FinancialMetrics(
        safe_to_spend=safe_to_spend,
        current_checking_balance=total_checking,
        remaining_fixed_expenses=fixed,
        committed_allocations=committed,
        avg_variable_expenses_3m=avg_variable,
        current_month_variable=current_variable,
        variable_trend_percentage=trend,
        total_checking=total_checking,
        total_savings=total_savings,
        total_invested=total_invested,
        safety_threshold_min=thresholds.safety_threshold_min,
        safety_threshold_optimal=thresholds.safety_threshold_optimal,
        safety_threshold_comfort=thresholds.safety_threshold_comfort,
        current_savings=current_savings,
        projected_surplus=max(0.0, safe_to_spend - max(0.0, avg_variable - current_variable)),
        available_savings=max(0.0, current_savings - thresholds.safety_threshold_optimal),
        savings_focus=RecoType.SAVE if current_savings < thresholds.safety_threshold_optimal else RecoType.INVEST,
        projects_with_progress=projects_progress,
        global_projects_percentage=global_projects,
        objectives_with_progress=objectives_progress,
        global_objectives_percentage=global_objectives,
    )
    logger.debug(
        "Computed metrics for %s: safe_to_spend=%.2f trend=%.1f%%",
        today.isoformat(),
        metrics.safe_to_spend,
        metrics.variable_trend_percentage,
    )
    return metrics
