from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from db import models
from schemas.domain import (
    AccountRecord,
    ObjectiveRecord,
    ProjectRecord,
    SafetyThresholds,
    TransactionRecord,
)
from services.profile import thresholds_from_profile

ACCOUNT_TYPES = {"checking", "savings", "investment", "other"}
PROJECT_STATUSES = {"active", "paused", "completed"}


@dataclass
class FinancialSnapshot:
    """Validated records for one user, ready for the metric aggregator."""

    accounts: list[AccountRecord] = field(default_factory=list)
    transactions: list[TransactionRecord] = field(default_factory=list)
    projects: list[ProjectRecord] = field(default_factory=list)
    objectives: list[ObjectiveRecord] = field(default_factory=list)
    thresholds: SafetyThresholds = field(default_factory=SafetyThresholds)


def _account_type(value: str | None) -> str:
    kind = (value or "").strip().lower()
    return kind if kind in ACCOUNT_TYPES else "other"


def _status(value: str | None) -> str:
    status = (value or "").strip().lower()
    # Stored "on_hold"/"archived" rows are treated as paused.
    return status if status in PROJECT_STATUSES else "paused"


def load_financial_snapshot(session) -> FinancialSnapshot:
    accounts = session.scalars(
        select(models.Account).where(models.Account.is_active == True).order_by(models.Account.id)  # noqa: E712
    ).all()
    txs = session.scalars(
        select(models.Transaction).options(selectinload(models.Transaction.category)).order_by(models.Transaction.date)
    ).all()
    projects = session.scalars(select(models.Project).order_by(models.Project.id)).all()
    objectives = session.scalars(select(models.Objective).order_by(models.Objective.id)).all()
    profile = session.scalar(select(models.Profile).order_by(models.Profile.id))

    return FinancialSnapshot(
        accounts=[
            AccountRecord(id=a.id, name=a.name, type=_account_type(a.type), balance=float(a.balance or 0.0), currency=a.currency)
            for a in accounts
        ],
        transactions=[
            TransactionRecord(
                id=t.id,
                account_id=t.account_id,
                amount=float(t.amount),
                date=t.date,
                category=t.category.name if t.category else None,
                is_variable=bool(t.category.is_variable) if t.category else False,
                is_recurring=bool(t.is_recurring),
                is_forecast=bool(t.is_forecast),
                project_id=t.project_id,
            )
            for t in txs
        ],
        projects=[
            ProjectRecord(
                id=p.id,
                name=p.name,
                target_amount=float(p.target_amount or 0.0),
                monthly_allocation=float(p.monthly_allocation or 0.0),
                status=_status(p.status),
                source_account_id=p.source_account_id,
                linked_account_id=p.linked_account_id,
            )
            for p in projects
        ],
        objectives=[
            ObjectiveRecord(
                id=o.id,
                name=o.name,
                target_yearly_amount=float(o.target_yearly_amount or 0.0),
                linked_account_id=o.linked_account_id,
                status=_status(o.status),
            )
            for o in objectives
        ],
        thresholds=thresholds_from_profile(profile),
    )
