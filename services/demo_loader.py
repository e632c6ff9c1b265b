from __future__ import annotations

from datetime import date

from sqlalchemy import select

from db import models
from services.metrics import shift_month

DEMO_ACCOUNTS = [
    {"name": "Main Checking", "type": "checking", "balance": 4500.0},
    {"name": "Rainy Savings", "type": "savings", "balance": 7200.0},
    {"name": "Index Fund", "type": "investment", "balance": 800.0},
]

DEMO_CATEGORIES = [
    {"name": "Salary", "type": "income", "is_variable": False},
    {"name": "Housing", "type": "expense", "is_variable": False},
    {"name": "Utilities", "type": "expense", "is_variable": False},
    {"name": "Groceries", "type": "expense", "is_variable": True},
    {"name": "Restaurants", "type": "expense", "is_variable": True},
    {"name": "Leisure", "type": "expense", "is_variable": True},
]

# (day of month, amount, category, recurring)
MONTHLY_PATTERN = [
    (1, 2800.0, "Salary", True),
    (3, -950.0, "Housing", True),
    (8, -120.0, "Utilities", True),
    (6, -210.0, "Groceries", False),
    (14, -65.0, "Restaurants", False),
    (21, -90.0, "Leisure", False),
]


def _get_or_add(session, model, lookup: dict, **fields):
    row = session.scalar(select(model).filter_by(**lookup))
    if row:
        return row
    row = model(**lookup, **fields)
    session.add(row)
    session.flush()
    return row


def load_demo_data(session, today: date | None = None) -> dict:
    today = today or date.today()

    if not session.scalar(select(models.Profile)):
        session.add(
            models.Profile(
                full_name="Demo User",
                base_currency="EUR",
                safety_threshold_min=5000,
                safety_threshold_optimal=10000,
                safety_threshold_comfort=20000,
            )
        )

    accounts = {a["name"]: _get_or_add(session, models.Account, {"name": a["name"]}, type=a["type"], balance=a["balance"]) for a in DEMO_ACCOUNTS}
    categories = {
        c["name"]: _get_or_add(session, models.Category, {"name": c["name"]}, type=c["type"], is_variable=c["is_variable"])
        for c in DEMO_CATEGORIES
    }

    checking = accounts["Main Checking"]
    project = _get_or_add(
        session,
        models.Project,
        {"name": "Summer Trip"},
        target_amount=2400.0,
        monthly_allocation=300.0,
        status="active",
        source_account_id=checking.id,
        linked_account_id=accounts["Rainy Savings"].id,
    )
    _get_or_add(
        session,
        models.Objective,
        {"name": "Yearly investing"},
        target_yearly_amount=3600.0,
        linked_account_id=accounts["Index Fund"].id,
        status="active",
    )

    created = 0
    for offset in (-2, -1, 0):
        year, month = shift_month(today.year, today.month, offset)
        for day, amount, category, recurring in MONTHLY_PATTERN:
            ref = f"demo:{year}-{month:02d}:{category}"
            if session.scalar(select(models.Transaction).where(models.Transaction.reference == ref)):
                continue
            session.add(
                models.Transaction(
                    reference=ref,
                    account_id=checking.id,
                    category_id=categories[category].id,
                    date=date(year, month, day),
                    amount=amount,
                    is_recurring=recurring,
                    is_forecast=recurring and offset == 0 and date(year, month, day) > today,
                )
            )
            created += 1

        ref = f"demo:{year}-{month:02d}:project"
        if not session.scalar(select(models.Transaction).where(models.Transaction.reference == ref)):
            session.add(
                models.Transaction(
                    reference=ref,
                    account_id=checking.id,
                    project_id=project.id,
                    date=date(year, month, 2),
                    amount=-project.monthly_allocation,
                    note=f"Transfer to {project.name}",
                )
            )
            created += 1

    session.commit()
    return {"accounts": len(accounts), "categories": len(categories), "transactions_created": created}
