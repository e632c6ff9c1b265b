from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

import pandas as pd

from schemas.domain import (
    DEFAULT_ALLOCATION_CONFIG,
    RECO_ORDER,
    TIER_ORDER,
    AccountRecord,
    Allocation,
    AllocationConfig,
    FinancialMetrics,
    ObjectiveRecord,
    ProjectRecord,
    Recommendation,
    RecoType,
    SafetyThresholds,
    SavingsTier,
    TransactionRecord,
)
from services.allocation import TREND_HIGH_PCT, TREND_LOW_PCT, compute_allocation, round_half_up
from services.metrics import compute_financial_metrics
from services.savings_tier import tier_for_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationResult:
    tier: SavingsTier
    metrics: FinancialMetrics
    allocation: Allocation | None = None
    recommendations: list[Recommendation] = field(default_factory=list)


def format_money(value: float, symbol: str = "€") -> str:
    return f"{symbol}{value:,.0f}"


def _save_description(tier: SavingsTier, amount: int, metrics: FinancialMetrics, symbol: str) -> str:
    if tier == SavingsTier.CRITICAL:
        return (
            f"Your savings are below the critical threshold. Move {format_money(amount, symbol)} to your savings "
            f"account to get closer to the {format_money(metrics.safety_threshold_min, symbol)} target."
        )
    if tier == SavingsTier.BELOW_OPTIMAL:
        gap = max(0.0, metrics.safety_threshold_optimal - metrics.current_savings)
        return (
            f"You are {format_money(gap, symbol)} short of the optimal threshold. "
            f"Save {format_money(amount, symbol)} this month."
        )
    return f"Keep your safety cushion growing by saving {format_money(amount, symbol)}."


def _invest_description(tier: SavingsTier, amount: int, metrics: FinancialMetrics, symbol: str) -> str:
    if tier == SavingsTier.COMFORTABLE:
        return f"Your savings are comfortable. Put {format_money(amount, symbol)} into your investments to grow your wealth."
    if tier == SavingsTier.HEALTHY:
        return f"Healthy finances! Invest {format_money(amount, symbol)} to diversify your assets."
    return f"Start investing {format_money(amount, symbol)}, even modestly, to prepare for the future."


def _enjoy_description(tier: SavingsTier, amount: int, metrics: FinancialMetrics, symbol: str) -> str:
    trend = metrics.variable_trend_percentage
    if trend > TREND_HIGH_PCT:
        return f"Your variable spending is up ({trend:.0f}% of your average). Cap your fun budget at {format_money(amount, symbol)} this month."
    if 0 < trend < TREND_LOW_PCT:
        return f"Well done, your spending is under control ({trend:.0f}% of your average). Enjoy {format_money(amount, symbol)} guilt-free."
    return f"Suggested fun budget: {format_money(amount, symbol)} for variable spending and leisure."


def _keep_description(tier: SavingsTier, amount: int, metrics: FinancialMetrics, symbol: str) -> str:
    if metrics.current_checking_balance < metrics.committed_allocations * 2:
        return f"Your checking balance is a little tight. Keep {format_money(amount, symbol)} aside to cover surprises."
    return f"Keep {format_money(amount, symbol)} on your checking account as headroom for next month."


DESCRIPTIONS = {
    RecoType.SAVE: _save_description,
    RecoType.INVEST: _invest_description,
    RecoType.ENJOY: _enjoy_description,
    RecoType.KEEP: _keep_description,
}


def build_recommendation(
    reco_type: RecoType,
    percentage: int,
    budget: float,
    tier: SavingsTier,
    metrics: FinancialMetrics,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> Recommendation:
    amount = round_half_up((percentage / 100) * budget)
    return Recommendation(
        type=reco_type,
        title=config.reco_titles[reco_type],
        description=DESCRIPTIONS[reco_type](tier, amount, metrics, config.currency_symbol),
        amount=amount,
        percentage=int(percentage),
        color=config.reco_colors[reco_type],
        icon=config.reco_icons[reco_type],
        action_route=config.action_routes.get(reco_type),
        action_label=config.action_labels[reco_type],
    )


def build_recommendations(
    allocation: Allocation,
    budget: float,
    tier: SavingsTier,
    metrics: FinancialMetrics,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> list[Recommendation]:
    if budget <= 0:
        return []
    return [
        build_recommendation(t, int(allocation[t]), budget, tier, metrics, config)
        for t in RECO_ORDER
        if allocation[t] > 0
    ]


def build_recommendation_result(
    metrics: FinancialMetrics,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> RecommendationResult:
    tier = tier_for_metrics(metrics)
    budget = metrics.safe_to_spend
    if budget <= 0:
        logger.debug("Nothing to allocate (safe_to_spend=%.2f)", budget)
        return RecommendationResult(tier=tier, metrics=metrics)

    allocation = compute_allocation(tier, metrics, config)
    recos = build_recommendations(allocation, budget, tier, metrics, config)
    return RecommendationResult(tier=tier, metrics=metrics, allocation=allocation, recommendations=recos)


def compute_recommendations(
    metrics: FinancialMetrics,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> list[Recommendation]:
    return build_recommendation_result(metrics, config).recommendations


def recommend_for_records(
    accounts: list[AccountRecord],
    transactions: list[TransactionRecord],
    projects: list[ProjectRecord],
    objectives: list[ObjectiveRecord],
    thresholds: SafetyThresholds | None = None,
    today: date | None = None,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> RecommendationResult:
    metrics = compute_financial_metrics(accounts, transactions, projects, objectives, thresholds, today, config)
    return build_recommendation_result(metrics, config)


def recommendations_frame(recommendations: list[Recommendation]) -> pd.DataFrame:
    columns = ["type", "title", "percentage", "amount", "description", "action_label"]
    if not recommendations:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {
                "type": r.type.value,
                "title": r.title,
                "percentage": r.percentage,
                "amount": r.amount,
                "description": r.description,
                "action_label": r.action_label,
            }
            for r in recommendations
        ]
    )


def tier_allocation_frame(config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG) -> pd.DataFrame:
    rows = []
    for tier in TIER_ORDER:
        row = config.tier_allocations[tier]
        rows.append(
            {
                "tier": tier.value,
                "label": config.tier_labels[tier],
                **{t.value: float(row[t]) for t in RECO_ORDER},
                "total": float(sum(row.values())),
            }
        )
    return pd.DataFrame(rows)
