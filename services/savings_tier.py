from __future__ import annotations

from schemas.domain import FinancialMetrics, SavingsTier


def classify_savings_tier(savings: float, threshold_min: float, threshold_optimal: float, threshold_comfort: float) -> SavingsTier:
    if savings < threshold_min:
        return SavingsTier.CRITICAL
    if savings < threshold_optimal:
        return SavingsTier.BELOW_OPTIMAL
    if savings < threshold_comfort:
        return SavingsTier.HEALTHY
    return SavingsTier.COMFORTABLE


def tier_for_metrics(metrics: FinancialMetrics) -> SavingsTier:
    return classify_savings_tier(
        metrics.current_savings,
        metrics.safety_threshold_min,
        metrics.safety_threshold_optimal,
        metrics.safety_threshold_comfort,
    )
