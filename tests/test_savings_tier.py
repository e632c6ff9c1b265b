from schemas.domain import TIER_ORDER, SavingsTier
from services.savings_tier import classify_savings_tier, tier_for_metrics


def test_thresholds_are_exclusive_upper_bounds():
    assert classify_savings_tier(4999.99, 5000, 10000, 20000) == SavingsTier.CRITICAL
    assert classify_savings_tier(5000, 5000, 10000, 20000) == SavingsTier.BELOW_OPTIMAL
    assert classify_savings_tier(10000, 5000, 10000, 20000) == SavingsTier.HEALTHY
    assert classify_savings_tier(20000, 5000, 10000, 20000) == SavingsTier.COMFORTABLE


def test_negative_and_huge_values_are_classified():
    assert classify_savings_tier(-250, 5000, 10000, 20000) == SavingsTier.CRITICAL
    assert classify_savings_tier(1e12, 5000, 10000, 20000) == SavingsTier.COMFORTABLE


def test_classifier_is_monotonic():
    rank = {tier: idx for idx, tier in enumerate(TIER_ORDER)}
    previous = -1
    for savings in range(-1000, 30001, 250):
        current = rank[classify_savings_tier(savings, 5000, 10000, 20000)]
        assert current >= previous
        previous = current


def test_tier_for_metrics_uses_metric_thresholds(make_metrics):
    metrics = make_metrics(
        savings=3000,
        safety_threshold_min=1000,
        safety_threshold_optimal=2000,
        safety_threshold_comfort=4000,
    )
    assert tier_for_metrics(metrics) == SavingsTier.HEALTHY
