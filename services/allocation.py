from __future__ import annotations

import logging
import math
from typing import Callable

from schemas.domain import (
    DEFAULT_ALLOCATION_CONFIG,
    RECO_ORDER,
    Allocation,
    AllocationConfig,
    FinancialMetrics,
    SavingsTier,
)

logger = logging.getLogger(__name__)

TREND_HIGH_PCT = 120.0
TREND_LOW_PCT = 80.0
TREND_HIGH_MAX_SHIFT = 15.0
TREND_LOW_MAX_SHIFT = 5.0
CHECKING_COVER_MULTIPLIER = 2.0
CHECKING_SHIFT = 10.0
INVESTMENT_RATIO_FLOOR = 0.15
INVESTMENT_SHIFT = 8.0
MIN_ALLOCATION_TYPES = 2


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def apply_variable_trend(allocation: Allocation, metrics: FinancialMetrics) -> Allocation:
    trend = metrics.variable_trend_percentage
    if trend > TREND_HIGH_PCT:
        shift = _clamp((trend - TREND_HIGH_PCT) / 10, 0, TREND_HIGH_MAX_SHIFT)
        allocation = allocation.with_values(enjoy=max(0.0, allocation.enjoy - shift), keep=allocation.keep + shift)
    if 0 < trend < TREND_LOW_PCT:
        shift = _clamp((TREND_LOW_PCT - trend) / 20, 0, TREND_LOW_MAX_SHIFT)
        allocation = allocation.with_values(enjoy=allocation.enjoy + shift, keep=max(0.0, allocation.keep - shift))
    return allocation


def apply_checking_health(allocation: Allocation, metrics: FinancialMetrics) -> Allocation:
    monthly_commit = metrics.committed_allocations + metrics.remaining_fixed_expenses
    if monthly_commit > 0 and metrics.current_checking_balance < monthly_commit * CHECKING_COVER_MULTIPLIER:
        half = CHECKING_SHIFT / 2
        allocation = allocation.with_values(
            keep=allocation.keep + CHECKING_SHIFT,
            save=max(0.0, allocation.save - half),
            invest=max(0.0, allocation.invest - half),
        )
    return allocation


def apply_investment_ratio(allocation: Allocation, metrics: FinancialMetrics) -> Allocation:
    if metrics.total_savings > 0 and metrics.total_invested < metrics.total_savings * INVESTMENT_RATIO_FLOOR:
        invest = allocation.invest + INVESTMENT_SHIFT
        if allocation.save >= allocation.enjoy:
            allocation = allocation.with_values(invest=invest, save=max(0.0, allocation.save - INVESTMENT_SHIFT))
        else:
            allocation = allocation.with_values(invest=invest, enjoy=max(0.0, allocation.enjoy - INVESTMENT_SHIFT))
    return allocation


# Each modifier reads the allocation produced by the previous one.
MODIFIERS: tuple[Callable[[Allocation, FinancialMetrics], Allocation], ...] = (
    apply_variable_trend,
    apply_checking_health,
    apply_investment_ratio,
)


def apply_modifiers(allocation: Allocation, metrics: FinancialMetrics) -> Allocation:
    for modifier in MODIFIERS:
        updated = modifier(allocation, metrics)
        if updated != allocation:
            logger.debug("%s: %s -> %s", modifier.__name__, allocation, updated)
        allocation = updated
    return allocation


def normalize_allocation(allocation: Allocation) -> Allocation:
    total = allocation.total()
    if total <= 0:
        return allocation

    factor = 100 / total
    rounded = {t: round_half_up(allocation[t] * factor) for t in RECO_ORDER}
    diff = 100 - sum(rounded.values())
    if diff:
        # max() keeps the first maximum, so ties resolve in display order.
        largest = max(RECO_ORDER, key=lambda t: rounded[t])
        rounded[largest] += diff
    return Allocation.from_mapping(rounded)


def apply_min_share(allocation: Allocation, min_share: float) -> Allocation:
    kept = [t for t in RECO_ORDER if allocation[t] >= min_share]
    if len(kept) < MIN_ALLOCATION_TYPES:
        largest = sorted(RECO_ORDER, key=lambda t: allocation[t], reverse=True)[:MIN_ALLOCATION_TYPES]
        kept = [t for t in RECO_ORDER if t in largest]
        leader, runner_up = largest
        if allocation[runner_up] <= 0 < allocation[leader]:
            # The runner-up takes the floor from the leader so two types stay positive.
            floor = max(min_share, 1.0)
            allocation = allocation.with_values(
                **{leader.value: allocation[leader] - floor, runner_up.value: floor}
            )
    if len(kept) == len(RECO_ORDER):
        return allocation

    removed = [t for t in RECO_ORDER if t not in kept]
    share = sum(allocation[t] for t in removed) / len(kept)
    logger.debug("Filtered types below %.1f%%: %s", min_share, [t.value for t in removed])
    redistributed = {t: (allocation[t] + share if t in kept else 0.0) for t in RECO_ORDER}
    return normalize_allocation(Allocation.from_mapping(redistributed))


def compute_allocation(
    tier: SavingsTier,
    metrics: FinancialMetrics,
    config: AllocationConfig = DEFAULT_ALLOCATION_CONFIG,
) -> Allocation:
    base = config.base_allocation(tier)
    modified = apply_modifiers(base, metrics)
    normalized = normalize_allocation(modified)
    final = apply_min_share(normalized, config.min_share)
    logger.debug("Allocation for tier %s: base=%s final=%s", tier.value, base, final)
    return final
