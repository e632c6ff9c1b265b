from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_SAFETY_THRESHOLD_MIN = 5000.0
DEFAULT_SAFETY_THRESHOLD_OPTIMAL = 10000.0
DEFAULT_SAFETY_THRESHOLD_COMFORT = 20000.0

AccountType = Literal["checking", "savings", "investment", "other"]
ProjectStatus = Literal["active", "paused", "completed"]
ObjectiveStatus = Literal["active", "paused", "completed"]


class SavingsTier(str, Enum):
    CRITICAL = "critical"
    BELOW_OPTIMAL = "below_optimal"
    HEALTHY = "healthy"
    COMFORTABLE = "comfortable"


class RecoType(str, Enum):
    SAVE = "save"
    INVEST = "invest"
    ENJOY = "enjoy"
    KEEP = "keep"


TIER_ORDER = (SavingsTier.CRITICAL, SavingsTier.BELOW_OPTIMAL, SavingsTier.HEALTHY, SavingsTier.COMFORTABLE)
RECO_ORDER = (RecoType.SAVE, RecoType.INVEST, RecoType.ENJOY, RecoType.KEEP)


class AccountRecord(BaseModel):
    id: int | str | None = None
    name: str = ""
    type: AccountType = "checking"
    balance: float = 0.0
    currency: str = "EUR"


class TransactionRecord(BaseModel):
    date: date
    amount: float
    id: int | str | None = None
    account_id: int | str | None = None
    category: str | None = None
    is_variable: bool = False
    is_recurring: bool = False
    is_forecast: bool = False
    project_id: int | str | None = None


class ProjectRecord(BaseModel):
    id: int | str | None = None
    name: str = ""
    target_amount: float = 0.0
    monthly_allocation: float = 0.0
    status: ProjectStatus = "active"
    source_account_id: int | str | None = None
    linked_account_id: int | str | None = None


class ObjectiveRecord(BaseModel):
    id: int | str | None = None
    name: str = ""
    target_yearly_amount: float = 0.0
    linked_account_id: int | str | None = None
    status: ObjectiveStatus = "active"


class SafetyThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    safety_threshold_min: float = Field(default=DEFAULT_SAFETY_THRESHOLD_MIN, ge=0)
    safety_threshold_optimal: float = Field(default=DEFAULT_SAFETY_THRESHOLD_OPTIMAL, ge=0)
    safety_threshold_comfort: float = Field(default=DEFAULT_SAFETY_THRESHOLD_COMFORT, ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        if not (self.safety_threshold_min < self.safety_threshold_optimal < self.safety_threshold_comfort):
            raise ValueError("Safety thresholds must be ordered: min < optimal < comfort")
        return self


class ProjectProgress(BaseModel):
    id: int | str | None = None
    name: str
    target_amount: float
    monthly_allocation: float
    progress_percentage: float
    status: str


class ObjectiveProgress(BaseModel):
    id: int | str | None = None
    name: str
    target_yearly_amount: float
    current_year_invested: float
    progress_percentage: float
    account_name: str | None = None
    account_type: str | None = None
    status: str


class FinancialMetrics(BaseModel):
    """Derived metrics bundle consumed by the tier classifier, engine and builder."""

    model_config = ConfigDict(frozen=True)

    safe_to_spend: float = 0.0
    current_checking_balance: float = 0.0
    remaining_fixed_expenses: float = 0.0
    committed_allocations: float = 0.0

    avg_variable_expenses_3m: float = 0.0
    current_month_variable: float = 0.0
    variable_trend_percentage: float = 0.0

    total_checking: float = 0.0
    total_savings: float = 0.0
    total_invested: float = 0.0

    safety_threshold_min: float = DEFAULT_SAFETY_THRESHOLD_MIN
    safety_threshold_optimal: float = DEFAULT_SAFETY_THRESHOLD_OPTIMAL
    safety_threshold_comfort: float = DEFAULT_SAFETY_THRESHOLD_COMFORT
    current_savings: float = 0.0

    projected_surplus: float = 0.0
    available_savings: float = 0.0
    savings_focus: RecoType = RecoType.SAVE
    projects_with_progress: tuple[ProjectProgress, ...] = ()
    global_projects_percentage: float = 0.0
    objectives_with_progress: tuple[ObjectiveProgress, ...] = ()
    global_objectives_percentage: float = 0.0


@dataclass(frozen=True)
class Allocation:
    """Percentage split across the four recommendation types.

    Instances are never mutated; modifiers and normalization return new values.
    """

    save: float = 0.0
    invest: float = 0.0
    enjoy: float = 0.0
    keep: float = 0.0

    @classmethod
    def from_mapping(cls, values: dict) -> "Allocation":
        return cls(**{RecoType(k).value: float(v) for k, v in values.items()})

    def __getitem__(self, reco_type: RecoType | str) -> float:
        return getattr(self, RecoType(reco_type).value)

    def with_values(self, **changes: float) -> "Allocation":
        return replace(self, **changes)

    def total(self) -> float:
        return self.save + self.invest + self.enjoy + self.keep

    def present_types(self) -> list[RecoType]:
        return [t for t in RECO_ORDER if self[t] > 0]

    def as_dict(self) -> dict[RecoType, float]:
        return {t: self[t] for t in RECO_ORDER}


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: RecoType
    title: str
    description: str
    amount: int
    percentage: int
    color: str
    icon: str
    action_route: str | None = None
    action_label: str


DEFAULT_TIER_ALLOCATIONS: dict[SavingsTier, dict[RecoType, float]] = {
    SavingsTier.CRITICAL: {RecoType.SAVE: 60, RecoType.INVEST: 0, RecoType.ENJOY: 10, RecoType.KEEP: 30},
    SavingsTier.BELOW_OPTIMAL: {RecoType.SAVE: 40, RecoType.INVEST: 15, RecoType.ENJOY: 20, RecoType.KEEP: 25},
    SavingsTier.HEALTHY: {RecoType.SAVE: 15, RecoType.INVEST: 35, RecoType.ENJOY: 30, RecoType.KEEP: 20},
    SavingsTier.COMFORTABLE: {RecoType.SAVE: 10, RecoType.INVEST: 45, RecoType.ENJOY: 30, RecoType.KEEP: 15},
}


class AllocationConfig(BaseModel):
    """Operator-tunable data for the allocation engine and the builder.

    The tier table is validated on construction: every tier and every type must
    be present, values non-negative, and each row must sum to 100.
    """

    model_config = ConfigDict(frozen=True)

    tier_allocations: dict[SavingsTier, dict[RecoType, float]] = Field(
        default_factory=lambda: {tier: dict(row) for tier, row in DEFAULT_TIER_ALLOCATIONS.items()}
    )
    min_share: float = Field(default=5.0, ge=0, le=50)
    variable_markers: tuple[str, ...] = ("variable",)
    currency_symbol: str = "€"

    reco_titles: dict[RecoType, str] = {
        RecoType.SAVE: "Save",
        RecoType.INVEST: "Invest",
        RecoType.ENJOY: "Enjoy",
        RecoType.KEEP: "Keep",
    }
    reco_colors: dict[RecoType, str] = {
        RecoType.SAVE: "#34d399",
        RecoType.INVEST: "#a78bfa",
        RecoType.ENJOY: "#f59e0b",
        RecoType.KEEP: "#60a5fa",
    }
    reco_icons: dict[RecoType, str] = {
        RecoType.SAVE: "shield-outline",
        RecoType.INVEST: "trending-up-outline",
        RecoType.ENJOY: "sparkles-outline",
        RecoType.KEEP: "hourglass-outline",
    }
    action_routes: dict[RecoType, str | None] = {
        RecoType.SAVE: "accounts",
        RecoType.INVEST: "objectives",
        RecoType.ENJOY: None,
        RecoType.KEEP: None,
    }
    action_labels: dict[RecoType, str] = {
        RecoType.SAVE: "Transfer",
        RecoType.INVEST: "View objectives",
        RecoType.ENJOY: "Got it",
        RecoType.KEEP: "Got it",
    }
    tier_labels: dict[SavingsTier, str] = {
        SavingsTier.CRITICAL: "Critical savings",
        SavingsTier.BELOW_OPTIMAL: "Savings to strengthen",
        SavingsTier.HEALTHY: "Good momentum",
        SavingsTier.COMFORTABLE: "Comfortable savings",
    }
    tier_colors: dict[SavingsTier, str] = {
        SavingsTier.CRITICAL: "#ef4444",
        SavingsTier.BELOW_OPTIMAL: "#f59e0b",
        SavingsTier.HEALTHY: "#34d399",
        SavingsTier.COMFORTABLE: "#34d399",
    }

    @field_validator("tier_allocations")
    @classmethod
    def _check_tier_rows(cls, value):
        missing = [t.value for t in TIER_ORDER if t not in value]
        if missing:
            raise ValueError(f"Missing tier rows: {', '.join(missing)}")
        for tier, row in value.items():
            absent = [t.value for t in RECO_ORDER if t not in row]
            if absent:
                raise ValueError(f"Tier '{tier.value}' is missing types: {', '.join(absent)}")
            if any(v < 0 for v in row.values()):
                raise ValueError(f"Tier '{tier.value}' has a negative share")
            total = sum(row.values())
            if abs(total - 100) > 1e-9:
                raise ValueError(f"Tier '{tier.value}' must sum to 100 (got {total:g})")
            if sum(1 for v in row.values() if v > 0) < 2:
                raise ValueError(f"Tier '{tier.value}' needs at least two positive shares")
        return value

    @field_validator("variable_markers")
    @classmethod
    def _clean_markers(cls, value):
        return tuple(m.strip().lower() for m in value if m and m.strip())

    def base_allocation(self, tier: SavingsTier) -> Allocation:
        return Allocation.from_mapping(self.tier_allocations[tier])


DEFAULT_ALLOCATION_CONFIG = AllocationConfig()
