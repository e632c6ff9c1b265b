from __future__ import annotations

WARNING_MULTIPLIER = 0.5

HEALTH_COLORS = {
    "safe": "#34d399",
    "warning": "#f59e0b",
    "danger": "#ef4444",
}


def status_from_safe_to_spend(safe_to_spend: float, safety_threshold: float = 0.0) -> str:
    if safe_to_spend >= safety_threshold:
        return "safe"
    if safe_to_spend >= safety_threshold * WARNING_MULTIPLIER:
        return "warning"
    return "danger"


def future_impact_message(status: str, month_label: str | None = None) -> str | None:
    if status == "safe":
        return None
    month = month_label or "next month"
    if status == "danger":
        return f"Heads up: your planned spending will push your projected balance for {month} below your safety threshold."
    return f"Note: this spending will bring your projected balance for {month} below your comfort threshold."


def assess_financial_health(safe_to_spend: float, safety_threshold: float = 0.0, month_label: str | None = None) -> dict:
    status = status_from_safe_to_spend(safe_to_spend, safety_threshold)
    return {
        "status": status,
        "color": HEALTH_COLORS[status],
        "safe_to_spend": round(float(safe_to_spend), 2),
        "safety_threshold": round(float(safety_threshold), 2),
        "future_impact_message": future_impact_message(status, month_label),
    }
