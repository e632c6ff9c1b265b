from __future__ import annotations

import logging

from sqlalchemy import select

from db import models
from schemas.domain import (
    DEFAULT_SAFETY_THRESHOLD_COMFORT,
    DEFAULT_SAFETY_THRESHOLD_MIN,
    DEFAULT_SAFETY_THRESHOLD_OPTIMAL,
    SafetyThresholds,
)

logger = logging.getLogger(__name__)


def get_or_create_profile(session):
    profile = session.scalar(select(models.Profile).order_by(models.Profile.id))
    if profile:
        return profile

    profile = models.Profile(full_name="Personal User", base_currency="EUR")
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def get_safety_thresholds(session) -> SafetyThresholds:
    profile = get_or_create_profile(session)
    return thresholds_from_profile(profile)


def thresholds_from_profile(profile) -> SafetyThresholds:
    if profile is None:
        return SafetyThresholds()
    return SafetyThresholds(
        safety_threshold_min=_or_default(profile.safety_threshold_min, DEFAULT_SAFETY_THRESHOLD_MIN),
        safety_threshold_optimal=_or_default(profile.safety_threshold_optimal, DEFAULT_SAFETY_THRESHOLD_OPTIMAL),
        safety_threshold_comfort=_or_default(profile.safety_threshold_comfort, DEFAULT_SAFETY_THRESHOLD_COMFORT),
    )


def _or_default(value, default: float) -> float:
    return float(value) if value is not None else default


def save_safety_thresholds(session, threshold_min: float, threshold_optimal: float, threshold_comfort: float):
    values = [float(threshold_min), float(threshold_optimal), float(threshold_comfort)]
    if any(v < 0 for v in values):
        raise ValueError("Safety thresholds must be non-negative")
    if not (values[0] < values[1] < values[2]):
        raise ValueError("Safety thresholds must be ordered: min < optimal < comfort")

    profile = get_or_create_profile(session)
    profile.safety_threshold_min, profile.safety_threshold_optimal, profile.safety_threshold_comfort = values
    session.commit()
    session.refresh(profile)
    logger.info("Saved safety thresholds %s", values)
    return profile


def save_profile(session, full_name: str, base_currency: str):
    profile = get_or_create_profile(session)
    profile.full_name = (full_name or "Personal User").strip() or "Personal User"
    profile.base_currency = (base_currency or "EUR").strip().upper() or "EUR"
    session.commit()
    session.refresh(profile)
    return profile
