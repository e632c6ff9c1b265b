from __future__ import annotations

import logging

from sqlalchemy import select

from db import models
from schemas.domain import DEFAULT_ALLOCATION_CONFIG, RECO_ORDER, AllocationConfig, RecoType, SavingsTier

logger = logging.getLogger(__name__)


def _get_or_create_row(session):
    row = session.scalar(select(models.AllocationSettings).order_by(models.AllocationSettings.id))
    if row:
        return row
    row = models.AllocationSettings(payload={})
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def get_allocation_config(session) -> AllocationConfig:
    row = session.scalar(select(models.AllocationSettings).order_by(models.AllocationSettings.id))
    if not row or not row.payload:
        return DEFAULT_ALLOCATION_CONFIG
    return AllocationConfig.model_validate(row.payload)


def _store(session, config: AllocationConfig) -> AllocationConfig:
    row = _get_or_create_row(session)
    row.payload = config.model_dump(mode="json")
    session.commit()
    return config


def save_tier_allocation(session, tier: SavingsTier | str, shares: dict) -> AllocationConfig:
    try:
        tier = SavingsTier(tier)
        row = {RecoType(k): float(v) for k, v in shares.items()}
    except ValueError as exc:
        raise ValueError(f"Unknown tier or recommendation type: {exc}") from exc

    current = get_allocation_config(session)
    table = {t: dict(r) for t, r in current.tier_allocations.items()}
    table[tier] = {t: row.get(t, 0.0) for t in RECO_ORDER}
    config = AllocationConfig.model_validate({**current.model_dump(), "tier_allocations": table})
    logger.info("Updated tier %s allocation: %s", tier.value, {t.value: v for t, v in table[tier].items()})
    return _store(session, config)


def save_min_share(session, min_share: float) -> AllocationConfig:
    current = get_allocation_config(session)
    config = AllocationConfig.model_validate({**current.model_dump(), "min_share": float(min_share)})
    logger.info("Updated minimum share to %.1f%%", config.min_share)
    return _store(session, config)


def save_variable_markers(session, markers: list[str]) -> AllocationConfig:
    current = get_allocation_config(session)
    config = AllocationConfig.model_validate({**current.model_dump(), "variable_markers": tuple(markers)})
    if not config.variable_markers:
        raise ValueError("At least one variable-spending marker is required")
    logger.info("Updated variable-spending markers: %s", ", ".join(config.variable_markers))
    return _store(session, config)


def reset_allocation_config(session) -> AllocationConfig:
    row = _get_or_create_row(session)
    row.payload = {}
    session.commit()
    logger.info("Allocation configuration reset to defaults")
    return DEFAULT_ALLOCATION_CONFIG
