from __future__ import annotations

import streamlit as st

from schemas.domain import RECO_ORDER, TIER_ORDER, SavingsTier
from services.allocation import (
    CHECKING_SHIFT,
    INVESTMENT_RATIO_FLOOR,
    INVESTMENT_SHIFT,
    TREND_HIGH_MAX_SHIFT,
    TREND_HIGH_PCT,
    TREND_LOW_MAX_SHIFT,
    TREND_LOW_PCT,
)
from services.allocation_config import get_allocation_config, reset_allocation_config, save_min_share, save_tier_allocation
from services.recommendations import tier_allocation_frame


def render(session):
    st.header("Recommendation Engine")
    st.caption("How safe-to-spend is split into save / invest / enjoy / keep actions.")

    config = get_allocation_config(session)

    st.subheader("Base allocation per savings tier")
    st.dataframe(tier_allocation_frame(config), use_container_width=True, hide_index=True)

    st.subheader("Contextual modifiers (applied in order)")
    st.markdown(
        f"1. **Variable trend**: above {TREND_HIGH_PCT:.0f}% of the 3-month average, up to {TREND_HIGH_MAX_SHIFT:.0f} pts "
        f"move from enjoy to keep; below {TREND_LOW_PCT:.0f}%, up to {TREND_LOW_MAX_SHIFT:.0f} pts move back to enjoy.\n"
        f"2. **Checking health**: when checking covers less than twice the monthly commitments, keep gains {CHECKING_SHIFT:.0f} pts "
        f"taken equally from save and invest.\n"
        f"3. **Investment ratio**: when investments are below {INVESTMENT_RATIO_FLOOR:.0%} of savings, invest gains "
        f"{INVESTMENT_SHIFT:.0f} pts from the larger of save and enjoy."
    )
    st.caption(f"Types under {config.min_share:g}% are dropped and their share is redistributed. Percentages always total 100.")

    st.divider()
    st.subheader("Edit tier table")
    with st.form("tier_form"):
        tier = st.selectbox("Tier", [t.value for t in TIER_ORDER], format_func=lambda v: config.tier_labels[SavingsTier(v)])
        row = config.tier_allocations[SavingsTier(tier)]
        cols = st.columns(4)
        shares = {
            t.value: cols[i].number_input(config.reco_titles[t], min_value=0.0, max_value=100.0, value=float(row[t]), step=1.0)
            for i, t in enumerate(RECO_ORDER)
        }
        tier_submit = st.form_submit_button("Save tier", type="primary")
    if tier_submit:
        try:
            save_tier_allocation(session, tier, shares)
            st.success(f"Saved allocation for {tier}.")
        except ValueError as exc:
            st.error(f"Invalid allocation: {exc}")

    with st.form("min_share_form"):
        min_share = st.number_input("Minimum share (%)", min_value=0.0, max_value=50.0, value=float(config.min_share), step=1.0)
        share_submit = st.form_submit_button("Save minimum share")
    if share_submit:
        try:
            updated = save_min_share(session, min_share)
            st.success(f"Minimum share set to {updated.min_share:g}%.")
        except ValueError as exc:
            st.error(f"Invalid minimum share: {exc}")

    if st.button("Reset to defaults"):
        reset_allocation_config(session)
        st.success("Allocation configuration reset.")
