from __future__ import annotations

import streamlit as st

from services.allocation_config import get_allocation_config, save_variable_markers
from services.demo_loader import load_demo_data
from services.profile import get_or_create_profile, get_safety_thresholds, save_profile, save_safety_thresholds


def render(session):
    st.header("Settings & Data")

    st.subheader("Personal Profile")
    profile = get_or_create_profile(session)
    with st.form("profile_form"):
        full_name = st.text_input("Display name", value=profile.full_name)
        base_currency = st.text_input("Base currency", value=profile.base_currency, max_chars=8)
        submitted = st.form_submit_button("Save profile", type="primary")
    if submitted:
        updated = save_profile(session, full_name=full_name, base_currency=base_currency)
        st.success(f"Saved profile for {updated.full_name} ({updated.base_currency})")

    st.divider()
    st.subheader("Savings safety thresholds")
    st.caption("Your savings balance is compared against these to pick the savings tier.")
    thresholds = get_safety_thresholds(session)
    with st.form("thresholds_form"):
        c1, c2, c3 = st.columns(3)
        t_min = c1.number_input("Minimum", min_value=0.0, value=thresholds.safety_threshold_min, step=500.0)
        t_opt = c2.number_input("Optimal", min_value=0.0, value=thresholds.safety_threshold_optimal, step=500.0)
        t_comfort = c3.number_input("Comfort", min_value=0.0, value=thresholds.safety_threshold_comfort, step=500.0)
        thresholds_submit = st.form_submit_button("Save thresholds")
    if thresholds_submit:
        try:
            save_safety_thresholds(session, t_min, t_opt, t_comfort)
            st.success("Thresholds saved.")
        except ValueError as exc:
            st.error(f"Invalid thresholds: {exc}")

    st.divider()
    st.subheader("Variable spending categories")
    config = get_allocation_config(session)
    with st.form("markers_form"):
        raw = st.text_input(
            "Category name markers (comma separated)",
            value=", ".join(config.variable_markers),
            help="Categories flagged as variable always count; these markers also match category names.",
        )
        markers_submit = st.form_submit_button("Save markers")
    if markers_submit:
        try:
            updated = save_variable_markers(session, [m for m in raw.split(",")])
            st.success(f"Markers saved: {', '.join(updated.variable_markers)}")
        except ValueError as exc:
            st.error(f"Invalid markers: {exc}")

    st.divider()
    if st.button("Load demo data"):
        out = load_demo_data(session)
        st.success(f"Demo data loaded ({out['transactions_created']} new transaction(s)).")
