from __future__ import annotations

from datetime import date

import altair as alt
import streamlit as st

from services.allocation_config import get_allocation_config
from services.dismissals import SqlDismissalStore, dismiss, filter_dismissed, restore_all
from services.financial_health import assess_financial_health
from services.metrics import compute_financial_metrics
from services.recommendations import build_recommendation_result, format_money, recommendations_frame
from services.snapshot import load_financial_snapshot


def render(session):
    st.header("Pilotage")
    st.caption("What you can safely spend this month, and how to split it.")

    config = get_allocation_config(session)
    snapshot = load_financial_snapshot(session)
    metrics = compute_financial_metrics(
        snapshot.accounts,
        snapshot.transactions,
        snapshot.projects,
        snapshot.objectives,
        snapshot.thresholds,
        config=config,
    )
    result = build_recommendation_result(metrics, config)
    symbol = config.currency_symbol

    # Safe-to-spend should at least cover a typical month of variable spending.
    health = assess_financial_health(metrics.safe_to_spend, metrics.avg_variable_expenses_3m, date.today().strftime("%B"))
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Safe to spend", format_money(metrics.safe_to_spend, symbol))
    c2.metric("Checking", format_money(metrics.current_checking_balance, symbol))
    c3.metric("Fixed expenses left", format_money(metrics.remaining_fixed_expenses, symbol))
    c4.metric("Committed to projects", format_money(metrics.committed_allocations, symbol))
    if health["future_impact_message"]:
        st.warning(health["future_impact_message"])

    st.subheader("Variable spending trend")
    t1, t2, t3 = st.columns(3)
    t1.metric("3-month average", format_money(metrics.avg_variable_expenses_3m, symbol))
    t2.metric("This month", format_money(metrics.current_month_variable, symbol))
    t3.metric("Trend", f"{metrics.variable_trend_percentage:.0f}%")

    st.subheader("Savings health")
    tier_color = config.tier_colors[result.tier]
    st.markdown(
        f"<span style='color:{tier_color};font-weight:600'>{config.tier_labels[result.tier]}</span> "
        f"({format_money(metrics.current_savings, symbol)} saved, optimal {format_money(metrics.safety_threshold_optimal, symbol)})",
        unsafe_allow_html=True,
    )

    st.subheader("Recommendations")
    store = SqlDismissalStore(session)
    today = date.today()
    visible = filter_dismissed(result.recommendations, store, today)
    if not result.recommendations:
        st.info("Nothing to allocate this month.")
    elif not visible:
        st.info("All recommendations dismissed for this month.")

    if result.recommendations:
        split = recommendations_frame(result.recommendations)
        colors = [r.color for r in result.recommendations]
        bars = (
            alt.Chart(split)
            .mark_bar(cornerRadiusTopLeft=6, cornerRadiusTopRight=6)
            .encode(
                x=alt.X("title:N", sort=None, title=None),
                y=alt.Y("amount:Q", title=f"Amount ({symbol})"),
                color=alt.Color("title:N", scale=alt.Scale(domain=list(split["title"]), range=colors), legend=None),
                tooltip=["title", "percentage", "amount"],
            )
            .properties(height=240, title="Suggested split")
        )
        st.altair_chart(bars, use_container_width=True)

    for reco in visible:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            left.markdown(f"<span style='color:{reco.color};font-weight:600'>{reco.title}</span> · {reco.percentage}%", unsafe_allow_html=True)
            left.write(reco.description)
            right.metric("Amount", format_money(reco.amount, symbol))
            if right.button("Dismiss", key=f"dismiss_{reco.type.value}"):
                dismiss(store, reco.type, today)
                st.rerun()

    if len(visible) < len(result.recommendations) and st.button("Show dismissed recommendations"):
        restore_all(store, today)
        st.rerun()

    if metrics.projects_with_progress:
        st.subheader("Projects")
        st.caption(f"Overall progress: {metrics.global_projects_percentage:.0f}%")
        for project in metrics.projects_with_progress:
            st.progress(min(1.0, project.progress_percentage / 100), text=f"{project.name} ({project.progress_percentage:.0f}%)")

    if metrics.objectives_with_progress:
        st.subheader("Objectives")
        st.caption(f"Overall progress: {metrics.global_objectives_percentage:.0f}%")
        for objective in metrics.objectives_with_progress:
            st.progress(
                min(1.0, objective.progress_percentage / 100),
                text=f"{objective.name}: {format_money(objective.current_year_invested, symbol)} / {format_money(objective.target_yearly_amount, symbol)}",
            )
