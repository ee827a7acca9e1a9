"""
360° Appraisal Analytics — Interactive Dashboard

Run with:  streamlit run app.py
"""

import io
import logging
import sys
import tempfile
from datetime import date
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from appraisal_dashboard.config import (
    CATEGORIES,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_SCORE,
    WORKBOOK_FILE,
    WORKBOOK_URL,
)
from appraisal_dashboard.dashboard import (
    build_data_context,
    get_dashboard_view,
    get_manager_detail,
)
from appraisal_dashboard.exceptions import DataUnavailableError
from appraisal_dashboard.filters import normalize_filters
from appraisal_dashboard.loaders import load_appraisal_workbook
from appraisal_dashboard.simulator import generate_sheets, write_workbook
from appraisal_dashboard.transforms import (
    build_competency_table,
    build_distribution_frame,
    build_export_tables,
    build_manager_summary_table,
)

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="360° Appraisal Analytics",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

BAND_COLORS = {
    "Excellent": "#2ecc71",
    "Good": "#3498db",
    "Average": "#f39c12",
    "Needs Improvement": "#e74c3c",
}


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_all_data():
    if WORKBOOK_URL:
        return load_appraisal_workbook(WORKBOOK_URL), False
    if WORKBOOK_FILE.exists():
        return load_appraisal_workbook(WORKBOOK_FILE), False

    path = Path(tempfile.mkdtemp()) / "simulated_360.xlsx"
    write_workbook(generate_sheets(), path)
    return load_appraisal_workbook(path), True


try:
    all_responses, simulated = load_all_data()
except DataUnavailableError as e:
    st.error(f"Failed to load appraisal data: {e}")
    st.stop()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("360° Appraisal")
st.sidebar.markdown("Manager Competency Dashboard")
if simulated:
    st.sidebar.caption("Showing simulated data")
st.sidebar.divider()

base_view = get_dashboard_view(all_responses)

selected_managers = st.sidebar.multiselect("Managers", base_view["available_managers"])
selected_relationships = st.sidebar.multiselect(
    "Relationships", base_view["available_relationships"]
)
score_range = st.sidebar.slider(
    "Score range", min_value=1.0, max_value=float(MAX_SCORE), value=(1.0, float(MAX_SCORE)),
    step=0.5, help="Not applied to the data yet.",
)

filters = normalize_filters({
    "managers": selected_managers,
    "relationships": selected_relationships,
    "score_range": score_range,
})

page = st.sidebar.radio(
    "Navigate",
    ["Overview", "Leaderboard", "Competencies", "Feedback", "AI Context"],
)

view = get_dashboard_view(all_responses, filters)
stats = view["overall_stats"]

st.sidebar.divider()
export = build_export_tables(view["manager_summaries"], view["responses"])
buffer = io.BytesIO()
with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
    for sheet_name, df in export.items():
        df.to_excel(writer, sheet_name=sheet_name, index=False)
st.sidebar.download_button(
    "Export to Excel",
    data=buffer.getvalue(),
    file_name=f"360_Analytics_{date.today().isoformat()}.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)


# ---------------------------------------------------------------------------
# Helper: stats card
# ---------------------------------------------------------------------------
def stats_card(label: str, value: str, subtitle: str = "", color: str = "#3498db"):
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">{value}</div>
            <div style="font-size: 13px; color: #666;">{subtitle}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


# ===========================================================================
# PAGE: Overview
# ===========================================================================
if page == "Overview":
    st.title("Overview")

    cols = st.columns(4)
    with cols[0]:
        stats_card("Total Responses", f"{stats.total_responses:,}")
    with cols[1]:
        stats_card("Managers Reviewed", f"{stats.total_managers}")
    with cols[2]:
        pct = stats.avg_overall_score / MAX_SCORE * 100
        stats_card("Average Score", f"{stats.avg_overall_score}/4.0", f"{pct:.0f}% performance", "#f39c12")
    with cols[3]:
        stats_card("Top Performer", stats.top_performer, f"Score: {stats.top_score:.2f}", "#2ecc71")

    st.divider()

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Score Distribution")
        dist = build_distribution_frame(view["score_distribution"], "score")
        fig = go.Figure(go.Bar(
            x=dist["score"].astype(str),
            y=dist["count"],
            marker_color=["#e74c3c", "#f39c12", "#3498db", "#2ecc71"],
            text=dist["share_pct"].apply(lambda x: f"{x:.1f}%"),
            textposition="outside",
        ))
        fig.update_layout(
            height=350,
            xaxis_title="Rating",
            yaxis_title="Count",
            plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Reviewer Relationships")
        rel = build_distribution_frame(view["relationship_distribution"], "relationship")
        if rel.empty:
            st.info("No responses match the current filters.")
        else:
            fig = px.pie(rel, names="relationship", values="count", hole=0.4)
            fig.update_layout(height=350, margin=dict(l=10, r=10, t=10, b=10))
            st.plotly_chart(fig, use_container_width=True)


# ===========================================================================
# PAGE: Leaderboard
# ===========================================================================
elif page == "Leaderboard":
    st.title("Manager Leaderboard")

    summaries = view["manager_summaries"]
    table = build_manager_summary_table(summaries)

    if table.empty:
        st.warning("No manager data for the current filters.")
    else:
        def color_band(val):
            color = BAND_COLORS.get(val, "#95a5a6")
            return f"background-color: {color}22; color: {color}"

        styled = table.style.map(color_band, subset=["band"])
        st.dataframe(styled, use_container_width=True, hide_index=True)

        fig = go.Figure()
        for key, label in CATEGORIES.items():
            fig.add_trace(go.Bar(
                x=table["manager_name"],
                y=table[f"avg_{key}"],
                name=label,
            ))
        fig.update_layout(
            barmode="group",
            height=400,
            yaxis_title="Average (0-4)",
            yaxis_range=[0, MAX_SCORE],
            plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)

        st.subheader("Manager Detail")
        names = [s.manager_name for s in summaries]
        chosen = st.selectbox("Select manager", names)
        detail = get_manager_detail(summaries[names.index(chosen)])
        summary = detail["summary"]

        st.caption(
            f"**{summary.overall_score:.2f}** — {detail['band']} • {summary.total_responses} reviews"
        )

        cat_cols = st.columns(3)
        for i, cat in enumerate(detail["categories"]):
            with cat_cols[i]:
                stats_card(cat["category"], f"{cat['score']:.2f}", cat["band"],
                           BAND_COLORS.get(cat["band"], "#95a5a6"))

        comp = build_competency_table(detail["competency_scores"])
        fig = go.Figure(go.Scatterpolar(
            r=comp["score"].tolist() + comp["score"].tolist()[:1],
            theta=comp["competency"].tolist() + comp["competency"].tolist()[:1],
            fill="toself",
            line=dict(color="#3498db"),
        ))
        fig.update_layout(
            polar=dict(radialaxis=dict(range=[0, MAX_SCORE])),
            height=450,
            showlegend=False,
        )
        st.plotly_chart(fig, use_container_width=True)

        themes = detail["feedback_themes"]
        t1, t2, t3 = st.columns(3)
        for col, title, items in (
            (t1, "Stop Doing", themes.stop_doing),
            (t2, "Start Doing", themes.start_doing),
            (t3, "Continue Doing", themes.continue_doing),
        ):
            with col:
                st.markdown(f"**{title}** ({len(items)})")
                for item in items[:20]:
                    st.markdown(f"- {item}")


# ===========================================================================
# PAGE: Competencies
# ===========================================================================
elif page == "Competencies":
    st.title("Competency Breakdown")

    comp = build_competency_table(view["competency_scores"])

    fig = px.bar(
        comp,
        x="score",
        y="competency",
        color="category",
        orientation="h",
        text=comp["percentage"].apply(lambda x: f"{x:.1f}%"),
        range_x=[0, MAX_SCORE],
    )
    fig.update_layout(height=500, yaxis_title="", plot_bgcolor="rgba(0,0,0,0)")
    st.plotly_chart(fig, use_container_width=True)

    st.dataframe(comp.drop(columns=["key"]), use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Feedback
# ===========================================================================
elif page == "Feedback":
    st.title("Feedback Themes")

    themes = view["feedback_themes"]
    tab1, tab2, tab3 = st.tabs([
        f"Stop Doing ({len(themes.stop_doing)})",
        f"Start Doing ({len(themes.start_doing)})",
        f"Continue Doing ({len(themes.continue_doing)})",
    ])
    for tab, items in ((tab1, themes.stop_doing), (tab2, themes.start_doing),
                       (tab3, themes.continue_doing)):
        with tab:
            if not items:
                st.info("No comments for the current filters.")
            for item in items[:20]:
                st.markdown(f"- {item}")


# ===========================================================================
# PAGE: AI Context
# ===========================================================================
elif page == "AI Context":
    st.title("AI Assistant Data Context")
    st.caption("Digest of the filtered data sent to the chat assistant.")

    context = build_data_context(view)
    if context:
        st.code(context, language="text")
    else:
        st.info("No data available for the current filters.")
