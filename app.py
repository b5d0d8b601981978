"""Streamlit UI for the Marketing Performance Dashboard."""

import json
import logging
from datetime import datetime

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from marketing_insights.exceptions import DashboardError
from marketing_insights.services import DashboardService

logging.basicConfig(level=logging.INFO)

# Page config
st.set_page_config(
    page_title="Marketing Performance",
    page_icon="📊",
    layout="wide",
)


def format_number(n: int | float, decimals: int = 0) -> str:
    """Format number with commas."""
    if decimals == 0:
        return f"{int(n):,}"
    return f"{n:,.{decimals}f}"


def format_currency(n: int | float) -> str:
    """Whole-unit USD, e.g. $12,345."""
    return f"${format_number(n)}"


def format_pct(n: float | None, decimals: int = 2) -> str:
    """Format percentage."""
    if n is None:
        return "N/A"
    return f"{n:.{decimals}f}%"


def create_bubble_map(points: list) -> go.Figure:
    """Regional bubble map: size ~ revenue, colour ~ spend."""
    fig = go.Figure(go.Scattergeo(
        lat=[p["lat"] for p in points],
        lon=[p["lng"] for p in points],
        text=[
            f"{p['region']}, {p['country']}<br>"
            f"Revenue {format_currency(p['revenue'])}<br>Spend {format_currency(p['spend'])}"
            for p in points
        ],
        hoverinfo="text",
        mode="markers+text",
        textposition="top center",
        marker=dict(
            size=[p["radius"] * 2 for p in points],
            color=[p["color"] for p in points],
            opacity=0.9,
            line=dict(color="#0B1220", width=1),
        ),
    ))

    fig.update_geos(projection_type="equirectangular", showcountries=True, fitbounds="locations")
    fig.update_layout(height=520, margin=dict(l=0, r=0, t=0, b=0))
    return fig


def create_age_chart(age_chart: list) -> go.Figure:
    """Spend vs revenue by age group."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[a["age_group"] for a in age_chart],
        y=[a["spend"] for a in age_chart],
        name="Spend",
        marker_color="#3B82F6",
    ))
    fig.add_trace(go.Bar(
        x=[a["age_group"] for a in age_chart],
        y=[a["revenue"] for a in age_chart],
        name="Revenue",
        marker_color="#10B981",
    ))
    fig.update_layout(barmode="group", height=400, legend=dict(orientation="h"))
    return fig


def create_weekly_chart(weekly: list) -> go.Figure:
    """Weekly revenue vs spend lines."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[w["week_start"] for w in weekly],
        y=[w["revenue"] for w in weekly],
        name="Revenue",
        mode="lines",
        line=dict(color="#10B981", width=2),
    ))
    fig.add_trace(go.Scatter(
        x=[w["week_start"] for w in weekly],
        y=[w["spend"] for w in weekly],
        name="Spend",
        mode="lines",
        line=dict(color="#3B82F6", width=2),
    ))
    fig.update_layout(height=400, legend=dict(orientation="h"))
    return fig


def render_gender_metrics(label: str, totals: dict | None) -> None:
    totals = totals or {}
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(f"Total Clicks ({label})", format_number(totals.get("clicks", 0)))
    with col2:
        st.metric(f"Total Spend ({label})", format_currency(totals.get("spend", 0)))
    with col3:
        st.metric(f"Total Revenue ({label})", format_currency(totals.get("revenue", 0)))


def main():
    st.title("📊 Marketing Performance Dashboard")

    with st.sidebar:
        st.header("📁 Data Source")
        uploaded = st.file_uploader(
            "Marketing dataset (JSON) - Optional",
            type=["json"],
            help="Leave empty to fetch from the configured endpoint",
        )
        refresh_btn = st.button("🔄 Load Data", type="primary", use_container_width=True)

    if refresh_btn or "dashboard_summary" not in st.session_state:
        with st.spinner("Loading marketing data..."):
            try:
                service = DashboardService()
                if uploaded:
                    dataset = service.load_upload(uploaded.getvalue(), uploaded.name)
                else:
                    dataset = service.load_dataset()
                pack = service.build_pack(dataset)
                st.session_state["dashboard_summary"] = service.generate_summary_dict(pack)
            except DashboardError as e:
                st.error(f"Error loading data: {e}")
                return

    summary = st.session_state["dashboard_summary"]

    if summary["meta"]["is_fallback"]:
        st.warning("⚠️ Upstream data unavailable - showing fallback dataset")

    totals = summary["totals"]
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Spend", format_currency(totals["spend"]))
    with col2:
        st.metric("Total Revenue", format_currency(totals["revenue"]))
    with col3:
        st.metric("CTR", format_pct(totals["ctr"]))
    with col4:
        st.metric("ROAS", f"{totals['roas']:.2f}x")

    tab1, tab2, tab3, tab4 = st.tabs([
        "🌍 Region View",
        "👥 Demographic View",
        "📈 Weekly View",
        "📱 Device View",
    ])

    # =========================================================================
    # TAB 1: Region View
    # =========================================================================
    with tab1:
        st.header("Regional Performance Map")
        region = summary["region"]
        if region["points"]:
            st.plotly_chart(create_bubble_map(region["points"]), use_container_width=True)
            st.caption("Bubble size ~ revenue · blue = lower spend, red = higher spend")
        else:
            st.info("No mappable regional data available")

        if region["dropped_count"]:
            st.caption(f"{region['dropped_count']} location(s) not on the map: {', '.join(region['unmapped'])}")

    # =========================================================================
    # TAB 2: Demographic View
    # =========================================================================
    with tab2:
        st.header("Demographic Performance")
        demo = summary["demographic"]

        render_gender_metrics("Male", demo["male"])
        render_gender_metrics("Female", demo["female"])

        st.divider()
        st.subheader("Spend & Revenue by Age Group")
        if demo["age_group_chart"]:
            st.plotly_chart(create_age_chart(demo["age_group_chart"]), use_container_width=True)
        else:
            st.info("No demographic data available")

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Male Age Group Performance")
            st.dataframe(demo["male_age_groups"], use_container_width=True, hide_index=True)
        with col2:
            st.subheader("Female Age Group Performance")
            st.dataframe(demo["female_age_groups"], use_container_width=True, hide_index=True)

    # =========================================================================
    # TAB 3: Weekly View
    # =========================================================================
    with tab3:
        st.header("Weekly Performance: Revenue vs Spend")
        weekly = summary["weekly"]
        if weekly:
            st.plotly_chart(create_weekly_chart(weekly), use_container_width=True)
        else:
            st.info("No weekly data available")

    # =========================================================================
    # TAB 4: Device View
    # =========================================================================
    with tab4:
        st.header("Comparing Mobile vs Desktop performance")
        devices = summary["device"]
        if devices:
            fig = px.bar(
                devices,
                x="device",
                y=["revenue", "spend"],
                barmode="group",
                color_discrete_sequence=["#10B981", "#3B82F6"],
            )
            st.plotly_chart(fig, use_container_width=True)
            st.dataframe(devices, use_container_width=True, hide_index=True)
        else:
            st.info("No device data available")

    st.divider()
    st.download_button(
        label="📥 Download Dashboard JSON",
        data=json.dumps(summary, indent=2, default=str),
        file_name=f"marketing_dashboard_{datetime.now().strftime('%Y%m%d')}.json",
        mime="application/json",
    )


if __name__ == "__main__":
    main()
