"""
FIQ Supply Chain Dashboard: interactive Streamlit front end.

Run with:  streamlit run app.py
"""

import io
import sys
from pathlib import Path

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from fiq_dashboard.alerts import detect_risks
from fiq_dashboard.config import EMPTY_KPIS, OPTIONAL_MARKER, REQUIRED_FIELDS
from fiq_dashboard.dashboard import (
    aggregate,
    export_orders_csv,
    filter_orders_by_status,
    format_kpis,
    orders_to_frame,
)
from fiq_dashboard.loaders import load_csv, load_excel
from fiq_dashboard.mapping import apply_mapping, preview_mapping, suggest_mapping
from fiq_dashboard.simulator import generate_raw_frame

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="FIQ Supply Chain Dashboard",
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATUS_COLORS = {
    "Delivered": "#2ecc71",
    "Shipped": "#3498db",
    "Processing": "#f39c12",
    "Cancelled": "#e74c3c",
}

ALL_STATUSES = "All statuses"


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_raw(file_bytes: bytes | None, file_name: str | None) -> pd.DataFrame:
    if file_bytes is None:
        return generate_raw_frame()
    buffer = io.BytesIO(file_bytes)
    if file_name and file_name.lower().endswith((".xlsx", ".xlsm")):
        return load_excel(buffer)
    return load_csv(buffer)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("FIQ Supply Chain")
st.sidebar.markdown("Orders, shipments & inventory at a glance")
st.sidebar.divider()

uploaded = st.sidebar.file_uploader("Upload CSV or Excel", type=["csv", "xlsx", "xlsm"])
use_demo = st.sidebar.checkbox("Use simulated data", value=uploaded is None)

raw = None
if uploaded is not None:
    try:
        raw = load_raw(uploaded.getvalue(), uploaded.name)
    except ValueError as e:
        st.error(f"File Error: {e}")
elif use_demo:
    raw = load_raw(None, None)

if raw is None:
    st.title("FIQ Supply Chain Dashboard")
    st.info("Upload a CSV or Excel export, or tick 'Use simulated data', to begin.")
    for label, value in format_kpis(EMPTY_KPIS).items():
        st.sidebar.caption(f"{label}: {value}")
    st.stop()

# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------
headers = list(raw.columns)
suggested = suggest_mapping(headers)
options = [""] + headers

with st.sidebar.expander("Map Your Data Columns", expanded=uploaded is not None):
    mapping = {}
    for field_name, description in REQUIRED_FIELDS.items():
        optional = OPTIONAL_MARKER in description
        label = description.replace(f" {OPTIONAL_MARKER}", "") + ("" if optional else " *")
        default = suggested.get(field_name, "")
        mapping[field_name] = st.selectbox(
            label,
            options,
            index=options.index(default) if default in options else 0,
            format_func=lambda col: col or "Don't Map",
            key=f"map_{field_name}",
        )
    show_preview = st.checkbox("Preview mapped data")

try:
    if show_preview:
        st.subheader("Data Preview")
        st.dataframe(preview_mapping(raw, mapping), use_container_width=True, hide_index=True)
    rows = apply_mapping(raw, mapping)
except ValueError as e:
    st.warning(str(e))
    st.stop()

result = aggregate(rows)

page = st.sidebar.radio("Navigate", ["Overview", "Orders", "Alerts"])

st.sidebar.divider()
st.sidebar.caption(f"{len(rows)} records loaded")


# ---------------------------------------------------------------------------
# Helper: KPI card
# ---------------------------------------------------------------------------
def kpi_card(label: str, value: str, color: str = "#3498db"):
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">{value}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


# ===========================================================================
# PAGE: Overview
# ===========================================================================
if page == "Overview":
    st.title("Supply Chain Overview")

    cols = st.columns(4)
    for i, (label, value) in enumerate(format_kpis(result["kpis"]).items()):
        with cols[i]:
            kpi_card(label, value)

    st.divider()

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Orders by Status")
        if result["status_chart"]:
            status_df = pd.DataFrame(result["status_chart"])
            fig = px.pie(
                status_df,
                names="name",
                values="value",
                color="name",
                color_discrete_map=STATUS_COLORS,
                hole=0.4,
            )
            fig.update_layout(height=350, margin=dict(l=10, r=10, t=10, b=10))
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No order records.")

    with col2:
        st.subheader("Inventory by Warehouse")
        if result["location_chart"]:
            location_df = pd.DataFrame(result["location_chart"])
            fig = go.Figure(go.Bar(
                x=location_df["name"],
                y=location_df["quantity"],
                marker_color="#3498db",
            ))
            fig.update_layout(
                height=350,
                yaxis_title="Units",
                plot_bgcolor="rgba(0,0,0,0)",
                margin=dict(l=10, r=10, t=10, b=40),
            )
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No inventory records.")

    st.subheader("Order Volume Over Time")
    if result["volume_chart"]:
        volume_df = pd.DataFrame(result["volume_chart"])
        fig = go.Figure(go.Scatter(
            x=pd.to_datetime(volume_df["name"]),
            y=volume_df["orders"],
            mode="lines+markers",
            line=dict(color="#8e44ad", width=2),
        ))
        fig.update_layout(
            height=350,
            yaxis_title="Orders",
            xaxis_title="Date",
            plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No dated orders.")


# ===========================================================================
# PAGE: Orders
# ===========================================================================
elif page == "Orders":
    st.title("Order Details")

    all_orders = result["orders"]
    statuses = [point["name"] for point in result["status_chart"]]
    selected = st.selectbox("Filter by status", [ALL_STATUSES] + statuses)

    orders = all_orders if selected == ALL_STATUSES else filter_orders_by_status(all_orders, selected)
    st.caption(f"Showing {len(orders)} of {len(all_orders)} orders")

    st.dataframe(orders_to_frame(orders), use_container_width=True, hide_index=True)
    st.download_button(
        "Export CSV",
        data=export_orders_csv(orders),
        file_name="filtered_orders.csv",
        mime="text/csv",
        disabled=not orders,
    )


# ===========================================================================
# PAGE: Alerts
# ===========================================================================
elif page == "Alerts":
    st.title("Proactive Alerts")

    today = pd.Timestamp(st.date_input("Reference date", value=pd.Timestamp.today().date()))
    issues = detect_risks(rows, today)

    if not issues:
        st.success("No critical risks detected in the current data.")
    else:
        st.caption(f"{len(issues)} issues detected")
        for issue in issues:
            st.markdown(
                f"<div style='border-left: 3px solid #e74c3c; padding: 4px 8px; margin: 4px 0;'>{issue}</div>",
                unsafe_allow_html=True,
            )
