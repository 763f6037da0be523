import streamlit as st
import plotly.express as px
import pydeck as pdk
import requests

from utils import inject_css, kpi_grid, require_summary, format_count, hex_to_rgba
from config import API_BASE, REQUEST_TIMEOUT
from analytics.classifier import Category
from analytics.frames import (
    AGE_BAND_COLORS,
    CATEGORY_COLORS,
    age_frame,
    date_frame,
    district_frame,
    points_frame,
    region_frame,
)
from analytics.insights import FALLBACK_MESSAGE

inject_css()
st.title("02 · Command")

summary = require_summary()

# ───────────────────────────────
# Registry status
# ───────────────────────────────
kpi_grid(
    {
        "Total entries": format_count(summary.total_count),
        "Biometric": format_count(summary.category_volumes[Category.BIOMETRIC]),
        "Demographic": format_count(summary.category_volumes[Category.DEMOGRAPHIC]),
        "Enrollment": format_count(summary.category_volumes[Category.ENROLLMENT]),
        "Geo points": f"{len(summary.points):,}",
    }
)

left, center, right = st.columns([1, 2, 1])

# ───────────────────────────────
# Demographics + insight panel
# ───────────────────────────────
with left:
    st.subheader("Demographics")
    ages = age_frame(summary)
    fig = px.pie(
        ages,
        names="band",
        values="volume",
        hole=0.6,
        color="band",
        color_discrete_map=AGE_BAND_COLORS,
    )
    fig.update_layout(height=260, margin=dict(l=0, r=0, t=10, b=0))
    st.plotly_chart(fig, config={"responsive": True, "displayModeBar": False})

    st.subheader("Social engine")
    insight = st.session_state.get("insight")
    if insight is None:
        if st.button("Generate social trends"):
            payload = {
                "total_count": summary.total_count,
                "age_groups": dict(summary.age_groups),
                "region_names": list(summary.by_region),
            }
            with st.spinner("Analyzing…"):
                try:
                    response = requests.post(
                        f"{API_BASE}/insights", json=payload, timeout=REQUEST_TIMEOUT
                    )
                    response.raise_for_status()
                    st.session_state["insight"] = response.json()
                except Exception:
                    st.session_state["insight"] = {"text": FALLBACK_MESSAGE, "fallback": True}
            st.rerun()
    else:
        if insight["fallback"]:
            st.info(insight["text"])
        else:
            st.markdown(f"*{insight['text']}*")
        if st.button("Reset analysis"):
            st.session_state.pop("insight", None)
            st.rerun()

# ───────────────────────────────
# Geo map
# ───────────────────────────────
with center:
    labels = ["OVERALL"] + [c.value for c in Category]
    choice = st.radio("Layer", labels, horizontal=True, label_visibility="collapsed")
    category = None if choice == "OVERALL" else Category(choice)

    geo = points_frame(summary, category)
    if geo.empty:
        st.caption("No points for this layer.")
    else:
        view = pdk.ViewState(latitude=22.0, longitude=80.0, zoom=3.8, pitch=55, bearing=-20)
        layer = pdk.Layer(
            "ColumnLayer",
            data=geo,
            get_position="[longitude, latitude]",
            get_elevation="volume",
            elevation_scale=40,
            radius=6000,
            get_fill_color=hex_to_rgba(CATEGORY_COLORS[category]),
            pickable=True,
            auto_highlight=True,
        )
        tooltip = {"text": "{district}, {region}\nCode {code}\nVolume {volume}"}
        st.pydeck_chart(
            pdk.Deck(layers=[layer], initial_view_state=view, tooltip=tooltip),
        )

# ───────────────────────────────
# Velocity + regional density
# ───────────────────────────────
with right:
    st.subheader("Ingest velocity")
    dates = date_frame(summary)
    fig = px.area(dates, x="date", y="volume")
    fig.update_traces(line_color="#00f2ff")
    fig.update_layout(height=220, margin=dict(l=0, r=0, t=10, b=0))
    st.plotly_chart(fig, config={"responsive": True, "displayModeBar": False})

    st.subheader("Regional density")
    regions = region_frame(summary, top=5)
    fig = px.bar(regions, x="total_volume", y="region", orientation="h")
    fig.update_traces(marker_color="#06b6d4", marker_line_width=0)
    fig.update_layout(
        height=240,
        margin=dict(l=0, r=0, t=10, b=0),
        yaxis=dict(autorange="reversed", title=None),
        xaxis=dict(title=None),
    )
    st.plotly_chart(fig, config={"responsive": True, "displayModeBar": False})

# ───────────────────────────────
# Region breakdown
# ───────────────────────────────
st.divider()
with st.expander("Region breakdown", expanded=False):
    full = region_frame(summary)
    st.dataframe(full, width="stretch", hide_index=True)
    if not full.empty:
        region = st.selectbox("Districts of", full["region"].tolist())
        st.dataframe(district_frame(summary, region), width="stretch", hide_index=True)
