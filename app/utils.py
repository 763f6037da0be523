# app/utils.py
import sys
import os

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st
from contextlib import contextmanager
from analytics.aggregator import AggregateSummary

SUMMARY_KEY = "summary"


def format_count(x: float) -> str:
    """Compact volume label: 1.2M, 350K, 940"""
    try:
        if abs(x) >= 1_000_000:
            return f"{x / 1_000_000:.1f}M"
        if abs(x) >= 1_000:
            return f"{x / 1_000:.0f}K"
        return f"{x:,.0f}"
    except (TypeError, ValueError):
        return "—"


def format_mb(size_bytes: int) -> str:
    return f"{size_bytes / 1024 / 1024:.2f} MB"


def hex_to_rgba(hex_color: str, alpha: int = 200) -> list[int]:
    """Convert #RRGGBB to [r, g, b, a] for pydeck layers."""
    h = hex_color.lstrip("#")
    return [int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16), alpha]


def current_summary() -> AggregateSummary | None:
    """Summary of the latest ingestion run, shared across pages"""
    data = st.session_state.get(SUMMARY_KEY)
    if data is None:
        return None
    return AggregateSummary.from_dict(data)


def require_summary() -> AggregateSummary:
    summary = current_summary()
    if summary is None:
        st.warning("No ingestion run yet. Go to **01 · Ingest** to select CSV files.")
        st.stop()
    return summary


def inject_css():
    st.markdown(
        """
        <style>
          :root {
            --kpi-bg: #F0F2F6;
            --kpi-text: #31333F;
            --kpi-accent: #0891b2;
          }
          @media (prefers-color-scheme: dark) {
            :root {
              --kpi-bg: #0b1220;
              --kpi-text: #e2e8f0;
              --kpi-accent: #00f2ff;
            }
          }

          .kpi {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(160px, 1fr));
            gap: 12px;
            margin: 8px 0 16px;
          }
          .kpi .card {
            background: var(--kpi-bg);
            color: var(--kpi-text);
            border: 1px solid rgba(0, 242, 255, .12);
            border-radius: 14px;
            padding: 12px 14px;
            box-shadow: 0 1px 3px rgba(0,0,0,.06);
          }
          .kpi .label {
            font-size: 0.75rem;
            letter-spacing: .12em;
            text-transform: uppercase;
            margin-bottom: 4px;
            opacity: .7;
          }
          .kpi .value {
            font-weight: 800;
            font-size: 1.45rem;
            line-height: 1.2;
            font-family: ui-monospace, SFMono-Regular, Menlo, monospace;
            color: var(--kpi-accent);
          }
          div[data-testid="stStatusWidget"] {
            display: none;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def kpi_grid(items: dict[str, str | int | float]):
    st.markdown(
        '<div class="kpi">' + "".join(
            f'<div class="card"><div class="label">{k}</div><div class="value">{v}</div></div>'
            for k, v in items.items()
        ) + '</div>',
        unsafe_allow_html=True,
    )


@contextmanager
def spinner(msg: str):
    with st.spinner(msg):
        yield
