import json

import streamlit as st
import pandas as pd
import requests

from utils import inject_css, kpi_grid, format_count, format_mb, spinner, SUMMARY_KEY
from config import API_BASE, REQUEST_TIMEOUT


inject_css()
st.title("01 · Ingest")
st.write(
    "Select biometric, demographic and enrollment CSV files. Files are classified "
    "by name; their contents are not read."
)

# ───────────────────────────────
# Flash from previous run
# ───────────────────────────────
flash = st.session_state.pop("flash", None)
if flash:
    st.success(flash)

nonce = st.session_state.get("uploader_nonce", 0)
uploaded = st.file_uploader(
    "Drop CSV files",
    type=["csv"],
    accept_multiple_files=True,
    key=f"upload_{nonce}",
)


def _payload(files) -> dict:
    return {"files": [{"name": f.name, "size_bytes": f.size} for f in files]}


def _classify(files) -> list[dict] | None:
    try:
        response = requests.post(
            f"{API_BASE}/classify", json=_payload(files), timeout=REQUEST_TIMEOUT
        )
        if response.status_code != 200:
            st.error(f"Classification failed: {response.json().get('detail', 'Unknown error')}")
            return None
        return response.json()["files"]
    except Exception as e:
        st.error(f"Classification failed: {e}")
        return None


def _ingest(files) -> dict | None:
    """Run ingestion through the streaming endpoint, driving a progress bar."""
    bar = st.progress(0.0, text="Processing…")
    summary = None
    try:
        with requests.post(
            f"{API_BASE}/ingest/stream",
            json=_payload(files),
            stream=True,
            timeout=REQUEST_TIMEOUT,
        ) as response:
            if response.status_code != 200:
                st.error(f"Ingestion failed: {response.json().get('detail', 'Unknown error')}")
                return None
            for line in response.iter_lines():
                if not line:
                    continue
                event = json.loads(line)
                if event["event"] == "progress":
                    bar.progress(
                        min(1.0, event["progress"]),
                        text=f"{event['file']} · {event['category']}",
                    )
                elif event["event"] == "summary":
                    summary = event["summary"]
                elif event["event"] == "error":
                    st.error(event["detail"])
                    return None
    except Exception as e:
        st.error(f"Ingestion failed: {e}")
        return None
    finally:
        bar.empty()
    return summary


# ───────────────────────────────
# Processing queue
# ───────────────────────────────
st.subheader("Processing queue")

if not uploaded:
    st.caption("Queue empty. Select one or more CSV files above.")
else:
    with spinner("Classifying…"):
        queue = _classify(uploaded)

    if queue is not None:
        queue_df = pd.DataFrame(queue)
        counts = queue_df["category"].value_counts()
        kpi_grid(
            {
                "Files": len(queue_df),
                "Biometric": int(counts.get("BIOMETRIC", 0)),
                "Demographic": int(counts.get("DEMOGRAPHIC", 0)),
                "Enrollment": int(counts.get("ENROLLMENT", 0)),
            }
        )
        queue_df["size"] = queue_df["size_bytes"].map(format_mb)
        st.dataframe(
            queue_df[["name", "category", "size"]], width="stretch", hide_index=True
        )

        if st.button("Process files", type="primary"):
            summary = _ingest(uploaded)
            if summary is not None:
                # A new run replaces the previous summary
                st.session_state[SUMMARY_KEY] = summary
                st.session_state.pop("insight", None)
                st.session_state["uploader_nonce"] = nonce + 1
                st.session_state["flash"] = (
                    f"Ingested {len(queue)} file(s): "
                    f"{format_count(summary['total_count'])} entries, "
                    f"{len(summary['points']):,} geo points. Open **02 · Command**."
                )
                st.rerun()

# ───────────────────────────────
# Last run
# ───────────────────────────────
last = st.session_state.get(SUMMARY_KEY)
if last:
    st.divider()
    st.caption(
        f"Last run: {format_count(last['total_count'])} entries across "
        f"{len(last['by_region'])} regions."
    )
