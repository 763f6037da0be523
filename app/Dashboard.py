import streamlit as st
import streamlit.components.v1 as components

from utils import inject_css, current_summary, format_count

st.set_page_config(page_title="Stratos Command", layout="wide", page_icon="🛰️")
inject_css()

summary = current_summary()
status = (
    f"Last run: {format_count(summary.total_count)} entries · {len(summary.points):,} geo points"
    if summary is not None
    else "No ingestion run yet"
)

# ──────────────────────────────────────────────────────────────────────────────
# Landing HTML
# ──────────────────────────────────────────────────────────────────────────────
html_content = """
<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<style>
* { margin: 0; padding: 0; box-sizing: border-box; }

body {
  --bg: #ffffff;
  --text: #0f172a;
  --muted: #64748b;
  --border: #e2e8f0;
  --accent: #0891b2;
  font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  background: var(--bg);
  color: var(--text);
  line-height: 1.6;
}

@media (prefers-color-scheme: dark) {
  body {
    --bg: #02040a;
    --text: #f1f5f9;
    --muted: #94a3b8;
    --border: #1e293b;
    --accent: #00f2ff;
  }
}

.container { max-width: 960px; margin: 0 auto; padding: 3rem 2rem; }

.header { text-align: center; margin-bottom: 3rem; }
.header h1 { font-size: 2.75rem; font-weight: 900; letter-spacing: .12em; font-style: italic; }
.header h1 span { color: var(--accent); }
.header p { color: var(--muted); margin-top: .75rem; }
.status {
  display: inline-block;
  margin-top: 1.25rem;
  padding: .25rem .9rem;
  border: 1px solid var(--accent);
  border-radius: 1rem;
  font-size: .75rem;
  letter-spacing: .15em;
  text-transform: uppercase;
  color: var(--accent);
}

.grid { display: grid; gap: 1rem; }

.card {
  border: 1px solid var(--border);
  border-radius: 1rem;
  padding: 1.5rem;
  cursor: pointer;
  transition: transform .2s, border-color .2s;
}
.card:hover { transform: translateX(4px); border-color: var(--accent); }
.card h2 { font-size: 1.25rem; font-weight: 700; letter-spacing: .08em; }
.card p { color: var(--muted); }
</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>STRATOS <span>COMMAND</span></h1>
    <p>Registry volumes by category, region, date and age band, with a volumetric geo view.</p>
    <div class="status">__STATUS__</div>
  </div>

  <div class="grid">
    <div class="card" onclick="navigateTo('Ingest')">
      <h2>01 · INGEST</h2>
      <p>Select biometric, demographic and enrollment CSV files and build a new summary.</p>
    </div>
    <div class="card" onclick="navigateTo('Command')">
      <h2>02 · COMMAND</h2>
      <p>Demographics, ingest velocity, regional density, the geo column map and AI trend notes.</p>
    </div>
  </div>
</div>

<script>
function navigateTo(page) {
  try {
    const links = window.parent.document.querySelectorAll('[data-testid="stSidebarNav"] a');
    for (const link of links) {
      if ((link.getAttribute('href') || '').includes(page)) {
        link.click();
        break;
      }
    }
  } catch (e) {
    console.warn('Navigation error:', e);
  }
}
</script>
</body>
</html>
"""

components.html(html_content.replace("__STATUS__", status), height=640, scrolling=False)
