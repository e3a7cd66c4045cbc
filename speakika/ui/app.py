"""
Speak Ika Streamlit UI main entry point.

Run with: ``streamlit run speakika/ui/app.py``
"""

import streamlit as st

from speakika.ui.api_client import get_api_client
from speakika.ui.components.workbench import render_workbench

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Speak Ika",
    page_icon="\U0001f399️",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": "http://localhost:8000",
    "workbench": None,
    "microphone": None,
    "last_upload_id": None,
    "last_capture_id": None,
    "preview_started_at": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ Speak Ika")
    st.caption("Curate Ika audio, then transcribe and translate")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the Speak Ika FastAPI backend server (default: http://localhost:8000)",
    )

    # Connection status indicator
    _client = get_api_client(st.session_state.api_base_url)
    _conn_ok, _conn_msg = _client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------
st.caption("SPEECH WORKSPACE")
st.header("Curate Ika audio, then transcribe and translate effortlessly.")
st.write(
    "Import an existing recording or capture something new, preview the sound, "
    "and run the pipeline to see where the real models plug in."
)
render_workbench()
