"""
CraftConnect Streamlit UI — main entry point.

Run with: ``streamlit run src/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from src.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (src/ui/),
# which removes the project root needed for absolute ``src.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from src.core.config import get_settings  # noqa: E402
from src.ui.api_client import get_api_client  # noqa: E402
from src.ui.components.navigation import PAGE_PATHS, get_store  # noqa: E402
from src.ui.components.request_guard import ANALYSIS_FLAG, WHATSAPP_FLAG  # noqa: E402
from src.ui.flow import Reset, Route  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="CraftConnect",
    page_icon="\U0001f680",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults (flow state itself lives under FlowStore keys)
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": get_settings().api_base_url,
    "recorder_error": "",
    "processing_error": "",
    ANALYSIS_FLAG: False,
    WHATSAPP_FLAG: False,
    "whatsapp_message": "",
    "whatsapp_error": "",
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f680 CraftConnect")
    st.caption("Tell your craft story, get a growth plan")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the CraftConnect FastAPI backend, including /api",
    )

    # Connection status indicator
    _client = get_api_client(st.session_state.api_base_url)
    _conn_ok, _conn_msg = _client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    st.divider()
    if st.button("Start over", use_container_width=True):
        get_store().dispatch(Reset())
        st.session_state.whatsapp_message = ""
        st.session_state.whatsapp_error = ""
        st.session_state.recorder_error = ""
        st.session_state.processing_error = ""
        st.rerun()

# ---------------------------------------------------------------------------
# Navigation (multipage, gated by flow state inside each page)
# ---------------------------------------------------------------------------
_TITLES = {
    Route.home: ("Record", "\U0001f3a4"),
    Route.processing: ("Process", "⚙️"),
    Route.insights: ("Insights", "\U0001f3af"),
    Route.whatsapp: ("WhatsApp", "\U0001f4f1"),
    Route.instagram: ("Instagram", "\U0001f4f8"),
    Route.website: ("Website", "\U0001f310"),
}

pages = [
    st.Page(PAGE_PATHS[route], title=title, icon=icon, default=route == Route.home)
    for route, (title, icon) in _TITLES.items()
]

nav = st.navigation(pages)
nav.run()
