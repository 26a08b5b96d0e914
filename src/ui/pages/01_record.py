"""
Record page — the home step of the flow.

UX flow: record -> processing -> insights -> setup
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.components.progress import render_progress  # noqa: E402
from src.ui.components.recorder import render_recorder  # noqa: E402
from src.ui.flow import Route  # noqa: E402

render_progress(Route.home)
st.header("Tell Your Craft Story")
st.caption(
    "Our AI will analyze your voice using Google Cloud Speech-to-Text and "
    "Vertex AI and recommend the best channels for growth."
)
render_recorder()
