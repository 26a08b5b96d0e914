"""
WhatsApp setup page — generates a marketing message for the business.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402
from src.ui.components.navigation import gate, get_store, go  # noqa: E402
from src.ui.components.progress import render_progress  # noqa: E402
from src.ui.components.request_guard import (  # noqa: E402
    WHATSAPP_FLAG,
    is_in_flight,
    outstanding,
    start_request,
)
from src.ui.flow import Reset, Route  # noqa: E402

state = gate(Route.whatsapp)
analysis = state.analysis

render_progress(Route.whatsapp)
st.header("\U0001f4f1 WhatsApp Business Setup")
st.caption(f"{analysis.business_type} — {analysis.detected_focus}")

loading = is_in_flight(WHATSAPP_FLAG)
st.button(
    "Generating..." if loading else "Generate WhatsApp Message",
    type="primary",
    disabled=loading,
    on_click=start_request,
    args=(WHATSAPP_FLAG,),
)

if loading:
    client = get_api_client(st.session_state.get("api_base_url"))
    st.session_state.whatsapp_error = ""
    with outstanding(WHATSAPP_FLAG):
        try:
            with st.spinner("Writing your message..."):
                st.session_state.whatsapp_message = client.generate_whatsapp_message(
                    business_type=analysis.business_type,
                    detected_focus=analysis.detected_focus,
                    transcript=state.transcript,
                )
        except APIError as exc:
            st.session_state.whatsapp_error = exc.message
    st.rerun()

if st.session_state.get("whatsapp_error"):
    st.error(st.session_state.whatsapp_error, icon="⚠️")

message = st.session_state.get("whatsapp_message")
if message:
    st.subheader("Message preview")
    st.code(message, language=None, wrap_lines=True)

if st.button("Start over"):
    get_store().dispatch(Reset())
    st.session_state.pop("whatsapp_message", None)
    go(Route.home)
