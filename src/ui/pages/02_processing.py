"""
Processing page — uploads the recording and waits for the analysis.

One request at a time: the trigger is drawn disabled while an upload is in
flight. Failures are shown inline; the user re-records rather than retry.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import logging  # noqa: E402

import streamlit as st  # noqa: E402

from src.core.exceptions import RecordingTooShortError  # noqa: E402
from src.ui.api_client import APIError, get_api_client  # noqa: E402
from src.ui.components.navigation import gate, get_store, go  # noqa: E402
from src.ui.components.progress import render_progress  # noqa: E402
from src.ui.components.request_guard import (  # noqa: E402
    ANALYSIS_FLAG,
    is_in_flight,
    outstanding,
    start_request,
)
from src.ui.flow import AnalysisSucceeded, Reset, Route  # noqa: E402

logger = logging.getLogger(__name__)

state = gate(Route.processing)
render_progress(Route.processing)
st.header("Analyze Your Recording")

recording = state.recording
st.audio(recording.data, format=recording.mime_type.split(";")[0])
st.caption(f"Duration: {recording.duration:.1f}s")

in_flight = is_in_flight(ANALYSIS_FLAG)
st.button(
    "Analyzing..." if in_flight else "Analyze my business",
    type="primary",
    disabled=in_flight,
    on_click=start_request,
    args=(ANALYSIS_FLAG,),
)

if in_flight:
    st.session_state.processing_error = ""
    client = get_api_client(st.session_state.get("api_base_url"))
    result = None
    with outstanding(ANALYSIS_FLAG):
        try:
            with st.spinner("Processing your recording... This may take a moment."):
                result = client.submit_recording(recording)
        except (APIError, RecordingTooShortError) as exc:
            message = exc.message if isinstance(exc, APIError) else exc.error
            logger.warning("Analysis request failed: %s", message)
            st.session_state.processing_error = message

    if result is not None:
        get_store().dispatch(AnalysisSucceeded(result.transcript, result.analysis))
        go(Route.insights)
    # Redraw with the trigger enabled again
    st.rerun()

if st.session_state.get("processing_error"):
    st.error(st.session_state.processing_error, icon="⚠️")
    if st.button("Record again"):
        get_store().dispatch(Reset())
        st.session_state.processing_error = ""
        go(Route.home)
