"""
Recorder component — captures the craft story and hands it to the flow.

Uses ``st.audio_input()`` for browser capture. The browser negotiates the
microphone (including permission prompts); recordings shorter than the
minimum duration are rejected here and never reach the flow state.
"""

import logging

import soundfile as sf
import streamlit as st

from src.core.config import get_settings
from src.core.exceptions import RecordingTooShortError
from src.services.audio.processor import AudioProcessor
from src.ui.components.navigation import get_store, go
from src.ui.flow import RecordingCaptured, Reset, Route

logger = logging.getLogger(__name__)

_EXAMPLE = (
    "I make traditional blue pottery in Jaipur. I've been doing this craft for "
    "15 years, learning from my father. My main challenge is reaching customers "
    "online - I don't know how to use social media or create a website. I make "
    "unique designs but struggle with pricing and marketing. I want to expand my "
    "business and reach more people who appreciate handmade crafts."
)


def _accept_recording(audio_bytes: bytes, mime_type: str) -> None:
    """Validate the captured audio and advance the flow to processing."""
    minimum = get_settings().min_recording_seconds
    try:
        recording = AudioProcessor().inspect_recording(audio_bytes, mime_type, minimum)
    except RecordingTooShortError as exc:
        st.session_state.recorder_error = exc.error
        return
    except sf.LibsndfileError as exc:
        logger.warning("Unreadable recording: %s", exc)
        st.session_state.recorder_error = "Could not read the recording. Please try again."
        return

    st.session_state.recorder_error = ""
    get_store().dispatch(RecordingCaptured(recording))
    logger.info("Recording captured: %.1fs (%s)", recording.duration, recording.mime_type)
    go(Route.processing)


def render_recorder() -> None:
    """Render the recording card and the what-to-say instructions."""
    minimum = get_settings().min_recording_seconds
    state = get_store().load()

    if state.is_processed:
        st.info("Your craft story has already been analyzed.")
        col_view, col_reset = st.columns(2)
        with col_view:
            if st.button("View insights", type="primary", use_container_width=True):
                go(Route.insights)
        with col_reset:
            if st.button("Record a new story", use_container_width=True):
                get_store().dispatch(Reset())
                st.rerun()
        return

    col_record, col_help = st.columns([3, 2])
    with col_record:
        with st.container(border=True):
            st.markdown(f"Speak for at least **{minimum:g} seconds** about your craft business.")
            audio = st.audio_input("Record your craft story", key="craft_story_audio")
            if audio is not None and st.button("Use this recording", type="primary"):
                _accept_recording(audio.getvalue(), audio.type or "audio/wav")

            if st.session_state.get("recorder_error"):
                st.error(st.session_state.recorder_error, icon="⚠️")

        if state.has_recorded:
            st.success("Recording completed! You can now proceed to see your AI analysis.")
            if st.button("View AI Analysis →"):
                go(Route.processing)

    with col_help:
        with st.container(border=True):
            st.markdown("**\U0001f4a1 What to say (speak clearly):**")
            st.markdown(
                "- **Craft Type:** What do you make? (pottery, jewelry, textiles, etc.)\n"
                "- **Experience:** How long have you been crafting?\n"
                "- **Challenges:** What problems do you face?\n"
                "- **Customers:** Who buys your products?\n"
                "- **Goals:** What do you want to achieve?"
            )
            st.markdown("**\U0001f4dd Example:**")
            st.caption(f'"{_EXAMPLE}"')
