"""Record -> Process -> Insights -> Setup progress indicator."""

import streamlit as st

from src.ui.flow import PROGRESS_STEPS, Route, progress_index


def render_progress(route: Route) -> None:
    current = progress_index(route)
    cols = st.columns(len(PROGRESS_STEPS))
    for number, (col, label) in enumerate(zip(cols, PROGRESS_STEPS, strict=True), start=1):
        with col:
            if number < current:
                st.markdown(f"~~{number}. {label}~~ ✅")
            elif number == current:
                st.markdown(f"**{number}. {label}**")
            else:
                st.caption(f"{number}. {label}")
    st.progress(current / len(PROGRESS_STEPS))
