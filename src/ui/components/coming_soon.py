"""Placeholder for solution setup pages that are not built yet."""

import streamlit as st

from src.ui.components.navigation import gate, go
from src.ui.components.progress import render_progress
from src.ui.components.solution_card import solution_title
from src.ui.flow import Route


def render_coming_soon(route: Route) -> None:
    gate(route)
    render_progress(route)
    st.header(f"{solution_title(route.value)} — Coming Soon!")
    st.write("We're working hard to bring you this feature. Stay tuned!")
    col_back, col_home = st.columns(2)
    with col_back:
        if st.button("Back to insights", use_container_width=True):
            go(Route.insights)
    with col_home:
        if st.button("Go Home", type="primary", use_container_width=True):
            go(Route.home)
