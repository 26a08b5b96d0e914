"""
Route gating and page switching for the multipage app.

Every page calls ``gate(route)`` first; users who are not far enough in
the flow are redirected to the furthest page their state allows.
"""

import streamlit as st

from src.ui.flow import FlowState, FlowStore, Route, resolve_route

PAGE_PATHS: dict[Route, str] = {
    Route.home: "pages/01_record.py",
    Route.processing: "pages/02_processing.py",
    Route.insights: "pages/03_insights.py",
    Route.whatsapp: "pages/04_whatsapp.py",
    Route.instagram: "pages/05_instagram.py",
    Route.website: "pages/06_website.py",
}


def get_store() -> FlowStore:
    return FlowStore(st.session_state)


def go(route: Route) -> None:
    st.switch_page(PAGE_PATHS[route])


def gate(route: Route) -> FlowState:
    """Return the flow state, or redirect if ``route`` is not reachable yet."""
    state = get_store().load()
    target = resolve_route(state, route)
    if target != route:
        go(target)
    return state
