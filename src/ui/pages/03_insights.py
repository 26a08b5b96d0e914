"""
Insights page — analysis summary and the recommended solutions.

Choosing any solution (either recommendation or the remaining channel)
completes the flow and opens that channel's setup page.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.components.navigation import gate, get_store, go  # noqa: E402
from src.ui.components.progress import render_progress  # noqa: E402
from src.ui.components.solution_card import render_solution_card  # noqa: E402
from src.ui.flow import Route, SolutionSelected  # noqa: E402

state = gate(Route.insights)
analysis = state.analysis
solutions = analysis.recommended_solutions

render_progress(Route.insights)
st.header("\U0001f3af AI Analysis Results")
st.caption("Based on your recording, here are personalized recommendations.")

with st.container(border=True):
    col_type, col_conf = st.columns([3, 1])
    with col_type:
        st.markdown(f"**Business type:** {analysis.business_type}")
        st.markdown(f"**Focus:** {analysis.detected_focus}")
    with col_conf:
        st.metric("Confidence", f"{analysis.confidence}%")
    if analysis.top_problems:
        st.markdown("**Top challenges:**")
        st.markdown("\n".join(f"{i}. {p}" for i, p in enumerate(analysis.top_problems, start=1)))
    with st.expander("Transcript"):
        st.write(state.transcript)

chosen = None
col_primary, col_secondary = st.columns(2)
with col_primary:
    if render_solution_card(solutions.primary.id, solutions.primary.reason, recommended=True):
        chosen = solutions.primary.id
with col_secondary:
    if render_solution_card(solutions.secondary.id, solutions.secondary.reason):
        chosen = solutions.secondary.id

with st.expander("Other options"):
    if render_solution_card(solutions.alternative, ""):
        chosen = solutions.alternative

if chosen is not None:
    get_store().dispatch(SolutionSelected(chosen))
    go(Route(chosen.value))
