"""
Solution card display components.
"""

import streamlit as st

from src.core.models import SolutionId

SOLUTION_CATALOG: dict[SolutionId, dict[str, str]] = {
    SolutionId.whatsapp: {"icon": "\U0001f4f1", "title": "WhatsApp Business"},
    SolutionId.instagram: {"icon": "\U0001f4f8", "title": "Instagram Marketing"},
    SolutionId.website: {"icon": "\U0001f310", "title": "Professional Website"},
}


def solution_title(solution_id: SolutionId) -> str:
    details = SOLUTION_CATALOG[SolutionId(solution_id)]
    return f"{details['icon']} {details['title']}"


def render_solution_card(
    solution_id: SolutionId,
    reason: str,
    recommended: bool = False,
) -> bool:
    """Render one solution as a bordered card.

    Args:
        solution_id: Channel shown on the card.
        reason: Why the analysis suggests it (empty for the third option).
        recommended: Adds the "AI Recommended" badge.

    Returns:
        True when the user clicked "Get Started".
    """
    with st.container(border=True):
        if recommended:
            st.markdown(":green-background[AI Recommended]")
        st.subheader(solution_title(solution_id))
        if reason:
            st.write(reason)
        return st.button(
            "Get Started",
            key=f"choose_{solution_id}",
            type="primary" if recommended else "secondary",
            use_container_width=True,
        )
