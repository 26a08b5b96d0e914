"""
One-request-at-a-time guard for Streamlit triggers.

The trigger's ``on_click`` callback raises a session flag before the
rerun, so the rerun draws the button disabled while the request runs.
``outstanding()`` clears the flag however the request ends.
"""

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager

import streamlit as st

ANALYSIS_FLAG = "analysis_in_flight"
WHATSAPP_FLAG = "whatsapp_loading"


def _storage(storage: MutableMapping | None) -> MutableMapping:
    return st.session_state if storage is None else storage


def start_request(flag: str, storage: MutableMapping | None = None) -> None:
    """``on_click`` callback: mark the request as outstanding."""
    _storage(storage)[flag] = True


def is_in_flight(flag: str, storage: MutableMapping | None = None) -> bool:
    return bool(_storage(storage).get(flag, False))


@contextmanager
def outstanding(flag: str, storage: MutableMapping | None = None) -> Iterator[None]:
    """Run the request body, then re-enable the trigger."""
    state = _storage(storage)
    try:
        yield
    finally:
        state[flag] = False
