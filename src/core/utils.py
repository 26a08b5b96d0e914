"""Shared utility functions for CraftConnect."""

import re

_FENCE_RE = re.compile(r"```[a-zA-Z]*")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers (```json, ```) from LLM responses."""
    return _FENCE_RE.sub("", text).strip()


def stop_after_configured_attempts(retry_state) -> bool:
    """tenacity ``stop`` for methods: stop at the instance's ``_max_attempts``."""
    return retry_state.attempt_number >= retry_state.args[0]._max_attempts
