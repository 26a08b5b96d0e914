"""
Abstract base class for LLM providers.

The business analyzer only needs free-form generation; prompt construction
and output parsing live in ``src.services.analysis``.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response.

        Args:
            prompt: The full user prompt to send to the model.
            **kwargs: Provider-specific options (temperature, etc.).

        Returns:
            The model's text response.

        Raises:
            UpstreamUnavailableError: If the provider cannot be reached.
        """
