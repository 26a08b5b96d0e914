"""Business analysis service built on the LLM abstraction."""

from .business_analyzer import BusinessAnalyzer, parse_analysis

__all__ = ["BusinessAnalyzer", "parse_analysis"]
