"""Caches shared across conversions."""

from .analysis_cache import AnalysisCache

__all__ = ["AnalysisCache"]
