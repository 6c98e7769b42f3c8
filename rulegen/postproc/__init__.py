"""Post-processing of generated rule files."""

from .merger import ContentMerger, merge_markdown

__all__ = ["ContentMerger", "merge_markdown"]
