"""Prompt rendering for the language-model collaborator."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
