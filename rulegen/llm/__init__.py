"""Language-model collaborators: local runners and comment enhancement."""

from .base import TextGenerator, build_text_generator
from .enhancer import CommentEnhancer
from .llamacpp import LlamaCppRunner
from .runner import LLMRunner

__all__ = [
    "CommentEnhancer",
    "LLMRunner",
    "LlamaCppRunner",
    "TextGenerator",
    "build_text_generator",
]
