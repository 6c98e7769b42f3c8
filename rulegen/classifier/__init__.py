"""Comment classification: convention detection, keywords, categories."""

from .comment import (
    CommentClassifier,
    classify_comment,
    extract_code_examples,
    is_convention_comment,
    suggest_file_name,
    summarize_comment,
)
from .filter import ConventionFilter
from .keywords import KeywordSignal, extract_keywords

__all__ = [
    "CommentClassifier",
    "ConventionFilter",
    "KeywordSignal",
    "classify_comment",
    "extract_code_examples",
    "extract_keywords",
    "is_convention_comment",
    "suggest_file_name",
    "summarize_comment",
]
