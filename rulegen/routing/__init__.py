"""Routing: match comments to existing files or suggest where new ones go."""

from .matcher import FileMatcher, score_file
from .naming import apply_naming_pattern, build_file_path, ensure_unique_name, generate_file_path
from .rules import DirectoryMatch, DirectoryRules
from .suggester import DirectorySuggester, Fallback, FallbackReason, Selection

__all__ = [
    "DirectoryMatch",
    "DirectoryRules",
    "DirectorySuggester",
    "Fallback",
    "FallbackReason",
    "FileMatcher",
    "Selection",
    "apply_naming_pattern",
    "build_file_path",
    "ensure_unique_name",
    "generate_file_path",
    "score_file",
]
