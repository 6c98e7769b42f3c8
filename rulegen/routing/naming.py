"""File naming helpers for new rule files."""

from __future__ import annotations

import re
from typing import Collection, List

from ..config import DEFAULT_RULES_ROOT, DEFAULT_SKILLS_ROOT
from ..corpus.analyzer import KEBAB_CASE, PASCAL_CASE, SNAKE_CASE
from ..corpus.tree import join_path

DEFAULT_EXTENSION = ".md"
MAX_SUFFIX = 100

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_TOKEN_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")


def split_words(text: str) -> List[str]:
    spaced = _CAMEL_BOUNDARY_RE.sub(" ", text)
    return [word.lower() for word in _TOKEN_SPLIT_RE.split(spaced) if word]


def apply_naming_pattern(text: str, pattern: str = KEBAB_CASE) -> str:
    """Render ``text`` in the corpus naming pattern."""
    words = split_words(text)
    if pattern == PASCAL_CASE:
        return "".join(word.capitalize() for word in words)
    if pattern == SNAKE_CASE:
        return "_".join(words)
    return "-".join(words)


def build_file_path(directory: str, name: str, extension: str = DEFAULT_EXTENSION) -> str:
    file_name = name if name.endswith(extension) else f"{name}{extension}"
    return join_path(directory, file_name)


def ensure_unique_name(path: str, existing_paths: Collection[str]) -> str:
    """Append ``-2``, ``-3``... to the stem until ``path`` is unused."""
    if path not in existing_paths:
        return path
    stem, dot, extension = path.rpartition(".")
    if not dot or "/" in extension:
        stem, extension = path, ""
    suffix = f".{extension}" if extension else ""
    for counter in range(2, MAX_SUFFIX + 2):
        candidate = f"{stem}-{counter}{suffix}"
        if candidate not in existing_paths:
            return candidate
    raise ValueError(f"Could not find a free file name for {path}")


def generate_file_path(
    is_skill: bool,
    name: str,
    *,
    rules_root: str = DEFAULT_RULES_ROOT,
    skills_root: str = DEFAULT_SKILLS_ROOT,
) -> str:
    return build_file_path(skills_root if is_skill else rules_root, name)


__all__ = [
    "apply_naming_pattern",
    "build_file_path",
    "ensure_unique_name",
    "generate_file_path",
    "split_words",
]
