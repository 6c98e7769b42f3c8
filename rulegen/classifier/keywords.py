"""Weighted keyword extraction for review comments.

Each strategy adds to a shared keyword -> score map. The final list keeps the
highest-scoring entries after stop words and very short tokens are removed.
Insertion order breaks ties so the output is stable for identical input.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, List, Set

from .vocabulary import (
    CATEGORY_KEYWORDS,
    SOURCE_EXTENSIONS,
    STOP_WORDS,
    TECH_TERMS,
    all_category_terms,
)

MAX_KEYWORDS = 15
MIN_KEYWORD_LENGTH = 3

CATEGORY_KEYWORD_WEIGHT = 5
CATEGORY_NAME_WEIGHT = 3
CONTEXT_WEIGHT = 4
TECH_TERM_WEIGHT = 3
IDENTIFIER_WEIGHT = 2
PASCAL_CASE_WEIGHT = 3
CASING_WEIGHT = 2
FILE_REFERENCE_WEIGHT = 2

FENCED_CODE_RE = re.compile(r"```[^\n`]*\n?([\s\S]*?)```")
INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")

_CONTEXT_RE = re.compile(
    r"(?=\b(?:shouldn't|should|must|always|prefer|recommend|use|avoid|never|don't|dont)"
    r"[ \t]+((?:[\w-]+[ \t]*){1,4}))"
)
_IDENTIFIER_RE = re.compile(r"(?<![A-Za-z0-9_])[A-Za-z_][A-Za-z0-9_]{2,48}(?![A-Za-z0-9_])")
_PASCAL_RE = re.compile(r"\b[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]+)+\b")
_CAMEL_RE = re.compile(r"\b[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+\b")
_UPPER_RE = re.compile(r"\b[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*\b")
_KEBAB_RE = re.compile(r"\b[a-z][a-z0-9]*(?:-[a-z0-9]+)+\b")
_FILE_RE = re.compile(
    r"\b([\w-]+)\.(?:" + "|".join(SOURCE_EXTENSIONS) + r")\b",
    re.IGNORECASE,
)
_WORD_RE = re.compile(r"\w[\w'-]*")

_MIN_UPPER_LENGTH = 4
_MIN_KEBAB_LENGTH = 6
_FREQUENCY_RANGE = range(2, 6)


@dataclass(frozen=True)
class KeywordSignal:
    """Ranked keywords plus the tokens that came from literal identifiers."""

    keywords: List[str]
    specific: FrozenSet[str]


@lru_cache(maxsize=None)
def term_pattern(term: str) -> re.Pattern[str]:
    """Word-bounded matcher for a vocabulary term (plural suffix allowed)."""
    escaped = re.escape(term.lower())
    if term.isascii():
        return re.compile(rf"(?<![a-z0-9]){escaped}(?:s|es)?(?![a-z0-9])")
    return re.compile(escaped)


def count_term(lowered: str, term: str) -> int:
    return len(term_pattern(term).findall(lowered))


def strip_fenced_code(text: str) -> str:
    return FENCED_CODE_RE.sub(" ", text)


def strip_code(text: str) -> str:
    """Remove fenced blocks and inline spans entirely."""
    return INLINE_CODE_RE.sub(" ", strip_fenced_code(text))


def has_code_span(text: str) -> bool:
    return "```" in text or INLINE_CODE_RE.search(text) is not None


def inline_code_spans(text: str) -> List[str]:
    """Inline code spans outside of fenced blocks."""
    return [span.strip() for span in INLINE_CODE_RE.findall(strip_fenced_code(text))]


def extract_keywords(content: str, *, limit: int = MAX_KEYWORDS) -> KeywordSignal:
    scores: Dict[str, int] = {}
    specific: Set[str] = set()

    def add(word: str, weight: int, *, literal: bool = False) -> None:
        normalized = word.strip().lower()
        if not normalized:
            return
        scores[normalized] = scores.get(normalized, 0) + weight
        if literal:
            specific.add(normalized)

    lowered = content.lower()
    prose = strip_fenced_code(content)

    _score_category_terms(lowered, add)
    _score_context(lowered, add)
    _score_tech_terms(lowered, add)
    _score_identifiers(content, add)
    _score_casing(prose, add)
    _score_file_references(prose, add)
    _score_frequency(strip_code(content).lower(), add)

    ranked = [
        (word, score)
        for word, score in scores.items()
        if word not in STOP_WORDS and len(word) >= MIN_KEYWORD_LENGTH
    ]
    ranked.sort(key=lambda item: -item[1])
    return KeywordSignal(
        keywords=[word for word, _ in ranked[:limit]],
        specific=frozenset(specific),
    )


def singularize(word: str, known: Iterable[str] | None = None) -> str:
    """Map a plural onto a known vocabulary term when one exists."""
    vocabulary = _known_terms() if known is None else frozenset(known)
    if word in vocabulary:
        return word
    if word.endswith("es") and word[:-2] in vocabulary:
        return word[:-2]
    if word.endswith("s") and word[:-1] in vocabulary:
        return word[:-1]
    return word


@lru_cache(maxsize=1)
def _known_terms() -> FrozenSet[str]:
    return all_category_terms() | frozenset(TECH_TERMS)


def _score_category_terms(lowered: str, add) -> None:
    for category, terms in CATEGORY_KEYWORDS.items():
        for term in terms:
            if count_term(lowered, term):
                add(term, CATEGORY_KEYWORD_WEIGHT)
                add(category, CATEGORY_NAME_WEIGHT)


def _score_context(lowered: str, add) -> None:
    for match in _CONTEXT_RE.finditer(lowered):
        for word in match.group(1).split():
            add(singularize(word.strip("-")), CONTEXT_WEIGHT)


def _score_tech_terms(lowered: str, add) -> None:
    for term in TECH_TERMS:
        if count_term(lowered, term):
            add(term, TECH_TERM_WEIGHT)


def _score_identifiers(content: str, add) -> None:
    for span in inline_code_spans(content):
        for identifier in _IDENTIFIER_RE.findall(span):
            add(identifier, IDENTIFIER_WEIGHT, literal=True)


def _score_casing(prose: str, add) -> None:
    for token in _PASCAL_RE.findall(prose):
        add(token, PASCAL_CASE_WEIGHT, literal=True)
    for token in _CAMEL_RE.findall(prose):
        add(token, CASING_WEIGHT, literal=True)
    for token in _UPPER_RE.findall(prose):
        if len(token) >= _MIN_UPPER_LENGTH:
            add(token, CASING_WEIGHT, literal=True)
    for token in _KEBAB_RE.findall(prose):
        if len(token) >= _MIN_KEBAB_LENGTH:
            add(token, CASING_WEIGHT, literal=True)


def _score_file_references(prose: str, add) -> None:
    for basename in _FILE_RE.findall(prose):
        if len(basename) >= MIN_KEYWORD_LENGTH:
            add(basename, FILE_REFERENCE_WEIGHT, literal=True)


def _score_frequency(plain: str, add) -> None:
    counts = Counter(word.strip("'-") for word in _WORD_RE.findall(plain))
    for word, count in counts.items():
        if word and count in _FREQUENCY_RANGE:
            add(word, count)


__all__ = [
    "FENCED_CODE_RE",
    "INLINE_CODE_RE",
    "KeywordSignal",
    "MAX_KEYWORDS",
    "count_term",
    "extract_keywords",
    "has_code_span",
    "inline_code_spans",
    "singularize",
    "strip_code",
    "strip_fenced_code",
    "term_pattern",
]
