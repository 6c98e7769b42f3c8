"""Convention detection and classification for single review comments."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from ..logging import get_logger
from ..models import DEFAULT_CATEGORY, ParsedComment
from .keywords import (
    FENCED_CODE_RE,
    INLINE_CODE_RE,
    KeywordSignal,
    MAX_KEYWORDS,
    count_term,
    extract_keywords,
    has_code_span,
    inline_code_spans,
    singularize,
    strip_fenced_code,
)
from .vocabulary import (
    CATEGORY_KEYWORDS,
    CONVENTION_KEYWORDS,
    GOOD_BAD_MARKERS,
    STOP_WORDS,
    TECH_TERMS,
    all_category_terms,
)

LENGTH_THRESHOLD = 50
SUMMARY_LENGTH = 50
MAX_NAME_KEYWORDS = 2
MAX_INLINE_EXAMPLES = 3

_PRIORITY_RE = re.compile(r"\bp[1-5]\b")
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
_INLINE_EXAMPLE_CHARS = "({._"

_KEYWORD_HIT_WEIGHT = 3
_MARKER_STYLE_BONUS = 2
_FENCE_BONUS = 1

logger = get_logger("classifier")


class CommentClassifier:
    """Produces a keyword/category signature for a review comment."""

    def __init__(
        self,
        *,
        length_threshold: int = LENGTH_THRESHOLD,
        max_keywords: int = MAX_KEYWORDS,
    ) -> None:
        self.length_threshold = length_threshold
        self.max_keywords = max_keywords

    def is_convention_comment(self, text: str) -> bool:
        """Return True when the comment looks like a reusable convention."""
        if len(text) >= self.length_threshold:
            return True
        lowered = text.lower()
        if any(keyword in lowered for keyword in CONVENTION_KEYWORDS):
            return True
        if _PRIORITY_RE.search(lowered):
            return True
        if has_code_span(text):
            return True
        return _has_marker(text)

    def classify(self, text: str) -> ParsedComment:
        if self.is_convention_comment(text):
            signal = extract_keywords(text, limit=self.max_keywords)
        else:
            signal = KeywordSignal(keywords=[], specific=frozenset())

        category = self.classify_category(text, signal.keywords)
        parsed = ParsedComment(
            content=text,
            keywords=tuple(signal.keywords),
            category=category,
            code_examples=tuple(extract_code_examples(text)),
            suggested_file_name=suggest_file_name(category, signal),
        )
        logger.debug(
            "Classified comment as %s (keywords=%s, file=%s)",
            parsed.category,
            ", ".join(parsed.keywords) or "-",
            parsed.suggested_file_name,
        )
        return parsed

    def classify_category(self, text: str, keywords: Sequence[str]) -> str:
        lowered = text.lower()
        has_marker = _has_marker(text)
        has_fence = "```" in text

        best_category = DEFAULT_CATEGORY
        best_score = 0
        for category, terms in CATEGORY_KEYWORDS.items():
            vocabulary = {category, *terms}
            score = _KEYWORD_HIT_WEIGHT * sum(1 for keyword in keywords if keyword in vocabulary)
            score += sum(count_term(lowered, term) for term in terms)
            if category == "style":
                if has_marker:
                    score += _MARKER_STYLE_BONUS
                if has_fence:
                    score += _FENCE_BONUS
            elif category == "testing" and has_fence:
                score += _FENCE_BONUS
            if score > best_score:
                best_category, best_score = category, score
        return best_category


def extract_code_examples(text: str) -> List[str]:
    """Fenced blocks verbatim, plus up to three code-like inline spans joined."""
    blocks = [block.strip() for block in FENCED_CODE_RE.findall(text) if block.strip()]
    inline = [
        span
        for span in inline_code_spans(text)
        if span
        and any(char in span for char in _INLINE_EXAMPLE_CHARS)
        and not any(span in block for block in blocks)
    ]
    if inline:
        blocks.append(", ".join(inline[:MAX_INLINE_EXAMPLES]))
    return blocks


def suggest_file_name(category: str, signal: KeywordSignal) -> str:
    """Category-rooted slug, prefixed by at most two abstract keywords."""
    excluded = all_category_terms() | frozenset(TECH_TERMS)
    chosen: List[str] = []
    for keyword in signal.keywords:
        if len(chosen) >= MAX_NAME_KEYWORDS:
            break
        if _is_name_candidate(keyword, category, excluded, signal.specific):
            chosen.append(keyword)
    base = "-".join([*chosen, category]) if chosen else category
    return slugify(base)


def slugify(text: str) -> str:
    return _SLUG_RE.sub("-", text.lower()).strip("-")


def summarize_comment(text: str) -> str:
    """First sentence of the prose, or a truncated lead-in."""
    plain = INLINE_CODE_RE.sub(lambda match: match.group(1), strip_fenced_code(text))
    plain = " ".join(plain.split())
    if not plain:
        return ""
    sentence = _SENTENCE_RE.match(plain)
    if sentence:
        return sentence.group(0).strip()
    if len(plain) > SUMMARY_LENGTH:
        return plain[:SUMMARY_LENGTH] + "..."
    return plain


def _is_name_candidate(
    keyword: str,
    category: str,
    excluded: Iterable[str],
    specific: Iterable[str],
) -> bool:
    if keyword == category or " " in keyword or len(keyword) <= 2:
        return False
    if keyword in STOP_WORDS or keyword in specific:
        return False
    if keyword in excluded or singularize(keyword) in excluded:
        return False
    return bool(slugify(keyword))


def _has_marker(text: str) -> bool:
    return any(marker in text for marker in GOOD_BAD_MARKERS)


_DEFAULT_CLASSIFIER = CommentClassifier()


def classify_comment(text: str) -> ParsedComment:
    return _DEFAULT_CLASSIFIER.classify(text)


def is_convention_comment(text: str) -> bool:
    return _DEFAULT_CLASSIFIER.is_convention_comment(text)


__all__ = [
    "CommentClassifier",
    "classify_comment",
    "extract_code_examples",
    "is_convention_comment",
    "slugify",
    "suggest_file_name",
    "summarize_comment",
]
