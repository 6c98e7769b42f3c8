"""Stricter gates used when converting a whole review thread at once."""

from __future__ import annotations

import unicodedata
from typing import Iterable, List, Tuple

from ..models import Comment
from .keywords import has_code_span

BATCH_MIN_LENGTH = 20
THREAD_MIN_LENGTH = 10
SIMPLE_QUESTION_LENGTH = 50
BATCH_GENERAL_LENGTH = 50
THREAD_GENERAL_LENGTH = 30
THREAD_QUESTION_LENGTH = 20
ONE_OFF_LIMIT = 2

CONVENTION_KEYWORDS: Tuple[str, ...] = (
    "should",
    "must",
    "always",
    "never",
    "avoid",
    "prefer",
    "recommend",
    "best practice",
    "convention",
    "pattern",
    "standard",
    "required",
    "mandatory",
    "ensure",
    "make sure",
    "consider",
    "important",
    "suggestion",
    "instead",
    "use",
    "dont",
    "don't",
    "해야",
    "말아야",
    "권장",
    "지양",
    "패턴",
    "컨벤션",
    "규칙",
    "해주세요",
    "하세요",
    "합시다",
    "사용하세요",
    "작성하세요",
    "추가하세요",
    "적용하세요",
    "사용해야",
    "작성해야",
    "필수",
    "금지",
    "바람직",
    "추천",
    "권고",
    "주의",
    "제안",
    "p1:",
    "p2:",
    "p3:",
    "p4:",
)

THANKS_KEYWORDS: Tuple[str, ...] = (
    "thanks",
    "thank you",
    "lgtm",
    "looks good",
    "nice work",
    "great job",
    "well done",
    "perfect",
    "awesome",
    "excellent",
    "감사",
    "고마",
    "좋아",
    "잘했",
    "굿",
)

ONE_OFF_KEYWORDS: Tuple[str, ...] = (
    "typo",
    "fix",
    "remove",
    "delete",
    "here",
    "this line",
    "indentation",
    "formatting",
    "console.log",
    "오타",
    "수정",
    "삭제",
    "여기",
    "이 줄",
)

UNCERTAINTY_KEYWORDS: Tuple[str, ...] = (
    "i think",
    "maybe",
    "perhaps",
    "not sure",
    "hmm",
    "what do you think",
    "should we",
    "could we",
    "생각",
    "아마",
    "혹시",
    "확실",
)

GENERALIZATION_KEYWORDS: Tuple[str, ...] = (
    "when",
    "if",
    "always",
    "all",
    "any",
    "every",
    "each",
    "generally",
    "typically",
    "usually",
    "should",
    "할 때",
    "경우",
    "모든",
    "항상",
    "일반적",
)

QUESTION_CONTEXT_KEYWORDS: Tuple[str, ...] = (
    "how",
    "why",
    "what",
    "which",
    "when",
    "where",
    "should we",
    "can we",
    "could we",
    "어떻게",
    "왜",
    "무엇",
    "어느",
    "언제",
    "어디",
    "해야",
    "할까",
    "하면",
)

PRIORITY_TAGS: Tuple[str, ...] = ("p1:", "p2:", "p3:", "p4:")

_EMOJI_CATEGORIES = frozenset({"So", "Sk", "Mn", "Cf"})


class ConventionFilter:
    """Rejects acknowledgements, one-off nits and unsure remarks in bulk conversions."""

    def is_convention_comment(self, comment: Comment) -> bool:
        content = comment.content.strip()
        lowered = content.lower()

        if len(content) < BATCH_MIN_LENGTH:
            return False
        if _is_only_emoji(content):
            return False
        if _contains_any(lowered, THANKS_KEYWORDS):
            return False
        if len(content) < SIMPLE_QUESTION_LENGTH and content.endswith("?"):
            return False
        if _count_hits(lowered, ONE_OFF_KEYWORDS) >= ONE_OFF_LIMIT:
            return False
        if _contains_any(lowered, UNCERTAINTY_KEYWORDS):
            return False

        if _contains_any(lowered, CONVENTION_KEYWORDS):
            return True
        if has_code_span(content):
            return True
        return len(content) >= BATCH_GENERAL_LENGTH and _contains_any(
            lowered, GENERALIZATION_KEYWORDS
        )

    def is_convention_thread_comment(self, comment: Comment) -> bool:
        """Relaxed gate for individual replies inside a discussion thread."""
        content = comment.content.strip()
        lowered = content.lower()

        if len(content) < THREAD_MIN_LENGTH:
            return False
        if _is_only_emoji(content):
            return False
        if _contains_any(lowered, THANKS_KEYWORDS):
            return False

        if _contains_any(lowered, CONVENTION_KEYWORDS):
            return True
        if has_code_span(content):
            return True
        if _contains_any(lowered, PRIORITY_TAGS):
            return True
        if len(content) >= THREAD_GENERAL_LENGTH and _contains_any(
            lowered, GENERALIZATION_KEYWORDS
        ):
            return True
        return (
            len(content) >= THREAD_QUESTION_LENGTH
            and "?" in content
            and _contains_any(lowered, QUESTION_CONTEXT_KEYWORDS)
        )

    def filter_convention_comments(self, comments: Iterable[Comment]) -> List[Comment]:
        return [comment for comment in comments if self.is_convention_comment(comment)]

    def filter_thread_comments(self, comments: Iterable[Comment]) -> List[Comment]:
        return [comment for comment in comments if self.is_convention_thread_comment(comment)]


def _contains_any(lowered: str, keywords: Iterable[str]) -> bool:
    return any(keyword in lowered for keyword in keywords)


def _count_hits(lowered: str, keywords: Iterable[str]) -> int:
    return sum(1 for keyword in keywords if keyword in lowered)


def _is_only_emoji(content: str) -> bool:
    remaining = [
        char
        for char in content
        if not char.isspace() and unicodedata.category(char) not in _EMOJI_CATEGORIES
    ]
    return not remaining


__all__ = ["ConventionFilter"]
