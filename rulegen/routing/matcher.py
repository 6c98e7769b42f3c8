"""Scores existing rule files against a parsed comment."""

from __future__ import annotations

import asyncio
import re
from typing import List, Optional, Sequence

from ..config import CORPUS_MATCH_THRESHOLD, DIRECTORY_MATCH_THRESHOLD
from ..corpus.analyzer import RULE_FILE_SUFFIX, parse_rule_file
from ..corpus.tree import FileTree
from ..logging import get_logger
from ..models import ClaudeFile, MatchResult, ParsedComment

CATEGORY_EXACT = 30
CATEGORY_CONTAINS = 22
CATEGORY_SHARED_WORD = 5
KEYWORD_WEIGHT = 50
FILENAME_EXACT = 20
FILENAME_CONTAINS = 10
FILENAME_KEYWORD_WEIGHT = 10
CONTENT_PER_KEYWORD = 2
CONTENT_CAP = 10
MAX_SCORE = 100

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")

logger = get_logger("routing.matcher")


class FileMatcher:
    """Finds the existing rule file a comment should update, if any.

    ``corpus_threshold`` is used for the broad search across storage roots and
    ``directory_threshold`` for a single directory lookup.
    """

    def __init__(
        self,
        tree: FileTree,
        *,
        corpus_threshold: int = CORPUS_MATCH_THRESHOLD,
        directory_threshold: int = DIRECTORY_MATCH_THRESHOLD,
    ) -> None:
        self.tree = tree
        self.corpus_threshold = corpus_threshold
        self.directory_threshold = directory_threshold

    def match(
        self,
        files: Sequence[ClaudeFile],
        parsed: ParsedComment,
        *,
        threshold: Optional[int] = None,
    ) -> MatchResult:
        """Best-scoring file among ``files``; the first one wins a tie."""
        limit = self.directory_threshold if threshold is None else threshold
        best: Optional[ClaudeFile] = None
        best_score = -1
        for file in files:
            score = score_file(file, parsed)
            logger.debug("Match score %d for %s", score, file.path)
            if score > best_score:
                best, best_score = file, score
        if best is None:
            return MatchResult.no_match()
        return MatchResult(file=best, score=best_score, is_match=best_score >= limit)

    async def find_in_directory(
        self,
        path: str,
        parsed: ParsedComment,
        *,
        threshold: Optional[int] = None,
    ) -> MatchResult:
        files = await self.load_directory(path)
        if files is None:
            return MatchResult.no_match()
        return self.match(files, parsed, threshold=threshold)

    async def find_across_roots(
        self, parsed: ParsedComment, roots: Sequence[str]
    ) -> MatchResult:
        """Search several storage roots concurrently and keep the best result."""
        if not roots:
            return MatchResult.no_match()
        results = await asyncio.gather(
            *(
                self.find_in_directory(root, parsed, threshold=self.corpus_threshold)
                for root in roots
            )
        )
        best = results[0]
        for result in results[1:]:
            if result.score > best.score:
                best = result
        if not best.is_match:
            return MatchResult.no_match()
        return best

    async def load_directory(self, path: str) -> Optional[List[ClaudeFile]]:
        try:
            entries = await self.tree.list_directory(path)
        except Exception as exc:
            logger.warning("Unable to list %s for matching: %s", path, exc)
            return None
        files: List[ClaudeFile] = []
        for entry in entries:
            if not entry.is_file or not entry.name.endswith(RULE_FILE_SUFFIX):
                continue
            try:
                content = await self.tree.read_file(entry.path)
            except Exception as exc:
                logger.warning("Skipping %s during matching: %s", entry.path, exc)
                continue
            files.append(parse_rule_file(entry.path, content))
        return files


def score_file(file: ClaudeFile, parsed: ParsedComment) -> int:
    """Weighted similarity in [0, 100]."""
    keywords = [keyword.lower() for keyword in parsed.keywords]
    total = (
        category_score(file.category, parsed.category)
        + keyword_score(file.keywords, keywords)
        + filename_score(file.name, parsed.suggested_file_name, keywords)
        + content_score(file.content, keywords)
    )
    return max(0, min(MAX_SCORE, total))


def category_score(file_category: str, comment_category: str) -> int:
    file_category = (file_category or "").lower()
    comment_category = (comment_category or "").lower()
    if not file_category or not comment_category:
        return 0
    if file_category == comment_category:
        return CATEGORY_EXACT
    score = 0
    if file_category in comment_category or comment_category in file_category:
        score += CATEGORY_CONTAINS
    file_words = _WORD_SPLIT_RE.split(file_category)
    comment_words = set(_WORD_SPLIT_RE.split(comment_category))
    shared = [word for word in file_words if word and word in comment_words]
    return score + CATEGORY_SHARED_WORD * len(shared)


def keyword_score(file_keywords: Sequence[str], comment_keywords: Sequence[str]) -> int:
    file_keywords = [keyword.lower() for keyword in file_keywords]
    if not file_keywords or not comment_keywords:
        return 0
    matched = [
        fk
        for fk in file_keywords
        if any(ck == fk or fk in ck or ck in fk for ck in comment_keywords)
    ]
    ratio = len(matched) / max(len(file_keywords), len(comment_keywords))
    return _round(ratio * KEYWORD_WEIGHT)


def filename_score(file_name: str, suggested: str, comment_keywords: Sequence[str]) -> int:
    stem = file_name.lower()
    if stem.endswith(RULE_FILE_SUFFIX):
        stem = stem[: -len(RULE_FILE_SUFFIX)]
    suggested = suggested.lower()
    if stem and stem == suggested:
        return FILENAME_EXACT
    if stem and suggested and (suggested in stem or stem in suggested):
        return FILENAME_CONTAINS
    if not comment_keywords:
        return 0
    hits = sum(1 for keyword in comment_keywords if keyword in stem)
    return _round(hits / len(comment_keywords) * FILENAME_KEYWORD_WEIGHT)


def content_score(content: str, comment_keywords: Sequence[str]) -> int:
    lowered = content.lower()
    hits = sum(1 for keyword in comment_keywords if keyword in lowered)
    return min(CONTENT_CAP, hits * CONTENT_PER_KEYWORD)


def _round(value: float) -> int:
    return int(value + 0.5)


__all__ = [
    "FileMatcher",
    "category_score",
    "content_score",
    "filename_score",
    "keyword_score",
    "score_file",
]
