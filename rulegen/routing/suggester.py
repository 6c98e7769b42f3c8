"""Rule-based directory suggestions with optional language-model arbitration."""

from __future__ import annotations

import enum
import json
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from ..config import DEFAULT_RULES_ROOT
from ..corpus.analyzer import AnalysisResult, find_similar
from ..corpus.tree import join_path
from ..llm.base import TextGenerator
from ..logging import get_logger
from ..models import DirectoryCandidate, EnhancedComment, ParsedComment
from ..prompting.builder import ARBITRATION_SYSTEM_PROMPT, PromptBuilder
from .rules import DirectoryRules

MAX_CANDIDATES = 3
EXISTING_DIRECTORY_BONUS = 15
MAPPED_CATEGORY_SCORE = 75
ROOT_CATEGORY_SCORE = 70
SIMILAR_BASE_SCORE = 60
SIMILAR_STEP = 5
SIMILAR_MAX_SCORE = 95
FALLBACK_SCORE = 50
ARBITRATION_MAX_TOKENS = 500
ARBITRATION_TEMPERATURE = 0.3

KEYWORD = "keyword"
CATEGORY = "category"
SIMILAR = "similar"
FALLBACK = "fallback"
LLM = "llm"

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

logger = get_logger("routing.suggester")

CommentLike = Union[ParsedComment, EnhancedComment]


class FallbackReason(str, enum.Enum):
    NO_LLM = "no-llm"
    LLM_ERROR = "llm-error"
    NO_JSON = "no-json"
    INVALID_FORMAT = "invalid-format"
    OUT_OF_RANGE = "out-of-range"


@dataclass(frozen=True)
class Selection:
    """The language model picked ``candidate`` at ``index``."""

    candidate: DirectoryCandidate
    index: int
    reasoning: str


@dataclass(frozen=True)
class Fallback:
    """Arbitration did not happen or failed; ``candidate`` is the top rule-based one."""

    candidate: DirectoryCandidate
    reason: FallbackReason
    detail: str = ""


ArbitrationResult = Union[Selection, Fallback]


class DirectorySuggester:
    """Proposes a storage directory for a comment that matched no existing file."""

    def __init__(
        self,
        rules: DirectoryRules | None = None,
        llm: TextGenerator | None = None,
        *,
        base_dir: str = DEFAULT_RULES_ROOT,
        prompts: PromptBuilder | None = None,
    ) -> None:
        self.rules = rules or DirectoryRules()
        self.llm = llm
        self.base_dir = base_dir.strip("/")
        self.prompts = prompts or PromptBuilder()

    async def suggest(
        self,
        parsed: CommentLike,
        analysis: AnalysisResult | None = None,
        *,
        llm_available: bool = True,
    ) -> str:
        """Return the chosen directory path; never empty."""
        result = await self.arbitrate(parsed, analysis, llm_available=llm_available)
        if isinstance(result, Fallback) and result.reason is not FallbackReason.NO_LLM:
            logger.warning(
                "Directory arbitration fell back to %s (%s)",
                result.candidate.path,
                result.reason.value,
            )
        return result.candidate.path

    async def arbitrate(
        self,
        parsed: CommentLike,
        analysis: AnalysisResult | None = None,
        *,
        llm_available: bool = True,
    ) -> ArbitrationResult:
        candidates = self.candidates(parsed, analysis)
        top = candidates[0]
        if self.llm is None or not llm_available:
            return Fallback(top, FallbackReason.NO_LLM)

        directories = analysis.directory_hierarchy.all_paths if analysis else []
        prompt = self.prompts.arbitration(parsed, candidates, directories)
        try:
            response = await self.llm.generate_text(
                f"{ARBITRATION_SYSTEM_PROMPT}\n\n{prompt}",
                max_tokens=ARBITRATION_MAX_TOKENS,
                temperature=ARBITRATION_TEMPERATURE,
            )
        except Exception as exc:
            return Fallback(top, FallbackReason.LLM_ERROR, str(exc))
        return parse_selection(response, candidates)

    def candidates(
        self, parsed: CommentLike, analysis: AnalysisResult | None = None
    ) -> List[DirectoryCandidate]:
        """Deduplicated rule-based candidates, best first, at most three."""
        found: List[DirectoryCandidate] = []
        for candidate in (
            self._by_keywords(parsed.keywords, analysis),
            self._by_category(parsed.category),
            self._by_similar_files(parsed, analysis),
        ):
            if candidate is not None:
                found.append(candidate)
        found.append(
            DirectoryCandidate(
                path=self.base_dir,
                score=FALLBACK_SCORE,
                reasoning="Default directory (no other rule matched)",
                strategy=FALLBACK,
            )
        )
        ranked = sorted(_deduplicate(found), key=lambda candidate: -candidate.score)
        logger.debug(
            "Directory candidates: %s",
            ", ".join(f"{candidate.path}={candidate.score}" for candidate in ranked),
        )
        return ranked[:MAX_CANDIDATES]

    def _by_keywords(
        self, keywords: Sequence[str], analysis: AnalysisResult | None
    ) -> Optional[DirectoryCandidate]:
        match = self.rules.match_keywords(keywords)
        if match is None:
            return None
        path = join_path(self.base_dir, match.directory)
        score = match.score
        reasoning = f"Keyword match: {', '.join(match.matched_keywords)}"
        if analysis is not None and _path_exists(path, analysis.directory_hierarchy.all_paths):
            score += EXISTING_DIRECTORY_BONUS
            reasoning += " (matches existing directory structure)"
        return DirectoryCandidate(
            path=path,
            score=min(int(score + 0.5), 100),
            reasoning=reasoning,
            strategy=KEYWORD,
        )

    def _by_category(self, category: str) -> DirectoryCandidate:
        directory = self.rules.category_directory(category)
        if directory is None:
            return DirectoryCandidate(
                path=self.base_dir,
                score=ROOT_CATEGORY_SCORE,
                reasoning=f"Category '{category}' is stored at the root directory",
                strategy=CATEGORY,
            )
        return DirectoryCandidate(
            path=join_path(self.base_dir, directory),
            score=MAPPED_CATEGORY_SCORE,
            reasoning=f"Category '{category}' maps to '{directory}/'",
            strategy=CATEGORY,
        )

    def _by_similar_files(
        self, parsed: CommentLike, analysis: AnalysisResult | None
    ) -> Optional[DirectoryCandidate]:
        if analysis is None or not analysis.existing_files:
            return None
        keywords = [keyword.lower() for keyword in parsed.keywords]
        similar = find_similar(analysis.existing_files, keywords, parsed.category)
        if not similar:
            return None
        directory, frequency = Counter(file.directory for file in similar).most_common(1)[0]
        return DirectoryCandidate(
            path=directory or self.base_dir,
            score=min(SIMILAR_BASE_SCORE + SIMILAR_STEP * frequency, SIMILAR_MAX_SCORE),
            reasoning=f"{frequency} similar file(s) live in this directory",
            strategy=SIMILAR,
        )


def parse_selection(response: str, candidates: Sequence[DirectoryCandidate]) -> ArbitrationResult:
    """Interpret an arbitration response, falling back to the first candidate."""
    top = candidates[0]
    match = _JSON_OBJECT_RE.search(response or "")
    if not match:
        return Fallback(top, FallbackReason.NO_JSON, (response or "")[:80])
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        return Fallback(top, FallbackReason.INVALID_FORMAT, str(exc))
    if not isinstance(payload, dict):
        return Fallback(top, FallbackReason.INVALID_FORMAT, "response is not an object")
    selected = payload.get("selected")
    reasoning = payload.get("reasoning")
    if isinstance(selected, bool) or not isinstance(selected, int) or not isinstance(reasoning, str):
        return Fallback(top, FallbackReason.INVALID_FORMAT, "expected integer 'selected' and string 'reasoning'")
    if not 0 <= selected < len(candidates):
        return Fallback(top, FallbackReason.OUT_OF_RANGE, f"selected={selected}")
    chosen = candidates[selected]
    return Selection(
        candidate=DirectoryCandidate(
            path=chosen.path,
            score=chosen.score,
            reasoning=reasoning,
            strategy=LLM,
        ),
        index=selected,
        reasoning=reasoning,
    )


def _path_exists(path: str, all_paths: Sequence[str]) -> bool:
    prefix = path + "/"
    return any(existing == path or existing.startswith(prefix) for existing in all_paths)


def _deduplicate(candidates: Sequence[DirectoryCandidate]) -> List[DirectoryCandidate]:
    by_path: Dict[str, DirectoryCandidate] = {}
    for candidate in candidates:
        current = by_path.get(candidate.path)
        if current is None or candidate.score > current.score:
            by_path[candidate.path] = candidate
    return list(by_path.values())


__all__ = [
    "ArbitrationResult",
    "DirectorySuggester",
    "Fallback",
    "FallbackReason",
    "Selection",
    "parse_selection",
]
