"""Optional LLM enrichment of parsed comments."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import CodeExplanation, CommentReply, EnhancedComment, ParsedComment
from ..prompting.builder import ENHANCEMENT_SYSTEM_PROMPT, PromptBuilder
from .base import TextGenerator

ENHANCEMENT_MAX_TOKENS = 2000
ENHANCEMENT_TEMPERATURE = 0.3

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

logger = get_logger("llm.enhancer")


class CommentEnhancer:
    """Asks the language model for a summary, explanations and extra keywords."""

    def __init__(self, llm: TextGenerator, *, prompts: PromptBuilder | None = None) -> None:
        self.llm = llm
        self.prompts = prompts or PromptBuilder()

    async def enhance(
        self, parsed: ParsedComment, replies: Sequence[CommentReply] = ()
    ) -> EnhancedComment:
        """Return an enhanced comment, or an un-enhanced wrapper when anything fails."""
        prompt = self.prompts.enhancement(parsed, replies)
        try:
            response = await self.llm.generate_text(
                f"{ENHANCEMENT_SYSTEM_PROMPT}\n\n{prompt}",
                max_tokens=ENHANCEMENT_MAX_TOKENS,
                temperature=ENHANCEMENT_TEMPERATURE,
            )
        except Exception as exc:
            logger.warning("LLM enhancement failed: %s", exc)
            return EnhancedComment(base=parsed)

        payload = parse_json_object(response)
        if payload is None:
            logger.warning("LLM enhancement returned no usable JSON object")
            return EnhancedComment(base=parsed)
        return EnhancedComment(
            base=parsed,
            llm_enhanced=True,
            summary=_optional_str(payload.get("summary")),
            detailed_explanation=_optional_str(payload.get("detailedExplanation")),
            code_explanations=_code_explanations(payload.get("codeExplanations")),
            additional_keywords=_keywords(payload.get("additionalKeywords")),
            suggested_category=_optional_str(payload.get("suggestedCategory")),
            confidence=_confidence(payload.get("confidence")),
        )


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """First JSON object embedded in ``text``; tolerates surrounding prose and fences."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _keywords(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def _code_explanations(value: Any) -> Tuple[CodeExplanation, ...]:
    if not isinstance(value, list):
        return ()
    explanations: List[CodeExplanation] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        code = item.get("code")
        explanation = item.get("explanation")
        if not isinstance(code, str) or not isinstance(explanation, str):
            continue
        good = item.get("isGoodExample")
        explanations.append(
            CodeExplanation(
                code=code,
                explanation=explanation,
                is_good_example=good if isinstance(good, bool) else None,
            )
        )
    return tuple(explanations)


def _confidence(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(0, min(100, int(value)))


__all__ = ["CommentEnhancer", "parse_json_object"]
