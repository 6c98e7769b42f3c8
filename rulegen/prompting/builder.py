"""Builds prompts for the optional language-model collaborator."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from jinja2 import Environment, FileSystemLoader

from ..classifier.vocabulary import CATEGORY_KEYWORDS
from ..models import CommentReply, DirectoryCandidate, ParsedComment

EXCERPT_LENGTH = 200

CLASSIFICATION_SYSTEM_PROMPT = (
    "You classify code review comments. Answer with only one word: instruction or skill."
)
ARBITRATION_SYSTEM_PROMPT = (
    "You organise coding-convention files in a repository. Respond with JSON only."
)
ENHANCEMENT_SYSTEM_PROMPT = (
    "You are a senior engineer turning code review comments into reusable team conventions. "
    "Stay grounded in the comment and never invent rules it does not state."
)


class PromptBuilder:
    """Renders the arbitration, classification and enhancement prompts."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        default_dir = Path(__file__).with_name("templates")
        directories = [str(default_dir)]
        if templates_dir is not None and Path(templates_dir) != default_dir:
            directories.insert(0, str(templates_dir))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def arbitration(
        self,
        parsed: ParsedComment,
        candidates: Sequence[DirectoryCandidate],
        directories: Iterable[str] = (),
    ) -> str:
        template = self._env.get_template("arbitration.j2")
        return template.render(
            category=parsed.category,
            keywords=list(parsed.keywords)[:5],
            excerpt=excerpt(parsed.content),
            directories=sorted(directories),
            candidates=list(candidates),
        ).strip()

    def classification(self, parsed: ParsedComment) -> str:
        template = self._env.get_template("classification.j2")
        return template.render(content=parsed.content, keywords=list(parsed.keywords)).strip()

    def enhancement(
        self,
        parsed: ParsedComment,
        replies: Sequence[CommentReply] = (),
    ) -> str:
        template = self._env.get_template("enhancement.j2")
        return template.render(
            content=parsed.content,
            code_examples=list(parsed.code_examples),
            replies=list(replies),
            categories=list(CATEGORY_KEYWORDS),
        ).strip()


def excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """Single-line excerpt of ``text`` for prompts."""
    collapsed = " ".join(text.split())
    if len(collapsed) <= limit:
        return collapsed
    return collapsed[:limit].rstrip() + "..."


__all__ = [
    "ARBITRATION_SYSTEM_PROMPT",
    "CLASSIFICATION_SYSTEM_PROMPT",
    "ENHANCEMENT_SYSTEM_PROMPT",
    "PromptBuilder",
    "excerpt",
]
