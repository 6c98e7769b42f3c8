"""Shared contract and helpers for rule-file generators."""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from jinja2 import Environment, FileSystemLoader

from ..classifier.comment import summarize_comment
from ..corpus.frontmatter import parse_frontmatter, render_frontmatter
from ..models import Comment, EnhancedComment, ParsedComment, RepositoryRef
from ..routing.naming import build_file_path

CommentLike = Union[ParsedComment, EnhancedComment]
Clock = Callable[[], datetime]

MARKDOWN_EXTENSION = ".md"

_GOOD_MARKER_RE = re.compile(r"✅|좋은|올바른|\bgood\b|(?<!in)correct\b", re.IGNORECASE)
_BAD_MARKER_RE = re.compile(r"❌|나쁜|잘못된|\bbad\b|\bincorrect\b", re.IGNORECASE)
_EXAMPLE_MARKER_RE = re.compile(r"✅|❌|좋은|나쁜")


@dataclass
class GeneratorOptions:
    """Inputs for a single generation call."""

    comment: CommentLike
    original: Comment
    repository: RepositoryRef
    existing_content: Optional[str] = None
    suggested_path: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    content: str
    file_path: str
    is_update: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Generator(abc.ABC):
    """A target format for rule files; the routing core treats all kinds alike."""

    kind: str = ""
    extension: str = MARKDOWN_EXTENSION

    def __init__(self, *, clock: Clock | None = None, templates_dir: Path | None = None) -> None:
        self._clock = clock or _utcnow
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir or Path(__file__).with_name("templates"))),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @abc.abstractmethod
    async def generate(self, options: GeneratorOptions) -> GenerationResult:
        """Render new content, or an update of ``options.existing_content``."""

    @abc.abstractmethod
    def target_directory(self) -> str:
        ...

    def file_path(self, file_name: str, directory: str | None = None) -> str:
        return build_file_path(directory or self.target_directory(), file_name, self.extension)

    def resolve_path(self, options: GeneratorOptions) -> str:
        return options.suggested_path or self.file_path(options.comment.suggested_file_name)

    def today(self) -> str:
        return self._clock().date().isoformat()

    def render(self, template: str, **context: object) -> str:
        rendered = self._env.get_template(template).render(**context)
        return rendered.strip() + "\n"

    def context(self, options: GeneratorOptions) -> Dict[str, object]:
        """Template variables common to every generator."""
        comment = options.comment
        enhanced = enhanced_view(comment)
        source = source_label(options.repository)
        return {
            "title": rule_title(comment),
            "category": comment.category,
            "keywords": list(comment.keywords),
            "rule": rule_text(options),
            "summary": enhanced.summary if enhanced else None,
            "examples": list(comment.code_examples),
            "explanations": list(enhanced.code_explanations) if enhanced else [],
            "enhanced": enhanced is not None,
            "author": options.original.author,
            "date": format_date(options.original.created_at),
            "today": self.today(),
            "source": source,
            "ctx": {"source": source, "url": options.original.url},
        }


def enhanced_view(comment: CommentLike) -> Optional[EnhancedComment]:
    """``comment`` when it carries LLM output, otherwise None."""
    if isinstance(comment, EnhancedComment) and comment.llm_enhanced:
        return comment
    return None


def rule_text(options: GeneratorOptions) -> str:
    enhanced = enhanced_view(options.comment)
    if enhanced and enhanced.detailed_explanation:
        return enhanced.detailed_explanation
    return summarize_comment(options.original.content)


def rule_title(comment: CommentLike) -> str:
    """``<Main Keyword> <Category>``, or just the category when there are no keywords."""
    category = _title_case(comment.category)
    if comment.keywords:
        return f"{_title_case(comment.keywords[0])} {category}"
    return category


def source_label(repository: RepositoryRef) -> str:
    if repository.pr_number is not None:
        return f"PR #{repository.pr_number}"
    return f"{repository.owner}/{repository.name}"


def format_date(value: str) -> str:
    """ISO date for an ISO timestamp; other strings are returned unchanged."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


def merge_keywords(existing: Sequence[str], new: Sequence[str]) -> List[str]:
    merged: List[str] = []
    for keyword in (*existing, *new):
        cleaned = keyword.strip()
        if cleaned and cleaned not in merged:
            merged.append(cleaned)
    return merged


def refresh_frontmatter(
    existing: str, keywords: Sequence[str], today: str
) -> Optional[Tuple[str, str]]:
    """Merge ``keywords`` into the header and bump ``last_updated``.

    Returns the rewritten header block and the untouched body, or None when
    ``existing`` has no header.
    """
    parsed = parse_frontmatter(existing)
    if not parsed.present:
        return None
    fields = dict(parsed.fields)
    fields["keywords"] = merge_keywords(parsed.get_list("keywords"), keywords)
    fields["last_updated"] = today
    return render_frontmatter(fields), parsed.body


def split_examples(content: str, examples: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Partition examples by the good/bad marker that most closely precedes them."""
    good: List[str] = []
    bad: List[str] = []
    for example in examples:
        position = content.find(example)
        before = content[: max(position, 0)]
        last_good = _last_match(_GOOD_MARKER_RE, before)
        last_bad = _last_match(_BAD_MARKER_RE, before)
        if last_good < 0 and last_bad < 0:
            continue
        if last_bad > last_good:
            bad.append(example)
        else:
            good.append(example)
    return good, bad


def has_example_markers(content: str) -> bool:
    return bool(_EXAMPLE_MARKER_RE.search(content))


def _last_match(pattern: re.Pattern[str], text: str) -> int:
    positions = [match.start() for match in pattern.finditer(text)]
    return positions[-1] if positions else -1


def _title_case(value: str) -> str:
    return " ".join(word.capitalize() for word in re.split(r"[-\s]+", value) if word)


__all__ = [
    "GenerationResult",
    "Generator",
    "GeneratorOptions",
    "format_date",
    "merge_keywords",
    "refresh_frontmatter",
    "rule_title",
    "source_label",
    "split_examples",
]
