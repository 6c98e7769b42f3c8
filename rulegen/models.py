"""Core data models shared across rulegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_CATEGORY = "conventions"


@dataclass(frozen=True)
class CommentReply:
    """A reply attached to a review comment thread."""

    id: str
    author: str
    content: str
    created_at: str


@dataclass(frozen=True)
class Comment:
    """Raw review comment handed over by the acquisition layer."""

    id: str
    author: str
    content: str
    created_at: str
    platform: str
    url: str = ""
    replies: Tuple[CommentReply, ...] = ()
    code_context: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Comment":
        replies = tuple(
            CommentReply(
                id=str(reply.get("id", "")),
                author=str(reply.get("author", "")),
                content=str(reply.get("content", "")),
                created_at=str(reply.get("created_at", reply.get("createdAt", ""))),
            )
            for reply in payload.get("replies") or []
            if isinstance(reply, dict)
        )
        return cls(
            id=str(payload.get("id", "")),
            author=str(payload.get("author", "")),
            content=str(payload.get("content", "")),
            created_at=str(payload.get("created_at", payload.get("createdAt", ""))),
            platform=str(payload.get("platform", "github")),
            url=str(payload.get("url", "")),
            replies=replies,
            code_context=payload.get("code_context") or payload.get("codeContext"),
        )


@dataclass(frozen=True)
class RepositoryRef:
    """Identity of the repository a corpus belongs to."""

    owner: str
    name: str
    branch: str = "main"
    host: str = "github.com"
    pr_number: Optional[int] = None

    @property
    def cache_key(self) -> str:
        return f"{self.host}/{self.owner}/{self.name}@{self.branch}"


@dataclass(frozen=True)
class ParsedComment:
    """Keyword/category signature extracted from a comment."""

    content: str
    keywords: Tuple[str, ...]
    category: str
    code_examples: Tuple[str, ...]
    suggested_file_name: str

    @property
    def is_convention(self) -> bool:
        return bool(self.keywords)


@dataclass(frozen=True)
class CodeExplanation:
    """LLM explanation for a single code example."""

    code: str
    explanation: str
    is_good_example: Optional[bool] = None


@dataclass(frozen=True)
class EnhancedComment:
    """A ParsedComment plus optional LLM-derived fields."""

    base: ParsedComment
    llm_enhanced: bool = False
    summary: Optional[str] = None
    detailed_explanation: Optional[str] = None
    code_explanations: Tuple[CodeExplanation, ...] = ()
    additional_keywords: Tuple[str, ...] = ()
    suggested_category: Optional[str] = None
    confidence: Optional[int] = None

    @property
    def content(self) -> str:
        return self.base.content

    @property
    def keywords(self) -> Tuple[str, ...]:
        merged: List[str] = []
        for keyword in (*self.base.keywords, *self.additional_keywords):
            normalized = keyword.strip().lower()
            if normalized and normalized not in merged:
                merged.append(normalized)
        return tuple(merged[:15])

    @property
    def category(self) -> str:
        # classifier imports this module
        from .classifier.vocabulary import CATEGORY_KEYWORDS

        suggested = (self.suggested_category or "").strip().lower()
        if suggested in CATEGORY_KEYWORDS:
            return suggested
        return self.base.category

    @property
    def code_examples(self) -> Tuple[str, ...]:
        return self.base.code_examples

    @property
    def suggested_file_name(self) -> str:
        return self.base.suggested_file_name


@dataclass
class ClaudeFile:
    """Read-only projection of an existing rule file in the corpus."""

    path: str
    title: str
    keywords: List[str]
    category: str
    content: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def directory(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""


@dataclass(frozen=True)
class MatchResult:
    """Outcome of scoring existing files against a parsed comment."""

    file: Optional[ClaudeFile]
    score: int
    is_match: bool

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(file=None, score=0, is_match=False)


@dataclass(frozen=True)
class DirectoryCandidate:
    """A proposed storage directory with a heuristic score."""

    path: str
    score: int
    reasoning: str
    strategy: str


@dataclass(frozen=True)
class FileGenerationResult:
    """Final output unit handed to the publishing collaborator."""

    project_type: str
    file_path: str
    content: str
    is_update: bool


__all__ = [
    "ClaudeFile",
    "CodeExplanation",
    "Comment",
    "CommentReply",
    "DEFAULT_CATEGORY",
    "DirectoryCandidate",
    "EnhancedComment",
    "FileGenerationResult",
    "MatchResult",
    "ParsedComment",
    "RepositoryRef",
]
