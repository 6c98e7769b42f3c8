"""Analyzer for the existing rule-file corpus of a repository."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import DEFAULT_MAX_DEPTH, DEFAULT_RULES_ROOT
from ..logging import get_logger
from ..models import DEFAULT_CATEGORY, ClaudeFile, RepositoryRef
from ..stores.analysis_cache import AnalysisCache
from .frontmatter import parse_frontmatter
from .tree import FileTree

RULE_FILE_SUFFIX = ".md"

KEBAB_CASE = "kebab-case"
PASCAL_CASE = "PascalCase"
SNAKE_CASE = "snake_case"

DEFAULT_AVERAGE_SIZE = 500.0
DEFAULT_FRONTMATTER_FIELDS = ("title", "keywords", "category", "created_at")
COMMON_KEYWORD_LIMIT = 10
SCHEMA_SHARE = 0.5

# Checked in order; the first pattern wins a tied vote.
_NAMING_PATTERNS = (
    (KEBAB_CASE, re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")),
    (PASCAL_CASE, re.compile(r"^[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]+)*$")),
    (SNAKE_CASE, re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")),
)

logger = get_logger("corpus")


@dataclass
class InstructionPattern:
    """Conventions inferred from the files already in the corpus."""

    directories: List[str] = field(default_factory=list)
    naming_pattern: str = KEBAB_CASE
    category_distribution: Dict[str, int] = field(default_factory=dict)
    average_file_size: float = DEFAULT_AVERAGE_SIZE
    common_keywords: List[str] = field(default_factory=list)
    frontmatter_fields: List[str] = field(default_factory=lambda: list(DEFAULT_FRONTMATTER_FIELDS))


@dataclass
class DirectoryNode:
    name: str
    path: str
    children: List["DirectoryNode"] = field(default_factory=list)

    def child(self, name: str) -> Optional["DirectoryNode"]:
        for node in self.children:
            if node.name == name:
                return node
        return None


@dataclass
class DirectoryHierarchy:
    """Every directory prefix observed in the corpus, flat and as a tree."""

    all_paths: List[str]
    tree: DirectoryNode

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path.strip("/") in self.all_paths


@dataclass
class AnalysisResult:
    pattern: InstructionPattern
    existing_files: List[ClaudeFile]
    suggested_location: str
    confidence: int
    directory_hierarchy: DirectoryHierarchy


class CorpusAnalyzer:
    """Walks a rules root, parses each file header and derives corpus patterns."""

    def __init__(
        self,
        *,
        root: str = DEFAULT_RULES_ROOT,
        max_depth: int = DEFAULT_MAX_DEPTH,
        cache: AnalysisCache[AnalysisResult] | None = None,
    ) -> None:
        self.root = root.strip("/")
        self.max_depth = max_depth
        self.cache = cache if cache is not None else AnalysisCache()

    async def analyze(
        self, tree: FileTree, repository: RepositoryRef | None = None
    ) -> AnalysisResult:
        """Return the corpus analysis, served from cache for a known repository."""
        cache_key = f"{repository.cache_key}:{self.root}" if repository else None
        if cache_key:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Corpus analysis cache hit for %s", cache_key)
                return cached

        files = await self.collect_files(tree)
        result = self.summarize(files)
        if cache_key:
            self.cache.store(cache_key, result)
        logger.debug(
            "Analyzed %d rule file(s) under %s (confidence %d)",
            len(files),
            self.root,
            result.confidence,
        )
        return result

    async def collect_files(self, tree: FileTree) -> List[ClaudeFile]:
        files: List[ClaudeFile] = []
        await self._walk(tree, self.root, files, depth=0)
        return files

    def summarize(self, files: Sequence[ClaudeFile]) -> AnalysisResult:
        if not files:
            return AnalysisResult(
                pattern=InstructionPattern(),
                existing_files=[],
                suggested_location=self.root,
                confidence=confidence_for(0),
                directory_hierarchy=build_hierarchy([], self.root),
            )
        pattern = extract_pattern(files)
        return AnalysisResult(
            pattern=pattern,
            existing_files=list(files),
            suggested_location=_most_common_directory(files) or self.root,
            confidence=confidence_for(len(files)),
            directory_hierarchy=build_hierarchy(files, self.root),
        )

    async def _walk(
        self, tree: FileTree, path: str, accumulator: List[ClaudeFile], *, depth: int
    ) -> None:
        if depth > self.max_depth:
            return
        try:
            entries = await tree.list_directory(path)
        except Exception as exc:
            logger.warning("Unable to list %s: %s", path, exc)
            return

        for entry in entries:
            if entry.is_file and entry.name.endswith(RULE_FILE_SUFFIX):
                try:
                    content = await tree.read_file(entry.path)
                except Exception as exc:
                    logger.warning("Skipping unreadable rule file %s: %s", entry.path, exc)
                    continue
                accumulator.append(parse_rule_file(entry.path, content))
            elif entry.is_dir:
                await self._walk(tree, entry.path, accumulator, depth=depth + 1)


def parse_rule_file(path: str, content: str) -> ClaudeFile:
    """Project a markdown rule file onto a ClaudeFile."""
    header = parse_frontmatter(content)
    stem = path.rsplit("/", 1)[-1]
    if stem.endswith(RULE_FILE_SUFFIX):
        stem = stem[: -len(RULE_FILE_SUFFIX)]
    keywords: List[str] = []
    for keyword in header.get_list("keywords"):
        normalized = keyword.strip().lower()
        if normalized and normalized not in keywords:
            keywords.append(normalized)
    category = (header.get_str("category") or "").strip().lower() or DEFAULT_CATEGORY
    return ClaudeFile(
        path=path,
        title=header.get_str("title") or stem or "Untitled",
        keywords=keywords,
        category=category,
        content=content,
        frontmatter=dict(header.fields),
    )


def extract_pattern(files: Sequence[ClaudeFile]) -> InstructionPattern:
    directories = list(dict.fromkeys(file.directory for file in files))

    categories: Dict[str, int] = {}
    for file in files:
        categories[file.category] = categories.get(file.category, 0) + 1

    keyword_counts = Counter(keyword for file in files for keyword in file.keywords)
    field_counts = Counter(key for file in files for key in file.frontmatter)
    schema = [key for key, count in field_counts.items() if count >= len(files) * SCHEMA_SHARE]

    return InstructionPattern(
        directories=directories,
        naming_pattern=detect_naming_pattern(file.name for file in files),
        category_distribution=categories,
        average_file_size=sum(len(file.content) for file in files) / len(files),
        common_keywords=[keyword for keyword, _ in keyword_counts.most_common(COMMON_KEYWORD_LIMIT)],
        frontmatter_fields=schema,
    )


def detect_naming_pattern(file_names: Iterable[str]) -> str:
    votes = {name: 0 for name, _ in _NAMING_PATTERNS}
    for file_name in file_names:
        stem = file_name[: -len(RULE_FILE_SUFFIX)] if file_name.endswith(RULE_FILE_SUFFIX) else file_name
        for name, regex in _NAMING_PATTERNS:
            if regex.match(stem):
                votes[name] += 1
                break
    best, best_votes = KEBAB_CASE, 0
    for name, count in votes.items():
        if count > best_votes:
            best, best_votes = name, count
    return best


def build_hierarchy(files: Sequence[ClaudeFile], root: str) -> DirectoryHierarchy:
    root = root.strip("/")
    root_parts = root.split("/") if root else []
    prefixes = set()
    for file in files:
        parts = file.directory.split("/") if file.directory else []
        if parts[: len(root_parts)] != root_parts:
            continue
        for end in range(len(root_parts), len(parts) + 1):
            if end:
                prefixes.add("/".join(parts[:end]))

    all_paths = sorted(prefixes)
    node = DirectoryNode(name=root, path=root)
    for path in all_paths:
        current = node
        parts = path.split("/")
        for index in range(len(root_parts), len(parts)):
            name = parts[index]
            child = current.child(name)
            if child is None:
                child = DirectoryNode(name=name, path="/".join(parts[: index + 1]))
                current.children.append(child)
            current = child
    return DirectoryHierarchy(all_paths=all_paths, tree=node)


def find_similar(
    files: Iterable[ClaudeFile], keywords: Sequence[str], category: str, *, minimum: int = 2
) -> List[ClaudeFile]:
    """Files in ``category`` sharing at least ``minimum`` keywords."""
    wanted = set(keywords)
    return [
        file
        for file in files
        if file.category == category and len(wanted.intersection(file.keywords)) >= minimum
    ]


def confidence_for(file_count: int) -> int:
    if file_count == 0:
        return 50
    if file_count < 3:
        return 60
    if file_count < 10:
        return 80
    return 95


def _most_common_directory(files: Sequence[ClaudeFile]) -> str:
    counts = Counter(file.directory for file in files)
    if not counts:
        return ""
    return counts.most_common(1)[0][0]


__all__ = [
    "AnalysisResult",
    "CorpusAnalyzer",
    "DirectoryHierarchy",
    "DirectoryNode",
    "InstructionPattern",
    "KEBAB_CASE",
    "PASCAL_CASE",
    "SNAKE_CASE",
    "build_hierarchy",
    "confidence_for",
    "detect_naming_pattern",
    "extract_pattern",
    "find_similar",
    "parse_rule_file",
]
