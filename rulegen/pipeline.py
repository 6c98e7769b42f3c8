"""Batch conversion of review comments into rule files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Union

from .classifier.comment import CommentClassifier
from .classifier.filter import ConventionFilter
from .config import RuleGenConfig
from .corpus.analyzer import AnalysisResult, CorpusAnalyzer
from .corpus.tree import FileTree
from .generators import Generator, GeneratorOptions, create_generators
from .generators.base import Clock
from .llm.base import TextGenerator
from .llm.enhancer import CommentEnhancer
from .logging import get_logger
from .models import (
    Comment,
    EnhancedComment,
    FileGenerationResult,
    MatchResult,
    ParsedComment,
    RepositoryRef,
)
from .postproc.merger import ContentMerger
from .routing.matcher import FileMatcher
from .routing.naming import apply_naming_pattern, build_file_path, ensure_unique_name
from .routing.suggester import DirectorySuggester
from .stores.analysis_cache import AnalysisCache

SINGLE = "single"
BATCH = "batch"
THREAD = "thread"
MODES = (SINGLE, BATCH, THREAD)

CommentLike = Union[ParsedComment, EnhancedComment]


@dataclass
class ConversionFailure:
    comment_id: str
    stage: str
    message: str


@dataclass
class ConversionReport:
    """Outcome of converting a batch of comments."""

    results: List[FileGenerationResult] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    failures: List[ConversionFailure] = field(default_factory=list)


class ConversionPipeline:
    """Gate, classify, route, generate and merge a batch of comments."""

    def __init__(
        self,
        tree: FileTree,
        config: RuleGenConfig | None = None,
        *,
        llm: TextGenerator | None = None,
        classifier: CommentClassifier | None = None,
        convention_filter: ConventionFilter | None = None,
        analyzer: CorpusAnalyzer | None = None,
        matcher: FileMatcher | None = None,
        suggester: DirectorySuggester | None = None,
        merger: ContentMerger | None = None,
        generators: Dict[str, Generator] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.tree = tree
        self.config = config or RuleGenConfig(root=Path("."))
        storage = self.config.storage
        self.roots = storage.roots

        self.llm = llm
        self.classifier = classifier or CommentClassifier()
        self.convention_filter = convention_filter or ConventionFilter()
        self.analyzer = analyzer or CorpusAnalyzer(
            root=storage.rules_root,
            max_depth=self.config.analysis.max_depth,
            cache=AnalysisCache(ttl=self.config.analysis.cache_ttl),
        )
        self.matcher = matcher or FileMatcher(
            tree,
            corpus_threshold=self.config.matching.corpus_threshold,
            directory_threshold=self.config.matching.directory_threshold,
        )
        self.suggester = suggester or DirectorySuggester(llm=llm, base_dir=storage.rules_root)
        self.merger = merger or ContentMerger()
        self.enhancer = CommentEnhancer(llm) if llm is not None else None
        if generators is None:
            generators = create_generators(
                self.config.generators.enabled, llm=llm, storage=storage, clock=clock
            )
        self.generators = generators
        self.logger = get_logger("pipeline")

    async def convert(
        self,
        comments: Sequence[Comment],
        repository: RepositoryRef,
        mode: str = SINGLE,
    ) -> ConversionReport:
        """Convert ``comments``; failures degrade per comment and never abort the batch."""
        if mode not in MODES:
            raise ValueError(f"Unknown conversion mode {mode!r}; expected one of {', '.join(MODES)}")
        report = ConversionReport()
        generated: List[FileGenerationResult] = []
        for comment in comments:
            if not self.accepts(comment, mode):
                self.logger.debug("Comment %s rejected as non-convention", comment.id)
                report.rejected.append(comment.id)
                continue
            try:
                parsed = await self.prepare(comment)
            except Exception as exc:  # pragma: no cover - defensive guard
                self.logger.warning("Failed to classify comment %s: %s", comment.id, exc)
                report.failures.append(ConversionFailure(comment.id, "classify", str(exc)))
                continue
            for kind, generator in self.generators.items():
                try:
                    result = await self.generate(kind, generator, comment, parsed, repository)
                except Exception as exc:
                    self.logger.warning(
                        "Generator %s failed for comment %s: %s", kind, comment.id, exc
                    )
                    report.failures.append(ConversionFailure(comment.id, kind, str(exc)))
                    continue
                generated.append(result)

        report.results = self.merger.merge(generated)
        self.logger.info(
            "Converted %d comment(s) into %d file(s); %d rejected, %d failure(s)",
            len(comments),
            len(report.results),
            len(report.rejected),
            len(report.failures),
        )
        return report

    def accepts(self, comment: Comment, mode: str) -> bool:
        if mode == BATCH:
            return self.convention_filter.is_convention_comment(comment)
        if mode == THREAD:
            return self.convention_filter.is_convention_thread_comment(comment)
        return self.classifier.is_convention_comment(comment.content)

    async def prepare(self, comment: Comment) -> CommentLike:
        parsed = self.classifier.classify(comment.content)
        if self.enhancer is None:
            return parsed
        return await self.enhancer.enhance(parsed, comment.replies)

    async def generate(
        self,
        kind: str,
        generator: Generator,
        comment: Comment,
        parsed: CommentLike,
        repository: RepositoryRef,
    ) -> FileGenerationResult:
        match, path = await self.route(kind, generator, parsed, repository)
        options = GeneratorOptions(
            comment=parsed,
            original=comment,
            repository=repository,
            existing_content=match.file.content if match.is_match and match.file else None,
            suggested_path=path,
        )
        result = await generator.generate(options)
        return FileGenerationResult(
            project_type=kind,
            file_path=result.file_path,
            content=result.content,
            is_update=result.is_update,
        )

    async def route(
        self,
        kind: str,
        generator: Generator,
        parsed: CommentLike,
        repository: RepositoryRef,
    ) -> tuple[MatchResult, str]:
        """Existing file to update, or a fresh path for a new one."""
        if kind == "claude-code":
            match = await self.matcher.find_across_roots(parsed, self.roots)
            if match.is_match and match.file is not None:
                self.logger.debug("Comment matches %s (score %d)", match.file.path, match.score)
                return match, match.file.path
            analysis = await self.analyzer.analyze(self.tree, repository)
            directory = await self.suggester.suggest(parsed, analysis)
            return match, self._new_path(directory, parsed, analysis)

        directory = generator.target_directory()
        files = await self.matcher.load_directory(directory) or []
        match = self.matcher.match(files, parsed)
        if match.is_match and match.file is not None:
            return match, match.file.path
        existing = {file.path for file in files}
        name = apply_naming_pattern(parsed.suggested_file_name)
        return match, ensure_unique_name(build_file_path(directory, name), existing)

    @staticmethod
    def _new_path(directory: str, parsed: CommentLike, analysis: Optional[AnalysisResult]) -> str:
        existing: Set[str] = set()
        name = parsed.suggested_file_name
        if analysis is not None:
            existing = {file.path for file in analysis.existing_files}
            name = apply_naming_pattern(name, analysis.pattern.naming_pattern)
        return ensure_unique_name(build_file_path(directory, name or "conventions"), existing)


__all__ = [
    "BATCH",
    "ConversionFailure",
    "ConversionPipeline",
    "ConversionReport",
    "MODES",
    "SINGLE",
    "THREAD",
]
