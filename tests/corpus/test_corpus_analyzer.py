"""Tests for rulegen.corpus.analyzer."""

from __future__ import annotations

import asyncio

from rulegen.corpus.analyzer import (
    KEBAB_CASE,
    PASCAL_CASE,
    SNAKE_CASE,
    CorpusAnalyzer,
    confidence_for,
    detect_naming_pattern,
    find_similar,
    parse_rule_file,
)
from rulegen.models import RepositoryRef
from rulegen.stores.analysis_cache import AnalysisCache
from tests._fixtures.trees import MemoryFileTree, rule_file


def _corpus() -> MemoryFileTree:
    return MemoryFileTree(
        {
            ".claude/rules/naming.md": rule_file(
                title="Naming", category="naming", keywords=["pascalcase", "component"]
            ),
            ".claude/rules/notes.txt": "not a rule file",
            ".claude/rules/testing/unit-tests.md": rule_file(
                title="Unit tests", category="testing", keywords=["test", "mock"]
            ),
            ".claude/rules/ui/react-hooks.md": rule_file(
                title="Hooks", category="style", keywords=["hooks", "react"]
            ),
        }
    )


def test_analyze_collects_rule_files_and_patterns() -> None:
    result = asyncio.run(CorpusAnalyzer().analyze(_corpus()))

    assert [file.path for file in result.existing_files] == [
        ".claude/rules/naming.md",
        ".claude/rules/testing/unit-tests.md",
        ".claude/rules/ui/react-hooks.md",
    ]
    assert result.confidence == 80
    assert result.suggested_location == ".claude/rules"
    pattern = result.pattern
    assert pattern.naming_pattern == KEBAB_CASE
    assert pattern.category_distribution == {"naming": 1, "testing": 1, "style": 1}
    assert pattern.directories == [".claude/rules", ".claude/rules/testing", ".claude/rules/ui"]
    assert pattern.common_keywords[0] == "pascalcase"
    assert pattern.frontmatter_fields == ["title", "keywords", "category"]


def test_directory_hierarchy_lists_every_prefix() -> None:
    hierarchy = asyncio.run(CorpusAnalyzer().analyze(_corpus())).directory_hierarchy

    assert hierarchy.all_paths == [".claude/rules", ".claude/rules/testing", ".claude/rules/ui"]
    assert [child.name for child in hierarchy.tree.children] == ["testing", "ui"]
    assert ".claude/rules/ui/" in hierarchy
    assert ".claude/rules/api" not in hierarchy


def test_empty_or_missing_root_gives_default_analysis() -> None:
    result = asyncio.run(CorpusAnalyzer().analyze(MemoryFileTree({})))

    assert result.existing_files == []
    assert result.confidence == 50
    assert result.suggested_location == ".claude/rules"
    assert result.pattern.naming_pattern == KEBAB_CASE
    assert result.pattern.average_file_size == 500.0
    assert result.directory_hierarchy.all_paths == []


def test_unreadable_files_and_directories_are_skipped() -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/a.md": rule_file(title="A", category="style", keywords=["a"]),
            ".claude/rules/b.md": rule_file(title="B", category="style", keywords=["b"]),
            ".claude/rules/locked/c.md": rule_file(title="C", category="style", keywords=["c"]),
        },
        unreadable=[".claude/rules/b.md"],
        unlistable=[".claude/rules/locked"],
    )

    result = asyncio.run(CorpusAnalyzer().analyze(tree))

    assert [file.path for file in result.existing_files] == [".claude/rules/a.md"]


def test_backend_errors_are_skipped_like_io_errors() -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/a.md": rule_file(title="A", category="style", keywords=["a"]),
            ".claude/rules/b.md": rule_file(title="B", category="style", keywords=["b"]),
            ".claude/rules/remote/c.md": rule_file(title="C", category="style", keywords=["c"]),
        },
        failing=[".claude/rules/b.md", ".claude/rules/remote"],
    )

    result = asyncio.run(CorpusAnalyzer().analyze(tree))

    assert [file.path for file in result.existing_files] == [".claude/rules/a.md"]


def test_walk_respects_max_depth() -> None:
    tree = _corpus()

    result = asyncio.run(CorpusAnalyzer(max_depth=0).analyze(tree))

    assert [file.path for file in result.existing_files] == [".claude/rules/naming.md"]
    assert tree.listed == [".claude/rules"]


def test_analysis_is_cached_per_repository() -> None:
    tree = _corpus()
    analyzer = CorpusAnalyzer(cache=AnalysisCache(ttl=300))
    repository = RepositoryRef(owner="acme", name="webapp")

    first = asyncio.run(analyzer.analyze(tree, repository))
    listed = len(tree.listed)
    second = asyncio.run(analyzer.analyze(tree, repository))

    assert second is first
    assert len(tree.listed) == listed

    asyncio.run(analyzer.analyze(tree, RepositoryRef(owner="acme", name="webapp", branch="dev")))
    assert len(tree.listed) > listed


def test_analysis_without_repository_is_not_cached() -> None:
    tree = _corpus()
    analyzer = CorpusAnalyzer()

    asyncio.run(analyzer.analyze(tree))
    asyncio.run(analyzer.analyze(tree))

    assert tree.listed.count(".claude/rules") == 2
    assert len(analyzer.cache) == 0


def test_parse_rule_file_without_header_uses_file_stem() -> None:
    parsed = parse_rule_file(".claude/rules/api/errors.md", "# Errors\n\nBody")

    assert parsed.title == "errors"
    assert parsed.category == "conventions"
    assert parsed.keywords == []
    assert parsed.directory == ".claude/rules/api"
    assert parsed.name == "errors.md"


def test_parse_rule_file_normalizes_keywords() -> None:
    content = rule_file(title="X", category="Naming", keywords=["React", "react", " Hooks "])

    parsed = parse_rule_file("x.md", content)

    assert parsed.keywords == ["react", "hooks"]
    assert parsed.category == "naming"


def test_detect_naming_pattern_votes() -> None:
    assert detect_naming_pattern(["UserCard.md", "ApiClient.md", "user_card.md"]) == PASCAL_CASE
    assert detect_naming_pattern(["user_card.md", "api_client.md", "naming.md"]) == SNAKE_CASE
    assert detect_naming_pattern(["naming.md"]) == KEBAB_CASE
    assert detect_naming_pattern([]) == KEBAB_CASE


def test_find_similar_needs_two_shared_keywords() -> None:
    files = [
        parse_rule_file("a.md", rule_file(title="A", category="naming", keywords=["react", "component"])),
        parse_rule_file("b.md", rule_file(title="B", category="naming", keywords=["react"])),
        parse_rule_file("c.md", rule_file(title="C", category="style", keywords=["react", "component"])),
    ]

    similar = find_similar(files, ["react", "component", "naming"], "naming")

    assert [file.path for file in similar] == ["a.md"]


def test_confidence_grows_with_corpus_size() -> None:
    assert [confidence_for(n) for n in (0, 1, 3, 9, 10, 50)] == [50, 60, 80, 80, 95, 95]
