"""Tests for rulegen.routing.matcher."""

from __future__ import annotations

import asyncio

import pytest

from rulegen.classifier.comment import classify_comment
from rulegen.corpus.analyzer import parse_rule_file
from rulegen.models import ParsedComment
from rulegen.routing.matcher import (
    FileMatcher,
    category_score,
    content_score,
    filename_score,
    keyword_score,
    score_file,
)
from tests._fixtures.trees import MemoryFileTree, rule_file

PASCAL_COMMENT = "You should always use PascalCase for React components"


@pytest.fixture
def parsed() -> ParsedComment:
    return classify_comment(PASCAL_COMMENT)


def _naming_conventions() -> str:
    return rule_file(title="Naming conventions", category="naming", keywords=["pascalcase", "component"])


def test_existing_naming_file_matches_pascalcase_comment(parsed) -> None:
    file = parse_rule_file(".claude/rules/naming-conventions.md", _naming_conventions())

    result = FileMatcher(MemoryFileTree()).match([file], parsed)

    assert result.score == 71
    assert result.is_match is True
    assert result.file is file


def test_score_is_clamped_to_one_hundred(parsed) -> None:
    content = rule_file(
        title="Naming", category="naming", keywords=["pascalcase", "react", "component", "naming"]
    )

    assert score_file(parse_rule_file("naming.md", content), parsed) == 100


def test_category_score_rules() -> None:
    assert category_score("naming", "Naming") == 30
    assert category_score("error-handling", "error") == 27
    assert category_score("state-management", "state") == 27
    assert category_score("api", "database") == 0
    assert category_score("", "naming") == 0


def test_keyword_score_uses_the_larger_list() -> None:
    assert keyword_score(["React", "hooks"], ["react"]) == 25
    assert keyword_score(["component"], ["components"]) == 50
    assert keyword_score([], ["react"]) == 0


def test_filename_score_rules() -> None:
    assert filename_score("naming.md", "naming", []) == 20
    assert filename_score("naming-conventions.md", "naming", []) == 10
    assert filename_score("react-hooks.md", "style", ["react", "hooks", "state"]) == 7
    assert filename_score("misc.md", "style", []) == 0


def test_content_score_is_capped() -> None:
    keywords = ["a1", "b2", "c3", "d4", "e5", "f6"]

    assert content_score(" ".join(keywords), keywords) == 10
    assert content_score("only a1 here", keywords) == 2


def test_first_file_wins_a_tie(parsed) -> None:
    content = _naming_conventions()
    first = parse_rule_file("a/naming-conventions.md", content)
    second = parse_rule_file("b/naming-conventions.md", content)

    result = FileMatcher(MemoryFileTree()).match([first, second], parsed)

    assert result.file is first


def test_no_files_is_a_no_match(parsed) -> None:
    result = FileMatcher(MemoryFileTree()).match([], parsed)

    assert result.file is None
    assert result.score == 0
    assert result.is_match is False


def test_thresholds_are_configurable(parsed) -> None:
    file = parse_rule_file(".claude/rules/naming-conventions.md", _naming_conventions())
    strict = FileMatcher(MemoryFileTree(), directory_threshold=80)

    assert strict.match([file], parsed).is_match is False
    assert strict.match([file], parsed, threshold=60).is_match is True


def test_find_in_directory_skips_unreadable_files(parsed) -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/broken.md": "ignored",
            ".claude/rules/naming-conventions.md": _naming_conventions(),
            ".claude/rules/readme.txt": "not markdown",
        },
        unreadable=[".claude/rules/broken.md"],
    )

    result = asyncio.run(FileMatcher(tree).find_in_directory(".claude/rules", parsed))

    assert result.is_match is True
    assert result.file.path == ".claude/rules/naming-conventions.md"
    assert ".claude/rules/readme.txt" not in tree.read


def test_unlistable_directory_is_a_no_match(parsed) -> None:
    tree = MemoryFileTree({".claude/rules/x.md": _naming_conventions()}, unlistable=[".claude/rules"])

    result = asyncio.run(FileMatcher(tree).find_in_directory(".claude/rules", parsed))

    assert result.is_match is False
    assert result.file is None


def test_backend_errors_skip_the_file_or_root(parsed) -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/flaky.md": _naming_conventions(),
            ".claude/rules/naming-conventions.md": _naming_conventions(),
            ".claude/skills/naming.md": "ignored",
        },
        failing=[".claude/rules/flaky.md", ".claude/skills"],
    )

    result = asyncio.run(
        FileMatcher(tree).find_across_roots(parsed, [".claude/rules", ".claude/skills"])
    )

    assert result.file.path == ".claude/rules/naming-conventions.md"
    assert result.score == 71
    assert ".claude/skills/naming.md" not in tree.read


def test_find_across_roots_keeps_the_higher_score(parsed) -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/naming-conventions.md": _naming_conventions(),
            ".claude/skills/naming.md": rule_file(
                title="Naming",
                category="naming",
                keywords=["pascalcase", "react", "component", "naming"],
            ),
        }
    )

    result = asyncio.run(
        FileMatcher(tree).find_across_roots(parsed, [".claude/rules", ".claude/skills"])
    )

    assert result.file.path == ".claude/skills/naming.md"
    assert result.score == 100


def test_find_across_roots_prefers_the_first_root_on_a_tie(parsed) -> None:
    tree = MemoryFileTree(
        {
            ".claude/rules/naming-conventions.md": _naming_conventions(),
            ".claude/skills/naming-conventions.md": _naming_conventions(),
        }
    )

    result = asyncio.run(
        FileMatcher(tree).find_across_roots(parsed, [".claude/rules", ".claude/skills"])
    )

    assert result.file.path == ".claude/rules/naming-conventions.md"


def test_find_across_roots_uses_the_lenient_threshold(parsed) -> None:
    content = rule_file(title="Misc", category="style", keywords=["pascalcase", "component"])
    tree = MemoryFileTree({".claude/rules/misc.md": content})

    lenient = asyncio.run(FileMatcher(tree).find_across_roots(parsed, [".claude/rules"]))
    missing = asyncio.run(FileMatcher(tree).find_across_roots(parsed, []))

    assert lenient.is_match is False
    assert lenient.file is None
    assert missing.is_match is False
