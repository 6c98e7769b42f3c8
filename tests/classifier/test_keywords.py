"""Tests for rulegen.classifier.keywords."""

from __future__ import annotations

from rulegen.classifier.keywords import (
    count_term,
    extract_keywords,
    has_code_span,
    inline_code_spans,
    singularize,
    strip_code,
)


def test_inline_identifiers_are_marked_specific() -> None:
    signal = extract_keywords("Use `fetchUser` instead of `getUser`")

    assert "fetchuser" in signal.keywords
    assert "getuser" in signal.keywords
    assert {"fetchuser", "getuser"} <= signal.specific


def test_stop_words_and_short_tokens_are_dropped() -> None:
    signal = extract_keywords("You should always use the go to go to go")

    assert "should" not in signal.keywords
    assert "the" not in signal.keywords
    assert "go" not in signal.keywords


def test_limit_caps_the_keyword_list() -> None:
    text = "Prefer caching in the service layer; cache the repository results and test the cache."

    assert len(extract_keywords(text, limit=2).keywords) == 2


def test_ranking_is_stable_for_identical_input() -> None:
    text = "Keep the reducer pure and move effects into middleware."

    assert extract_keywords(text).keywords == extract_keywords(text).keywords


def test_count_term_allows_plurals_but_not_substrings() -> None:
    assert count_term("write tests for each test", "test") == 2
    assert count_term("attestation", "test") == 0
    assert count_term("변수명을 바꿔주세요", "변수") == 1


def test_singularize_maps_onto_known_terms() -> None:
    assert singularize("components") == "component"
    assert singularize("caches") == "cache"
    assert singularize("widgets") == "widgets"
    assert singularize("apples", known={"apple"}) == "apple"


def test_code_span_helpers() -> None:
    text = "Call `run()` first.\n```\n`inner`\n```"

    assert has_code_span(text) is True
    assert has_code_span("plain words") is False
    assert inline_code_spans(text) == ["run()"]
    assert "run()" not in strip_code(text)
