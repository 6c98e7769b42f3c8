"""Tests for rulegen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from rulegen.config import ConfigError, LLMConfig, RuleGenConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, RuleGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.llm is None
    assert config.storage.roots == [".claude/rules", ".claude/skills"]
    assert config.matching.corpus_threshold == 60
    assert config.matching.directory_threshold == 70
    assert config.analysis.cache_ttl == 300.0
    assert config.analysis.max_depth == 5
    assert config.generators.enabled == ["claude-code"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".rulegen.yml"
    config_file.write_text(
        """
llm:
  runner: "ollama"
  model: "llama3:8b-instruct"
  temperature: 0.15
  max_tokens: 256
  base_url: "http://localhost:12434/engines/v1"
  api_key: "test-key"
  request_timeout: 60
storage:
  rules_root: "/docs/rules/"
  skills_root: "docs/skills"
matching:
  corpus_threshold: 55
  directory_threshold: "140"
analysis:
  cache_ttl: 30
  max_depth: 3
generators:
  enabled: [Claude-Code, cursor]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.llm == LLMConfig(
        runner="ollama",
        model="llama3:8b-instruct",
        temperature=0.15,
        max_tokens=256,
        base_url="http://localhost:12434/engines/v1",
        api_key="test-key",
        request_timeout=60.0,
    )
    assert config.storage.rules_root == "docs/rules"
    assert config.storage.skills_root == "docs/skills"
    assert config.matching.corpus_threshold == 55
    assert config.matching.directory_threshold == 100
    assert config.analysis.cache_ttl == 30.0
    assert config.analysis.max_depth == 3
    assert config.generators.enabled == ["claude-code", "cursor"]


def test_invalid_values_keep_defaults(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text(
        """
matching:
  corpus_threshold: high
analysis:
  cache_ttl: -5
  max_depth: true
generators:
  enabled: []
llm: {}
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.matching.corpus_threshold == 60
    assert config.analysis.cache_ttl == 300.0
    assert config.analysis.max_depth == 5
    assert config.generators.enabled == ["claude-code"]
    assert config.llm is None


def test_single_generator_string_is_accepted(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("generators:\n  enabled: windsurf\n", encoding="utf-8")

    assert load_config(tmp_path).generators.enabled == ["windsurf"]


def test_sibling_path_resolves_to_config_in_same_directory(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("analysis:\n  max_depth: 2\n", encoding="utf-8")

    config = load_config(tmp_path / "comments.json")

    assert config.analysis.max_depth == 2


def test_empty_file_returns_defaults(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("   \n", encoding="utf-8")

    assert load_config(tmp_path).generators.enabled == ["claude-code"]


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("storage: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
