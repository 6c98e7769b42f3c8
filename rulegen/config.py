"""Configuration loading for rulegen (.rulegen.yml)."""

from __future__ import annotations

from dataclasses import astuple, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".rulegen.yml"

DEFAULT_RULES_ROOT = ".claude/rules"
DEFAULT_SKILLS_ROOT = ".claude/skills"
CORPUS_MATCH_THRESHOLD = 60
DIRECTORY_MATCH_THRESHOLD = 70
DEFAULT_CACHE_TTL = 300.0
DEFAULT_MAX_DEPTH = 5


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """LLM runtime settings from .rulegen.yml."""

    runner: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: Optional[float] = None
    model_path: Optional[str] = None


@dataclass
class StorageConfig:
    """Where rule and skill artifacts live in the target tree."""

    rules_root: str = DEFAULT_RULES_ROOT
    skills_root: str = DEFAULT_SKILLS_ROOT

    @property
    def roots(self) -> List[str]:
        return [self.rules_root, self.skills_root]


@dataclass
class MatchingConfig:
    """Score thresholds for existing-file matching.

    ``corpus_threshold`` applies to the broad search across storage roots,
    ``directory_threshold`` to the conservative single-directory lookup.
    """

    corpus_threshold: int = CORPUS_MATCH_THRESHOLD
    directory_threshold: int = DIRECTORY_MATCH_THRESHOLD


@dataclass
class AnalysisConfig:
    """Corpus walk and cache settings."""

    cache_ttl: float = DEFAULT_CACHE_TTL
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class GeneratorConfig:
    """Document generator selection."""

    enabled: List[str] = field(default_factory=lambda: ["claude-code"])


@dataclass
class RuleGenConfig:
    """Represents the high-level settings defined in .rulegen.yml."""

    root: Path
    storage: StorageConfig = field(default_factory=StorageConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    generators: GeneratorConfig = field(default_factory=GeneratorConfig)
    llm: Optional[LLMConfig] = None


def load_config(config_path: Path) -> RuleGenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RuleGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    storage = StorageConfig()
    storage_data = _as_dict(data.get("storage"))
    if storage_data:
        storage.rules_root = _as_path(storage_data.get("rules_root")) or storage.rules_root
        storage.skills_root = _as_path(storage_data.get("skills_root")) or storage.skills_root

    matching = MatchingConfig()
    matching_data = _as_dict(data.get("matching"))
    if matching_data:
        matching.corpus_threshold = _as_score(
            matching_data.get("corpus_threshold"), matching.corpus_threshold
        )
        matching.directory_threshold = _as_score(
            matching_data.get("directory_threshold"), matching.directory_threshold
        )

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        ttl = _as_float(analysis_data.get("cache_ttl"))
        if ttl is not None and ttl >= 0:
            analysis.cache_ttl = ttl
        depth = _as_int(analysis_data.get("max_depth"))
        if depth is not None and depth >= 0:
            analysis.max_depth = depth

    generators = GeneratorConfig()
    generator_data = _as_dict(data.get("generators"))
    if generator_data:
        enabled = _as_str_list(generator_data.get("enabled"))
        if enabled:
            generators.enabled = [name.lower() for name in enabled]

    llm_data = _as_dict(data.get("llm"))
    llm = None
    if llm_data:
        llm = LLMConfig(
            runner=_as_str(llm_data.get("runner")),
            model=_as_str(llm_data.get("model")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            base_url=_as_str(llm_data.get("base_url")),
            api_key=_as_str(llm_data.get("api_key")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
            model_path=_as_str(llm_data.get("model_path")),
        )
        if all(value is None for value in astuple(llm)):
            llm = None

    return RuleGenConfig(
        root=root,
        storage=storage,
        matching=matching,
        analysis=analysis,
        generators=generators,
        llm=llm,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(value: Any) -> Optional[str]:
    text = _as_str(value)
    if not text:
        return None
    cleaned = text.strip().strip("/")
    return cleaned or None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_score(value: Any, default: int) -> int:
    parsed = _as_int(value)
    if parsed is None:
        return default
    return max(0, min(100, parsed))


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnalysisConfig",
    "ConfigError",
    "GeneratorConfig",
    "LLMConfig",
    "MatchingConfig",
    "RuleGenConfig",
    "StorageConfig",
    "load_config",
]
