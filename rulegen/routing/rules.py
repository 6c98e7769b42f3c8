"""Keyword and category tables that map comments onto storage directories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

DEFAULT_RULES: Dict[str, List[str]] = {
    "api": ["api", "rest", "restful", "graphql", "endpoint", "request", "response", "http", "fetch"],
    "ui": ["component", "ui", "style", "layout", "theme", "css", "scss", "react", "vue", "svelte", "angular"],
    "components": ["component", "widget", "element", "button", "form", "input", "modal", "dialog"],
    "database": ["db", "database", "query", "schema", "migration", "orm", "sql", "nosql", "mongodb", "postgres"],
    "auth": [
        "auth",
        "authentication",
        "authorization",
        "security",
        "jwt",
        "oauth",
        "token",
        "session",
        "login",
        "password",
    ],
    "testing": ["test", "testing", "spec", "mock", "fixture", "assertion", "jest", "vitest", "mocha", "cypress"],
    "docs": ["doc", "documentation", "readme", "guide", "tutorial", "manual", "reference"],
    "infra": ["docker", "container", "kubernetes", "k8s", "deployment", "ci", "cd", "pipeline", "github-actions"],
    "architecture": ["architecture", "design", "pattern", "solid", "ddd", "microservice", "monolith"],
    "performance": ["performance", "optimization", "cache", "caching", "speed", "benchmark", "profiling"],
    "error-handling": ["error", "exception", "handling", "logging", "monitoring", "debugging"],
    "config": ["config", "configuration", "settings", "env", "environment", "variable"],
}

# An empty directory means the storage root itself.
DEFAULT_CATEGORY_MAP: Dict[str, str] = {
    "api": "api",
    "ui": "ui",
    "frontend": "ui",
    "backend": "api",
    "database": "database",
    "db": "database",
    "authentication": "auth",
    "authorization": "auth",
    "security": "auth",
    "testing": "testing",
    "test": "testing",
    "documentation": "docs",
    "infrastructure": "infra",
    "devops": "infra",
    "deployment": "infra",
    "ci-cd": "infra",
    "architecture": "architecture",
    "design": "architecture",
    "performance": "performance",
    "optimization": "performance",
    "error": "error-handling",
    "error-handling": "error-handling",
    "logging": "error-handling",
    "config": "config",
    "configuration": "config",
    "convention": "",
    "conventions": "",
    "general": "",
}


@dataclass(frozen=True)
class DirectoryMatch:
    directory: str
    score: float
    matched_keywords: List[str]


class DirectoryRules:
    """Per-instance registry; custom rules never leak between instances."""

    def __init__(
        self,
        rules: Mapping[str, Sequence[str]] | None = None,
        category_map: Mapping[str, str] | None = None,
    ) -> None:
        source_rules = DEFAULT_RULES if rules is None else rules
        source_map = DEFAULT_CATEGORY_MAP if category_map is None else category_map
        self._rules: Dict[str, List[str]] = {
            directory: [keyword.lower() for keyword in keywords]
            for directory, keywords in source_rules.items()
        }
        self._category_map: Dict[str, str] = {
            category.lower(): directory for category, directory in source_map.items()
        }

    def category_directory(self, category: str) -> Optional[str]:
        """Directory for ``category``; None when it belongs at the root or is unknown."""
        directory = self._category_map.get(category.strip().lower())
        return directory or None

    def match_keywords(self, keywords: Sequence[str]) -> Optional[DirectoryMatch]:
        matches = self.all_matches(keywords, top_n=1)
        return matches[0] if matches else None

    def all_matches(self, keywords: Sequence[str], top_n: int = 3) -> List[DirectoryMatch]:
        """Directories whose rule keywords overlap ``keywords``, best first."""
        if not keywords:
            return []
        matches: List[DirectoryMatch] = []
        for directory, rule_keywords in self._rules.items():
            matched = [
                keyword
                for keyword in keywords
                if _overlaps(keyword.strip().lower(), rule_keywords)
            ]
            if matched:
                matches.append(
                    DirectoryMatch(
                        directory=directory,
                        score=len(matched) / len(keywords) * 100,
                        matched_keywords=matched,
                    )
                )
        matches.sort(key=lambda match: -match.score)
        return matches[:top_n]

    def add_rule(self, directory: str, keywords: Sequence[str]) -> None:
        self._rules[directory] = [keyword.lower() for keyword in keywords]

    def add_category_mapping(self, category: str, directory: str) -> None:
        self._category_map[category.strip().lower()] = directory

    def rules(self) -> Dict[str, List[str]]:
        return {directory: list(keywords) for directory, keywords in self._rules.items()}

    def category_mappings(self) -> Dict[str, str]:
        return dict(self._category_map)


def _overlaps(keyword: str, rule_keywords: Sequence[str]) -> bool:
    if not keyword:
        return False
    return any(
        keyword == rule or rule in keyword or keyword in rule for rule in rule_keywords
    )


__all__ = ["DEFAULT_CATEGORY_MAP", "DEFAULT_RULES", "DirectoryMatch", "DirectoryRules"]
