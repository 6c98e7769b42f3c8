"""Fixed vocabularies used by the comment classifier."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

# Order matters: ties in category scoring keep the first category listed.
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "naming": [
        "naming",
        "name",
        "variable",
        "function name",
        "camelcase",
        "pascalcase",
        "snake_case",
        "kebab-case",
        "prefix",
        "suffix",
        "네이밍",
        "이름",
        "변수",
        "함수명",
    ],
    "style": [
        "style",
        "format",
        "indent",
        "indentation",
        "spacing",
        "whitespace",
        "semicolon",
        "quote",
        "line length",
        "lint",
        "prettier",
        "스타일",
        "포맷",
        "들여쓰기",
    ],
    "architecture": [
        "architecture",
        "structure",
        "design",
        "layer",
        "module",
        "dependency injection",
        "separation",
        "coupling",
        "아키텍처",
        "구조",
        "설계",
    ],
    "testing": [
        "test",
        "testing",
        "unit test",
        "e2e",
        "mock",
        "fixture",
        "assertion",
        "coverage",
        "테스트",
        "단위 테스트",
    ],
    "security": [
        "security",
        "auth",
        "permission",
        "vulnerability",
        "vulnerabilities",
        "xss",
        "csrf",
        "sql injection",
        "sanitize",
        "secret",
        "보안",
        "인증",
        "권한",
    ],
    "performance": [
        "performance",
        "optimization",
        "optimize",
        "cache",
        "caching",
        "memoize",
        "lazy",
        "render",
        "성능",
        "최적화",
        "캐시",
    ],
    "error-handling": [
        "error",
        "exception",
        "try-catch",
        "handling",
        "catch",
        "throw",
        "fallback",
        "에러",
        "예외",
        "처리",
    ],
    "documentation": [
        "documentation",
        "docs",
        "docstring",
        "jsdoc",
        "readme",
        "comment",
        "문서",
        "주석",
    ],
    "accessibility": [
        "accessibility",
        "a11y",
        "aria",
        "screen reader",
        "alt text",
        "keyboard",
        "접근성",
    ],
    "i18n": [
        "i18n",
        "internationalization",
        "localization",
        "translation",
        "locale",
        "다국어",
        "번역",
    ],
    "api": [
        "api",
        "rest",
        "restful",
        "graphql",
        "endpoint",
        "http",
        "status code",
        "request",
        "response",
    ],
    "database": [
        "database",
        "query",
        "schema",
        "migration",
        "orm",
        "sql",
        "transaction",
        "index",
        "데이터베이스",
        "쿼리",
    ],
    "state-management": [
        "state",
        "redux",
        "store",
        "zustand",
        "context",
        "reducer",
        "상태",
    ],
    "git": [
        "git",
        "commit",
        "branch",
        "rebase",
        "merge",
        "pull request",
        "커밋",
        "브랜치",
    ],
    "ci-cd": [
        "ci",
        "cd",
        "pipeline",
        "deploy",
        "deployment",
        "github actions",
        "workflow",
        "배포",
    ],
    "dependencies": [
        "dependency",
        "dependencies",
        "package",
        "npm",
        "yarn",
        "version",
        "upgrade",
        "라이브러리",
        "의존성",
    ],
}

# Languages, frameworks and structural nouns.
TECH_TERMS: Tuple[str, ...] = (
    "javascript",
    "typescript",
    "python",
    "java",
    "go",
    "rust",
    "c++",
    "c#",
    "php",
    "ruby",
    "swift",
    "kotlin",
    "react",
    "vue",
    "angular",
    "next.js",
    "nuxt",
    "svelte",
    "express",
    "fastify",
    "nestjs",
    "spring",
    "django",
    "flask",
    "rails",
    "laravel",
    "node",
    "component",
    "hook",
    "class",
    "interface",
    "type",
    "enum",
    "struct",
    "props",
    "middleware",
    "controller",
    "service",
    "repository",
    "util",
    "helper",
    "컴포넌트",
    "훅",
    "클래스",
    "인터페이스",
    "타입",
    "열거형",
    "구조체",
)

# Phrases that mark a comment as prescriptive.
CONVENTION_KEYWORDS: Tuple[str, ...] = (
    "convention",
    "pattern",
    "rule",
    "guideline",
    "standard",
    "best practice",
    "should",
    "must",
    "always",
    "never",
    "avoid",
    "prefer",
    "recommend",
    "don't",
    "dont",
    "컨벤션",
    "규칙",
    "패턴",
    "가이드라인",
    "표준",
    "해야",
    "하세요",
    "지양",
    "권장",
)

GOOD_BAD_MARKERS: Tuple[str, ...] = (
    "✅",  # white heavy check mark
    "❌",  # cross mark
    "\U0001f44d",  # thumbs up
    "\U0001f44e",  # thumbs down
    "⭕",  # heavy large circle
    "\U0001f6ab",  # no entry sign
    "✔",  # heavy check mark
    "✖",  # heavy multiplication x
)

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "the",
        "and",
        "but",
        "are",
        "was",
        "were",
        "been",
        "being",
        "for",
        "with",
        "from",
        "into",
        "onto",
        "this",
        "that",
        "these",
        "those",
        "its",
        "you",
        "your",
        "yours",
        "our",
        "ours",
        "they",
        "them",
        "their",
        "should",
        "shouldn't",
        "must",
        "always",
        "never",
        "avoid",
        "prefer",
        "recommend",
        "use",
        "uses",
        "using",
        "used",
        "please",
        "can",
        "could",
        "would",
        "will",
        "not",
        "don't",
        "dont",
        "does",
        "instead",
        "also",
        "just",
        "like",
        "here",
        "there",
        "when",
        "what",
        "which",
        "than",
        "then",
        "all",
        "any",
        "some",
        "more",
        "most",
        "very",
        "make",
        "sure",
        "need",
        "needs",
        "have",
        "has",
        "had",
        "every",
        "each",
        "other",
        "only",
        "same",
        "about",
        "over",
        "under",
        "because",
        "let's",
        "lets",
        "it's",
    }
)

# Source extensions recognised in file references.
SOURCE_EXTENSIONS: Tuple[str, ...] = (
    "ts",
    "tsx",
    "js",
    "jsx",
    "mjs",
    "py",
    "java",
    "go",
    "rs",
    "rb",
    "kt",
    "swift",
    "cs",
    "php",
    "vue",
    "svelte",
)


def category_of(keyword: str) -> str | None:
    """Return the first category whose table lists ``keyword``."""
    lowered = keyword.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if lowered == category or lowered in keywords:
            return category
    return None


def all_category_terms() -> FrozenSet[str]:
    terms = set(CATEGORY_KEYWORDS)
    for keywords in CATEGORY_KEYWORDS.values():
        terms.update(keywords)
    return frozenset(terms)


__all__ = [
    "CATEGORY_KEYWORDS",
    "CONVENTION_KEYWORDS",
    "GOOD_BAD_MARKERS",
    "SOURCE_EXTENSIONS",
    "STOP_WORDS",
    "TECH_TERMS",
    "all_category_terms",
    "category_of",
]
