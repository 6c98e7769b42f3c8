"""In-memory collaborators for engine tests."""

from __future__ import annotations

import textwrap
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rulegen.corpus.tree import DIRECTORY, FILE, TreeEntry


class MemoryFileTree:
    """FileTree over a dict of ``path -> content``; directories are implied by paths.

    ``failing`` paths raise RuntimeError, the way a remote backend might.
    """

    def __init__(
        self,
        files: Mapping[str, str] | None = None,
        *,
        unreadable: Iterable[str] = (),
        unlistable: Iterable[str] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self.files: Dict[str, str] = {
            path.strip("/"): textwrap.dedent(content).lstrip("\n")
            for path, content in (files or {}).items()
        }
        self.unreadable = set(unreadable)
        self.unlistable = set(unlistable)
        self.failing = set(failing)
        self.listed: List[str] = []
        self.read: List[str] = []

    async def list_directory(self, path: str) -> List[TreeEntry]:
        directory = path.strip("/")
        self.listed.append(directory)
        if directory in self.unlistable:
            raise PermissionError(f"cannot list {directory}")
        if directory in self.failing:
            raise RuntimeError(f"backend failed listing {directory}")
        prefix = f"{directory}/" if directory else ""
        entries: Dict[str, TreeEntry] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            remainder = file_path[len(prefix) :]
            name, _, rest = remainder.partition("/")
            kind = DIRECTORY if rest else FILE
            entries.setdefault(name, TreeEntry(name=name, type=kind, path=prefix + name))
        if not entries:
            raise FileNotFoundError(f"Directory not found: {directory}")
        return [entries[name] for name in sorted(entries)]

    async def read_file(self, path: str) -> str:
        normalized = path.strip("/")
        self.read.append(normalized)
        if normalized in self.unreadable:
            raise OSError(f"cannot read {normalized}")
        if normalized in self.failing:
            raise RuntimeError(f"backend failed reading {normalized}")
        if normalized not in self.files:
            raise FileNotFoundError(normalized)
        return self.files[normalized]


class ScriptedLLM:
    """TextGenerator returning canned responses in order, or raising."""

    def __init__(self, responses: Sequence[str] = (), *, error: Optional[Exception] = None) -> None:
        self.responses = list(responses)
        self.error = error
        self.calls: List[Dict[str, object]] = []

    async def generate_text(
        self,
        prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        if not self.responses:
            return ""
        if len(self.responses) == 1:
            return self.responses[0]
        return self.responses.pop(0)


def rule_file(
    *,
    title: str,
    category: str,
    keywords: Sequence[str],
    body: str = "## Rule\n\nFollow the convention.\n",
) -> str:
    """Markdown rule file with a metadata header."""
    return (
        "---\n"
        f'title: "{title}"\n'
        f"keywords: [{', '.join(keywords)}]\n"
        f'category: "{category}"\n'
        "---\n\n"
        f"# {title}\n\n"
        f"{body}"
    )


__all__ = ["MemoryFileTree", "ScriptedLLM", "rule_file"]
