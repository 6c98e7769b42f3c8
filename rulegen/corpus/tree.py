"""Read/write interface over the file tree that holds rule files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Protocol

FILE = "file"
DIRECTORY = "dir"


@dataclass(frozen=True)
class TreeEntry:
    """One directory listing entry. ``path`` is relative to the tree root."""

    name: str
    type: str
    path: str

    @property
    def is_file(self) -> bool:
        return self.type == FILE

    @property
    def is_dir(self) -> bool:
        return self.type == DIRECTORY


class FileTree(Protocol):
    """Async read interface the engine uses for repository content."""

    async def list_directory(self, path: str) -> List[TreeEntry]:
        ...

    async def read_file(self, path: str) -> str:
        ...


class LocalFileTree:
    """FileTree backed by a checkout on disk."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()

    async def list_directory(self, path: str) -> List[TreeEntry]:
        directory = self._resolve(path)
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory not found: {path}")
        entries: List[TreeEntry] = []
        for child in sorted(directory.iterdir(), key=lambda item: item.name):
            relative = child.relative_to(self.root).as_posix()
            kind = DIRECTORY if child.is_dir() else FILE
            entries.append(TreeEntry(name=child.name, type=kind, path=relative))
        return entries

    async def read_file(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8")

    async def write_file(self, path: str, content: str) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path.strip("/"))
        if ".." in relative.parts:
            raise ValueError(f"Path escapes the repository root: {path}")
        return self.root.joinpath(*relative.parts)


def join_path(*parts: str) -> str:
    """Join tree paths with forward slashes, dropping empty segments."""
    segments: List[str] = []
    for part in parts:
        segments.extend(segment for segment in part.split("/") if segment)
    return "/".join(segments)


__all__ = ["DIRECTORY", "FILE", "FileTree", "LocalFileTree", "TreeEntry", "join_path"]
