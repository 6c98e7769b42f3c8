"""Collapse generated files that target the same path into one document."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..corpus.frontmatter import split_frontmatter
from ..errors import MergeError
from ..logging import get_logger
from ..models import FileGenerationResult

logger = get_logger("postproc.merger")


class ContentMerger:
    """Merges same-path generation results section by section."""

    def merge(self, results: Sequence[FileGenerationResult]) -> List[FileGenerationResult]:
        """Return ``results`` with same-path entries collapsed, in first-seen order."""
        groups: Dict[str, List[FileGenerationResult]] = {}
        for result in results:
            groups.setdefault(result.file_path, []).append(result)

        merged: List[FileGenerationResult] = []
        for path, group in groups.items():
            if len(group) == 1:
                merged.append(group[0])
                continue
            logger.debug("Merging %d generated files targeting %s", len(group), path)
            merged.append(self.merge_group(group))
        return merged

    def merge_group(self, group: Sequence[FileGenerationResult]) -> FileGenerationResult:
        if not group:
            raise MergeError("Cannot merge an empty file group")
        first = group[0]
        if len(group) == 1:
            return first
        return FileGenerationResult(
            project_type=first.project_type,
            file_path=first.file_path,
            content=merge_markdown([result.content for result in group]),
            is_update=any(result.is_update for result in group),
        )


def merge_markdown(contents: Sequence[str]) -> str:
    """Merge markdown documents so each ``##`` section appears once.

    The header block and the ``#`` title come from the first document. Other
    text before a document's first ``##`` heading is kept as an intro block
    after the title. Bodies of same-named sections are concatenated in input
    order; a block identical to one already kept is not repeated.
    """
    documents = [content for content in contents if content and content.strip()]
    if not documents:
        return ""
    if len(documents) == 1:
        return documents[0]

    header, _ = split_frontmatter(documents[0])
    title = ""
    intros: List[str] = []
    sections: Dict[str, List[str]] = {}
    for index, document in enumerate(documents):
        _, body = split_frontmatter(document)
        heading, preamble, parts = split_document(body)
        if index == 0:
            title = heading
        _keep(intros, preamble)
        for name, section_body in parts:
            _keep(sections.setdefault(name, []), section_body)

    lines: List[str] = []
    if title:
        lines.extend([title, ""])
    for intro in intros:
        lines.extend([intro, ""])
    for name, bodies in sections.items():
        lines.extend([f"## {name}", ""])
        for section_body in bodies:
            lines.extend([section_body, ""])
    merged = "\n".join(lines).strip()
    return f"{header}\n{merged}\n" if header else f"{merged}\n"


def extract_sections(markdown: str) -> List[Tuple[str, str]]:
    """``(title, body)`` pairs for each ``##`` section, skipping fenced code."""
    return split_document(markdown)[2]


def split_document(markdown: str) -> Tuple[str, str, List[Tuple[str, str]]]:
    """Split ``markdown`` into its ``#`` title, the preamble and its ``##`` sections.

    Only a ``#`` line before the first section counts as the title; later ones
    stay in the body of the section they appear in.
    """
    title = ""
    preamble: List[str] = []
    sections: List[Tuple[str, str]] = []
    current: Optional[str] = None
    buffer: List[str] = []
    in_code = False

    for line in markdown.splitlines():
        if line.strip().startswith("```"):
            in_code = not in_code
        elif not in_code and line.startswith("## "):
            if current is not None:
                sections.append((current, "\n".join(buffer)))
            current, buffer = line[3:].strip(), []
            continue
        elif not in_code and current is None and not title and line.startswith("# "):
            title = line.rstrip()
            continue
        (buffer if current is not None else preamble).append(line)
    if current is not None:
        sections.append((current, "\n".join(buffer)))
    return title, "\n".join(preamble).strip(), sections


def _keep(blocks: List[str], block: str) -> None:
    text = block.strip()
    if text and text not in blocks:
        blocks.append(text)


__all__ = ["ContentMerger", "extract_sections", "merge_markdown", "split_document"]
