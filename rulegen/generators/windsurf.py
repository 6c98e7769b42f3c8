"""Windsurf rule files: plain markdown with blockquote metadata."""

from __future__ import annotations

import re
from typing import List

from .base import GenerationResult, Generator, GeneratorOptions, merge_keywords

WINDSURF_RULES_ROOT = ".windsurf/rules"

_KEYWORDS_LINE_RE = re.compile(r"^> \*\*Keywords:\*\*[ \t]*(.*)$", re.MULTILINE)
_DATE_LINE_RE = re.compile(r"^> \*\*Date:\*\*.*$", re.MULTILINE)


class WindsurfGenerator(Generator):
    kind = "windsurf"

    def target_directory(self) -> str:
        return WINDSURF_RULES_ROOT

    async def generate(self, options: GeneratorOptions) -> GenerationResult:
        context = self.context(options)
        if options.existing_content:
            content = self._update(options, options.existing_content)
        else:
            content = self.render("windsurf_rule.md.j2", **context)
        return GenerationResult(
            content=content,
            file_path=self.resolve_path(options),
            is_update=bool(options.existing_content),
        )

    def _update(self, options: GeneratorOptions, existing: str) -> str:
        today = self.today()
        updated = _DATE_LINE_RE.sub(f"> **Date:** {today} (updated)", existing, count=1)
        merged = merge_keywords(blockquote_keywords(existing), options.comment.keywords)
        updated = _KEYWORDS_LINE_RE.sub(
            lambda _: f"> **Keywords:** {', '.join(merged)}", updated, count=1
        )
        addendum = self.render("update.md.j2", heading="Update", **self.context(options))
        return f"{updated.rstrip()}\n\n{addendum}"


def blockquote_keywords(content: str) -> List[str]:
    match = _KEYWORDS_LINE_RE.search(content)
    if not match:
        return []
    return [part.strip() for part in match.group(1).split(",") if part.strip()]


__all__ = ["WINDSURF_RULES_ROOT", "WindsurfGenerator", "blockquote_keywords"]
