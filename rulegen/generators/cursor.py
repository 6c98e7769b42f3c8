"""Cursor rule files under ``.cursor/rules``."""

from __future__ import annotations

from typing import Optional

from ..corpus.frontmatter import render_frontmatter
from .base import (
    GenerationResult,
    Generator,
    GeneratorOptions,
    refresh_frontmatter,
    source_label,
)

CURSOR_RULES_ROOT = ".cursor/rules"
UPDATE_HEADING = "Update"


class CursorGenerator(Generator):
    kind = "cursor"

    def target_directory(self) -> str:
        return CURSOR_RULES_ROOT

    async def generate(self, options: GeneratorOptions) -> GenerationResult:
        if options.existing_content:
            content = self._update(options, options.existing_content)
        else:
            content = self._header(options) + "\n" + self._section(options)
        return GenerationResult(
            content=content,
            file_path=self.resolve_path(options),
            is_update=bool(options.existing_content),
        )

    def _update(self, options: GeneratorOptions, existing: str) -> str:
        refreshed = refresh_frontmatter(existing, options.comment.keywords, self.today())
        if refreshed is None:
            return existing.strip() + "\n\n" + self._section(options, UPDATE_HEADING)
        header, body = refreshed
        return header + "\n" + body.strip() + "\n\n" + self._section(options, UPDATE_HEADING)

    def _header(self, options: GeneratorOptions) -> str:
        context = self.context(options)
        return render_frontmatter(
            {
                "title": str(context["title"]),
                "category": options.comment.category,
                "keywords": list(options.comment.keywords),
                "source": source_label(options.repository),
                "author": options.original.author,
                "last_updated": self.today(),
            }
        )

    def _section(self, options: GeneratorOptions, heading: Optional[str] = None) -> str:
        """New-file body, or a dated ``##`` section when ``heading`` is given."""
        context = self.context(options)
        return self.render(
            "cursor_rule.md.j2",
            bullets=as_bullets(str(context["rule"])),
            heading=heading,
            **context,
        )


def as_bullets(text: str) -> str:
    """Render each non-empty line of ``text`` as a markdown bullet."""
    stripped = text.strip()
    if stripped.startswith(("-", "*")):
        return stripped
    return "\n".join(f"- {line.strip()}" for line in stripped.splitlines() if line.strip())


__all__ = ["CURSOR_RULES_ROOT", "CursorGenerator", "as_bullets"]
