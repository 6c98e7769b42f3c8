"""Claude Code rules and skills."""

from __future__ import annotations

from typing import Dict

from ..config import DEFAULT_RULES_ROOT, DEFAULT_SKILLS_ROOT
from ..corpus.frontmatter import render_frontmatter
from ..llm.base import TextGenerator
from ..logging import get_logger
from ..prompting.builder import CLASSIFICATION_SYSTEM_PROMPT, PromptBuilder
from .base import (
    Clock,
    CommentLike,
    GenerationResult,
    Generator,
    GeneratorOptions,
    has_example_markers,
    refresh_frontmatter,
    source_label,
    split_examples,
)

INSTRUCTION = "instruction"
SKILL = "skill"

CLASSIFICATION_MAX_TOKENS = 10

logger = get_logger("generators.claude_code")

_CATEGORY_NOTES: Dict[str, str] = {
    "security": "This rule covers security. It must always be followed.",
    "performance": "This rule is a performance recommendation.",
    "architecture": "This rule is an architectural principle that applies across the project.",
}

_USAGE_GUIDANCE: Dict[str, str] = {
    "naming": "Follow this when naming variables, functions, classes and files.",
    "style": "Apply this when keeping code style consistent.",
    "architecture": "Consider this when deciding on system design or structure.",
    "testing": "Use this pattern when writing tests.",
    "security": "Always follow this when writing security-sensitive code.",
    "performance": "Apply this technique where performance matters.",
    "error-handling": "Use this pattern when implementing error handling.",
    "documentation": "Follow this format when documenting code.",
}
_DEFAULT_GUIDANCE = "Use this skill whenever the situation it describes comes up."


class ClaudeCodeGenerator(Generator):
    """Writes instructions under the rules root and skills under the skills root."""

    kind = "claude-code"

    def __init__(
        self,
        llm: TextGenerator | None = None,
        *,
        rules_root: str = DEFAULT_RULES_ROOT,
        skills_root: str = DEFAULT_SKILLS_ROOT,
        prompts: PromptBuilder | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(clock=clock)
        self.llm = llm
        self.rules_root = rules_root.strip("/")
        self.skills_root = skills_root.strip("/")
        self.prompts = prompts or PromptBuilder()

    def target_directory(self, file_type: str = INSTRUCTION) -> str:
        return self.skills_root if file_type == SKILL else self.rules_root

    async def generate(self, options: GeneratorOptions) -> GenerationResult:
        file_type = await self.determine_file_type(options.comment)
        if options.existing_content:
            content = self._update(options, options.existing_content, file_type)
        else:
            content = self._create(options, file_type)
        path = self._path_for(options, file_type)
        return GenerationResult(
            content=content, file_path=path, is_update=bool(options.existing_content)
        )

    async def determine_file_type(self, comment: CommentLike) -> str:
        """One-word LLM classification; defaults to an instruction."""
        if self.llm is None:
            return INSTRUCTION
        prompt = self.prompts.classification(comment)
        try:
            response = await self.llm.generate_text(
                f"{CLASSIFICATION_SYSTEM_PROMPT}\n\n{prompt}",
                max_tokens=CLASSIFICATION_MAX_TOKENS,
                temperature=0,
            )
        except Exception as exc:
            logger.warning("File type classification failed, using instruction: %s", exc)
            return INSTRUCTION
        return SKILL if SKILL in response.strip().lower() else INSTRUCTION

    def _path_for(self, options: GeneratorOptions, file_type: str) -> str:
        path = options.suggested_path
        if not path:
            return self.file_path(
                options.comment.suggested_file_name, self.target_directory(file_type)
            )
        # new skills suggested under the rules root move to the skills root
        prefix = self.rules_root + "/"
        if file_type == SKILL and not options.existing_content and path.startswith(prefix):
            return f"{self.skills_root}/{path[len(prefix):]}"
        return path

    def _create(self, options: GeneratorOptions, file_type: str) -> str:
        context = self.context(options)
        header = self.header(options, context)
        if file_type == SKILL:
            good, bad = [], []
            if has_example_markers(options.original.content):
                good, bad = split_examples(
                    options.original.content, options.comment.code_examples
                )
            body = self.render(
                "claude_skill.md.j2",
                good_examples=good,
                bad_examples=bad,
                guidance=_USAGE_GUIDANCE.get(options.comment.category, _DEFAULT_GUIDANCE),
                **context,
            )
        else:
            body = self.render(
                "claude_instruction.md.j2",
                note=_CATEGORY_NOTES.get(options.comment.category),
                **context,
            )
        return f"{header}\n{body}"

    def _update(self, options: GeneratorOptions, existing: str, file_type: str) -> str:
        context = self.context(options)
        refreshed = refresh_frontmatter(existing, options.comment.keywords, self.today())
        if refreshed is None:
            return self._create(options, file_type)
        header, body = refreshed
        addendum = self.render(
            "update.md.j2",
            heading="Additional Case" if file_type == SKILL else "Update",
            **context,
        )
        return f"{header}\n{body.rstrip()}\n\n{addendum}"

    def header(self, options: GeneratorOptions, context: Dict[str, object]) -> str:
        return render_frontmatter(
            {
                "title": str(context["title"]),
                "keywords": list(options.comment.keywords),
                "category": options.comment.category,
                "created_from": created_from(options),
                "created_at": str(context["today"]),
                "last_updated": str(context["today"]),
            }
        )


def created_from(options: GeneratorOptions) -> str:
    return f"{source_label(options.repository)}, Comment by {options.original.author}"


__all__ = ["ClaudeCodeGenerator", "INSTRUCTION", "SKILL"]
