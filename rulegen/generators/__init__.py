"""Rule-file generators, one per target tool."""

from __future__ import annotations

from typing import Callable, Dict, Sequence

from ..config import StorageConfig
from ..errors import UnknownGeneratorError
from ..llm.base import TextGenerator
from .base import Clock, GenerationResult, Generator, GeneratorOptions
from .claude_code import ClaudeCodeGenerator
from .cursor import CursorGenerator
from .windsurf import WindsurfGenerator

GeneratorFactory = Callable[[TextGenerator | None, StorageConfig, Clock | None], Generator]


def _claude_code(llm: TextGenerator | None, storage: StorageConfig, clock: Clock | None) -> Generator:
    return ClaudeCodeGenerator(
        llm, rules_root=storage.rules_root, skills_root=storage.skills_root, clock=clock
    )


_BUILTIN_FACTORIES: Dict[str, GeneratorFactory] = {
    ClaudeCodeGenerator.kind: _claude_code,
    CursorGenerator.kind: lambda llm, storage, clock: CursorGenerator(clock=clock),
    WindsurfGenerator.kind: lambda llm, storage, clock: WindsurfGenerator(clock=clock),
}


def available_generators() -> list[str]:
    return list(_BUILTIN_FACTORIES)


def create_generators(
    kinds: Sequence[str],
    *,
    llm: TextGenerator | None = None,
    storage: StorageConfig | None = None,
    clock: Clock | None = None,
) -> Dict[str, Generator]:
    """Instantiate generators for ``kinds`` in order, ignoring repeats."""
    storage = storage or StorageConfig()
    generators: Dict[str, Generator] = {}
    for kind in kinds:
        key = kind.strip().lower()
        if key in generators:
            continue
        factory = _BUILTIN_FACTORIES.get(key)
        if factory is None:
            known = ", ".join(sorted(_BUILTIN_FACTORIES))
            raise UnknownGeneratorError(f"Unknown generator '{kind}'. Expected one of: {known}")
        generators[key] = factory(llm, storage, clock)
    return generators


__all__ = [
    "ClaudeCodeGenerator",
    "CursorGenerator",
    "GenerationResult",
    "Generator",
    "GeneratorOptions",
    "WindsurfGenerator",
    "available_generators",
    "create_generators",
]
