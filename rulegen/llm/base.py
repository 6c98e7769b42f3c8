"""Language-model collaborator interface and runner selection."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol

from ..config import LLMConfig
from ..logging import get_logger

logger = get_logger("llm")

_LLAMA_CPP_RUNNERS = {"llama.cpp", "llamacpp", "llama-cpp"}
_CLI_RUNNERS = {"ollama"}


class TextGenerator(Protocol):
    """Anything that can turn a prompt into text without blocking the loop."""

    async def generate_text(
        self,
        prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        ...


def build_text_generator(config: LLMConfig | None, root: Path) -> Optional[TextGenerator]:
    """Instantiate the configured runner, or None when no LLM is configured.

    Construction failures are logged and treated as "no LLM" so the engine
    falls back to its rule-based behaviour.
    """
    if config is None:
        return None

    runner_name = (config.runner or "http").lower()
    try:
        if runner_name in _LLAMA_CPP_RUNNERS:
            from .llamacpp import LlamaCppRunner

            model_path = config.model_path or config.model
            if not model_path:
                logger.warning("llama.cpp runner requires `model_path` in .rulegen.yml")
                return None
            resolved = Path(model_path).expanduser()
            if not resolved.is_absolute():
                resolved = (root / resolved).resolve()
            return LlamaCppRunner(
                model_path=str(resolved),
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                request_timeout=config.request_timeout,
            )

        from .runner import LLMRunner

        kwargs: Dict[str, object] = {}
        if config.model:
            kwargs["model"] = config.model
        if runner_name in _CLI_RUNNERS:
            kwargs["executable"] = runner_name
            kwargs["base_url"] = config.base_url
        elif config.base_url is not None:
            kwargs["base_url"] = config.base_url
        if config.temperature is not None:
            kwargs["temperature"] = config.temperature
        if config.max_tokens is not None:
            kwargs["max_tokens"] = config.max_tokens
        if config.api_key is not None:
            kwargs["api_key"] = config.api_key
        if config.request_timeout is not None:
            kwargs["request_timeout"] = config.request_timeout
        return LLMRunner(**kwargs)  # type: ignore[arg-type]
    except RuntimeError as exc:
        logger.warning("Failed to initialise LLM runner: %s", exc)
        return None


__all__ = ["TextGenerator", "build_text_generator"]
