"""Local language-model transports: OpenAI-compatible HTTP or the Ollama CLI.

Only loopback and local-network hosts are accepted as HTTP endpoints; review
comments never leave the machine.
"""

from __future__ import annotations

import asyncio
import ipaddress
import json
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

DEFAULT_MODEL = "qwen2.5-coder:1.5b"
DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_TIMEOUT = 60.0

MODEL_ENV = ("RULEGEN_LLM_MODEL",)
BASE_URL_ENV = ("RULEGEN_LLM_BASE_URL",)
API_KEY_ENV = ("RULEGEN_LLM_API_KEY",)

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1", "host.docker.internal"})
LOCAL_SUFFIXES = (".local", ".localdomain")

_UNSET = object()


@dataclass(frozen=True)
class LLMRequest:
    """One prompt with the settings it is sent with."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    executable: Optional[str]
    base_url: Optional[str]
    api_key: Optional[str]
    request_timeout: Optional[float]


Transport = Callable[[LLMRequest], str]


class LLMRunner:
    """TextGenerator over a local model.

    ``base_url`` selects the HTTP transport; passing ``None`` selects the
    ``executable`` CLI (Ollama). Left unset, both the base URL and the API key
    come from ``RULEGEN_LLM_*`` environment variables or the Ollama default.
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None | object = _UNSET,
        executable: str = "ollama",
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        api_key: str | None | object = _UNSET,
        request_timeout: Optional[float] = DEFAULT_TIMEOUT,
        runner: Transport | None = None,
    ) -> None:
        self.model = model or _first_env(MODEL_ENV) or DEFAULT_MODEL
        if base_url is _UNSET:
            base_url = _first_env(BASE_URL_ENV) or DEFAULT_BASE_URL
        self.base_url = require_local_url(str(base_url)) if base_url else None
        self.api_key = _first_env(API_KEY_ENV) if api_key is _UNSET else api_key
        self.executable = executable
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self._transport: Transport = runner or (
            post_chat_completion if self.base_url else run_ollama_cli
        )

    def run(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Blocking call; per-call ``max_tokens``/``temperature`` override the defaults."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=self.max_tokens if max_tokens is None else max_tokens,
            executable=self.executable,
            base_url=self.base_url,
            api_key=self.api_key,  # type: ignore[arg-type]
            request_timeout=self.request_timeout,
        )
        return self._transport(request)

    async def generate_text(
        self,
        prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        return await asyncio.to_thread(
            self.run, prompt, max_tokens=max_tokens, temperature=temperature
        )


def post_chat_completion(request: LLMRequest) -> str:
    """POST to ``<base_url>/chat/completions`` and return the first choice."""
    if not request.base_url:
        raise RuntimeError("HTTP transport requires a base_url")
    payload: Dict[str, object] = {
        "model": request.model,
        "messages": chat_messages(request.system, request.prompt),
    }
    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.max_tokens is not None:
        payload["max_tokens"] = request.max_tokens

    headers = {"Content-Type": "application/json"}
    if request.api_key:
        headers["Authorization"] = f"Bearer {request.api_key}"
    http_request = Request(
        f"{request.base_url}/chat/completions",
        data=json.dumps(payload).encode("utf-8"),
        headers=headers,
        method="POST",
    )

    try:
        with urlopen(http_request, timeout=request.request_timeout or DEFAULT_TIMEOUT) as response:  # type: ignore[arg-type]
            raw = response.read()
    except HTTPError as exc:  # pragma: no cover - depends on runtime
        detail = exc.read().decode("utf-8", errors="ignore").strip()
        raise RuntimeError(f"Model endpoint returned {exc.code}: {detail or exc.reason}") from exc
    except URLError as exc:  # pragma: no cover - depends on runtime
        raise RuntimeError(f"Model endpoint unreachable: {exc.reason}") from exc
    except TimeoutError as exc:  # pragma: no cover - depends on runtime
        raise RuntimeError("Model endpoint timed out") from exc

    try:
        body = json.loads(raw.decode("utf-8"))
    except json.JSONDecodeError as exc:
        raise RuntimeError("Model endpoint returned invalid JSON") from exc
    content = completion_text(body).strip()
    if not content:
        raise RuntimeError("Model endpoint returned an empty completion")
    return content


def run_ollama_cli(request: LLMRequest) -> str:
    executable = request.executable or "ollama"
    args = [executable, "run", request.model]
    if request.system:
        args.extend(["--system", request.system])
    if request.temperature is not None:
        args.extend(["--temperature", str(request.temperature)])
    if request.max_tokens is not None:
        args.extend(["--num-predict", str(request.max_tokens)])
    args.append(request.prompt)
    try:
        completed = subprocess.run(
            args, check=True, capture_output=True, text=True, timeout=request.request_timeout
        )
    except FileNotFoundError as exc:  # pragma: no cover - depends on environment
        raise RuntimeError(f"'{executable}' is not installed") from exc
    except subprocess.TimeoutExpired as exc:  # pragma: no cover - depends on environment
        raise RuntimeError(f"'{executable}' timed out after {exc.timeout} seconds") from exc
    except subprocess.CalledProcessError as exc:  # pragma: no cover - depends on environment
        raise RuntimeError(
            f"'{executable}' exited with {exc.returncode}: {exc.stderr.strip()}"
        ) from exc
    return completed.stdout.strip()


def chat_messages(system: str | None, prompt: str) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": prompt})
    return messages


def completion_text(payload: object) -> str:
    """First choice text from an OpenAI-compatible chat/completions payload."""
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    first = choices[0]
    message = first.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]
    text = first.get("text")
    return text if isinstance(text, str) else ""


def require_local_url(url: str) -> str:
    normalized = url.rstrip("/")
    host = urlparse(normalized).hostname
    if host is None or is_local_host(host):
        return normalized
    raise RuntimeError(f"Remote base_url '{url}' is not permitted; point it at a local model")


def is_local_host(host: str) -> bool:
    lowered = host.lower()
    if lowered in LOCAL_HOSTS or lowered.endswith(LOCAL_SUFFIXES):
        return True
    try:
        return ipaddress.ip_address(lowered).is_loopback
    except ValueError:
        return False


def _first_env(keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


__all__ = [
    "LLMRequest",
    "LLMRunner",
    "chat_messages",
    "completion_text",
    "is_local_host",
    "post_chat_completion",
    "require_local_url",
    "run_ollama_cli",
]
