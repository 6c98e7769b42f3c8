"""llama.cpp transport for fully offline enhancement and arbitration."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path
from typing import List, Optional

DEFAULT_EXECUTABLE = "llama-cli"


class LlamaCppRunner:
    """TextGenerator that shells out to a llama.cpp binary with a GGUF model."""

    def __init__(
        self,
        *,
        model_path: str,
        executable: str | None = None,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        self.model_path = model_file(model_path)
        self.executable = executable or DEFAULT_EXECUTABLE
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout

    def run(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        args = build_command(
            self.executable,
            self.model_path,
            f"{system.strip()}\n\n{prompt}" if system else prompt,
            max_tokens=self.max_tokens if max_tokens is None else max_tokens,
            temperature=self.temperature if temperature is None else temperature,
        )
        try:
            completed = subprocess.run(
                args, check=True, capture_output=True, text=True, timeout=self.request_timeout
            )
        except FileNotFoundError as exc:  # pragma: no cover - environment dependent
            raise RuntimeError(f"llama.cpp binary '{self.executable}' not found") from exc
        except subprocess.TimeoutExpired as exc:  # pragma: no cover - environment dependent
            raise RuntimeError(f"llama.cpp timed out after {exc.timeout} seconds") from exc
        except subprocess.CalledProcessError as exc:  # pragma: no cover - environment dependent
            detail = exc.stderr.strip() or exc.stdout.strip() or f"exit code {exc.returncode}"
            raise RuntimeError(f"llama.cpp failed: {detail}") from exc

        output = completed.stdout.strip()
        if not output:
            raise RuntimeError("llama.cpp returned no output")
        return output

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


def build_command(
    executable: str,
    model: Path,
    prompt: str,
    *,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> List[str]:
    args = [executable, "-m", str(model), "-p", prompt]
    if temperature is not None:
        args += ["--temp", str(temperature)]
    if max_tokens is not None:
        args += ["-n", str(max_tokens)]
    return args


def model_file(model_path: str) -> Path:
    """Resolve ``model_path`` and require an existing regular file."""
    path = Path(model_path).expanduser().resolve()
    if not path.is_file():
        reason = "is not a file" if path.exists() else "does not exist"
        raise RuntimeError(f"llama.cpp model {path} {reason}")
    return path


__all__ = ["LlamaCppRunner", "build_command", "model_file"]
