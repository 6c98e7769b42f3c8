"""Tests for the local LLM runner."""

from __future__ import annotations

import asyncio
import json

import pytest

from rulegen.llm.runner import (
    DEFAULT_BASE_URL,
    LLMRunner,
    chat_messages,
    completion_text,
    is_local_host,
    require_local_url,
    run_ollama_cli,
)


def test_llm_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request):
        captured["prompt"] = request.prompt
        captured["system"] = request.system
        captured["model"] = request.model
        captured["temperature"] = request.temperature
        captured["max_tokens"] = request.max_tokens
        captured["executable"] = request.executable
        captured["base_url"] = request.base_url
        captured["api_key"] = request.api_key
        captured["request_timeout"] = request.request_timeout
        return "response"

    runner = LLMRunner(
        model="custom-model",
        base_url=None,
        executable="ollama",
        temperature=0.15,
        max_tokens=256,
        api_key=None,
        request_timeout=42.0,
        runner=fake_runner,
    )
    result = runner.run("Hello world", system="system message")

    assert result == "response"
    assert captured == {
        "prompt": "Hello world",
        "system": "system message",
        "model": "custom-model",
        "temperature": 0.15,
        "max_tokens": 256,
        "executable": "ollama",
        "base_url": None,
        "api_key": None,
        "request_timeout": 42.0,
    }


def test_generate_text_applies_call_overrides() -> None:
    seen = []

    def fake_runner(request):
        seen.append((request.prompt, request.max_tokens, request.temperature))
        return '{"selected": 0}'

    runner = LLMRunner(
        model="m",
        base_url=None,
        temperature=0.2,
        max_tokens=64,
        api_key=None,
        runner=fake_runner,
    )

    result = asyncio.run(runner.generate_text("Pick one", max_tokens=10, temperature=0))

    assert result == '{"selected": 0}'
    assert seen == [("Pick one", 10, 0)]


def test_generate_text_keeps_runner_defaults_without_overrides() -> None:
    seen = []

    def fake_runner(request):
        seen.append((request.max_tokens, request.temperature))
        return "ok"

    runner = LLMRunner(model="m", base_url=None, temperature=0.2, max_tokens=64, runner=fake_runner)

    asyncio.run(runner.generate_text("prompt"))

    assert seen == [(64, 0.2)]


def test_llm_runner_http_posts_payload(monkeypatch) -> None:
    captured = {}

    class FakeResponse:
        def __init__(self, payload):
            self._payload = payload

        def read(self):
            return json.dumps(self._payload).encode("utf-8")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse({"choices": [{"message": {"content": "instruction"}}]})

    monkeypatch.setattr("rulegen.llm.runner.urlopen", fake_urlopen)

    runner = LLMRunner(
        model="ai/smollm2:360M-Q4_K_M",
        base_url="http://localhost:12434/engines/v1/",
        api_key="local-key",
        temperature=0.05,
        max_tokens=128,
        request_timeout=25.0,
    )
    result = runner.run("Is this a skill?", system="Answer with one word.")

    assert result == "instruction"
    assert captured["url"] == "http://localhost:12434/engines/v1/chat/completions"
    headers = captured["headers"]
    assert headers["content-type"] == "application/json"
    assert headers["authorization"] == "Bearer local-key"
    payload = captured["payload"]
    assert payload["model"] == "ai/smollm2:360M-Q4_K_M"
    assert payload["messages"][0] == {"role": "system", "content": "Answer with one word."}
    assert payload["messages"][1] == {"role": "user", "content": "Is this a skill?"}
    assert payload["temperature"] == 0.05
    assert payload["max_tokens"] == 128
    assert captured["timeout"] == 25.0


def test_remote_base_url_is_rejected() -> None:
    with pytest.raises(RuntimeError, match="not permitted"):
        LLMRunner(model="m", base_url="https://api.example.com/v1")


def test_model_falls_back_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("RULEGEN_LLM_MODEL", "env-model")

    runner = LLMRunner(base_url=None, api_key=None, runner=lambda request: "")

    assert runner.model == "env-model"


def test_chat_messages_omits_empty_system() -> None:
    assert chat_messages(None, "hi") == [{"role": "user", "content": "hi"}]


def test_completion_text_reads_message_or_text_choices() -> None:
    assert completion_text({"choices": [{"message": {"content": "a"}}]}) == "a"
    assert completion_text({"choices": [{"text": "b"}]}) == "b"
    assert completion_text({"choices": []}) == ""
    assert completion_text("not a payload") == ""


def test_base_url_defaults_to_local_ollama(monkeypatch) -> None:
    monkeypatch.delenv("RULEGEN_LLM_BASE_URL", raising=False)
    monkeypatch.setenv("RULEGEN_LLM_API_KEY", "from-env")

    runner = LLMRunner(model="m")

    assert runner.base_url == DEFAULT_BASE_URL
    assert runner.api_key == "from-env"


def test_base_url_from_environment_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("RULEGEN_LLM_BASE_URL", "http://127.0.0.1:8080/v1/")

    assert LLMRunner(model="m").base_url == "http://127.0.0.1:8080/v1"


def test_local_host_detection() -> None:
    assert is_local_host("LOCALHOST")
    assert is_local_host("gpu-box.local")
    assert is_local_host("127.0.0.2")
    assert not is_local_host("10.0.0.5")
    assert not is_local_host("api.example.com")
    assert require_local_url("http://[::1]:9000/v1/") == "http://[::1]:9000/v1"


def test_ollama_cli_arguments(monkeypatch) -> None:
    recorded = []

    class _Completed:
        stdout = " skill \n"

    def fake_run(args, **kwargs):  # type: ignore[no-untyped-def]
        recorded.append(list(args))
        return _Completed()

    monkeypatch.setattr("rulegen.llm.runner.subprocess.run", fake_run)
    runner = LLMRunner(model="llama3", base_url=None, api_key=None, temperature=0.3)

    assert runner.run("Classify", system="One word.", max_tokens=10) == "skill"
    assert recorded == [
        [
            "ollama",
            "run",
            "llama3",
            "--system",
            "One word.",
            "--temperature",
            "0.3",
            "--num-predict",
            "10",
            "Classify",
        ]
    ]
    assert runner._transport is run_ollama_cli
