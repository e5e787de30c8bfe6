"""Tests for the local Ollama runner."""

from __future__ import annotations

import http.client
import io
import json
from urllib.error import HTTPError, URLError

import pytest

from refgen.llm.runner import GenerateRequest, OllamaRunner, SummarizationUnavailable


class FakeResponse:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload

    def read(self) -> bytes:
        return self._payload

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class TruncatedResponse(FakeResponse):
    def read(self) -> bytes:
        raise http.client.IncompleteRead(self._payload, 483)


def test_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request: GenerateRequest) -> str:
        captured["prompt"] = request.prompt
        captured["model"] = request.model
        captured["base_url"] = request.base_url
        captured["timeout"] = request.timeout
        return "summary"

    runner = OllamaRunner("qwen2.5:14b", base_url="http://localhost:11434/", runner=fake_runner)

    assert runner.run("Summarize", timeout=42.0) == "summary"
    assert captured == {
        "prompt": "Summarize",
        "model": "qwen2.5:14b",
        "base_url": "http://localhost:11434",
        "timeout": 42.0,
    }


def test_runner_posts_non_streaming_generate_request(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["method"] = request.get_method()
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse(json.dumps({"response": "  Decided X.  "}).encode("utf-8"))

    monkeypatch.setattr("refgen.llm.runner.urlopen", fake_urlopen)

    runner = OllamaRunner("llama3", base_url="http://127.0.0.1:11434")
    result = runner.run("prompt text", timeout=60.0)

    assert result == "Decided X."
    assert captured == {
        "url": "http://127.0.0.1:11434/api/generate",
        "method": "POST",
        "payload": {"model": "llama3", "prompt": "prompt text", "stream": False},
        "timeout": 60.0,
    }


def test_server_error_becomes_unavailable(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 500, "Internal Server Error", {}, io.BytesIO(b"boom"))

    monkeypatch.setattr("refgen.llm.runner.urlopen", fake_urlopen)

    with pytest.raises(SummarizationUnavailable) as excinfo:
        OllamaRunner().run("prompt")

    assert "500" in str(excinfo.value)
    assert "boom" in str(excinfo.value)


@pytest.mark.parametrize(
    "body",
    [b"not json", json.dumps({"response": "   "}).encode("utf-8"), b"[]"],
)
def test_unusable_responses_become_unavailable(monkeypatch, body: bytes) -> None:
    monkeypatch.setattr(
        "refgen.llm.runner.urlopen", lambda request, timeout=None: FakeResponse(body)
    )

    with pytest.raises(SummarizationUnavailable):
        OllamaRunner().run("prompt")


def test_timeout_becomes_unavailable(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise TimeoutError("timed out")

    monkeypatch.setattr("refgen.llm.runner.urlopen", fake_urlopen)

    with pytest.raises(SummarizationUnavailable):
        OllamaRunner().run("prompt", timeout=1.0)


def test_probe_reports_availability(monkeypatch) -> None:
    seen = {}

    def reachable(request, timeout=None):
        seen["url"] = request.full_url
        seen["timeout"] = timeout
        return FakeResponse(b'{"models": []}')

    monkeypatch.setattr("refgen.llm.runner.urlopen", reachable)
    runner = OllamaRunner(probe_timeout=2.0)

    assert runner.is_available() is True
    assert seen == {"url": "http://localhost:11434/api/tags", "timeout": 2.0}

    def unreachable(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr("refgen.llm.runner.urlopen", unreachable)

    assert runner.is_available() is False


def test_remote_hosts_are_rejected() -> None:
    with pytest.raises(SummarizationUnavailable):
        OllamaRunner(base_url="https://api.example.com")


def test_loopback_addresses_are_allowed() -> None:
    assert OllamaRunner(base_url="http://127.0.0.2:11434").base_url == "http://127.0.0.2:11434"
    assert OllamaRunner(base_url="http://gpu-box.local:11434").base_url.endswith(".local:11434")


def test_truncated_body_becomes_unavailable(monkeypatch) -> None:
    monkeypatch.setattr(
        "refgen.llm.runner.urlopen",
        lambda request, timeout=None: TruncatedResponse(b'{"respon'),
    )

    with pytest.raises(SummarizationUnavailable) as excinfo:
        OllamaRunner().run("prompt")

    assert "malformed" in str(excinfo.value)


def test_non_http_listener_becomes_unavailable(monkeypatch) -> None:
    def ssh_banner(request, timeout=None):
        raise http.client.BadStatusLine("SSH-2.0-OpenSSH_9.0")

    monkeypatch.setattr("refgen.llm.runner.urlopen", ssh_banner)
    runner = OllamaRunner()

    with pytest.raises(SummarizationUnavailable):
        runner.run("prompt")
    assert runner.is_available() is False


@pytest.mark.parametrize(
    "error",
    [http.client.InvalidURL("nonnumeric port: 'abc'"), ValueError("bad"), OverflowError("port")],
)
def test_invalid_endpoint_becomes_unavailable(monkeypatch, error: Exception) -> None:
    def reject(request, timeout=None):
        raise error

    monkeypatch.setattr("refgen.llm.runner.urlopen", reject)
    runner = OllamaRunner()

    with pytest.raises(SummarizationUnavailable):
        runner.run("prompt")
    assert runner.is_available() is False
