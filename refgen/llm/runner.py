"""Adapter around a local Ollama summarization endpoint."""

from __future__ import annotations

import http.client
import ipaddress
import json
import socket
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config import DEFAULT_BASE_URL, DEFAULT_MODEL


class SummarizationUnavailable(RuntimeError):
    """The AI path cannot produce a usable answer for this request."""


@dataclass
class GenerateRequest:
    """Represents one non-streaming generation call."""

    prompt: str
    model: str
    base_url: str
    timeout: float


class OllamaRunner:
    """Executes prompts against the local Ollama HTTP API."""

    PROBE_PATH = "/api/tags"
    GENERATE_PATH = "/api/generate"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        *,
        base_url: str = DEFAULT_BASE_URL,
        probe_timeout: float = 2.0,
        runner: Callable[[GenerateRequest], str] | None = None,
    ) -> None:
        self.model = model
        self.base_url = self._ensure_local_url(base_url)
        self.probe_timeout = probe_timeout
        self._runner = runner or self._http_runner

    def is_available(self) -> bool:
        """Return True when the endpoint answers the reachability probe."""
        endpoint = f"{self.base_url}{self.PROBE_PATH}"
        try:
            with urlopen(Request(endpoint, method="GET"), timeout=self.probe_timeout) as response:
                response.read()
        except (
            HTTPError,
            URLError,
            socket.timeout,
            OSError,
            http.client.HTTPException,
            ValueError,
            OverflowError,
        ):
            return False
        return True

    def run(self, prompt: str, *, timeout: float | None = None) -> str:
        """Send ``prompt`` and return the stripped response text."""
        request = GenerateRequest(
            prompt=prompt,
            model=self.model,
            base_url=self.base_url,
            timeout=timeout or self.DEFAULT_TIMEOUT,
        )
        return self._runner(request)

    @staticmethod
    def build_payload(request: GenerateRequest) -> dict[str, object]:
        return {"model": request.model, "prompt": request.prompt, "stream": False}

    @staticmethod
    def _http_runner(request: GenerateRequest) -> str:
        endpoint = f"{request.base_url}{OllamaRunner.GENERATE_PATH}"
        data = json.dumps(OllamaRunner.build_payload(request)).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        try:
            http_request = Request(endpoint, data=data, headers=headers, method="POST")
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise SummarizationUnavailable(
                f"Ollama request failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:
            raise SummarizationUnavailable(f"Ollama request failed: {exc.reason}") from exc
        except (socket.timeout, TimeoutError) as exc:
            raise SummarizationUnavailable(
                f"Ollama request timed out after {request.timeout:.0f}s"
            ) from exc
        except OSError as exc:
            raise SummarizationUnavailable(f"Ollama request failed: {exc}") from exc
        except http.client.HTTPException as exc:
            raise SummarizationUnavailable(
                f"Ollama returned a malformed HTTP response: {exc!r}"
            ) from exc
        except (ValueError, OverflowError) as exc:
            raise SummarizationUnavailable(f"Invalid Ollama endpoint {endpoint}: {exc}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SummarizationUnavailable("Ollama returned invalid JSON") from exc

        content = OllamaRunner._extract_content(payload)
        if not content:
            raise SummarizationUnavailable("Ollama returned an empty response")
        return content

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        text = payload.get("response")
        if isinstance(text, str):
            return text.strip()
        return ""

    @classmethod
    def _ensure_local_url(cls, url: str) -> str:
        normalized = url.rstrip("/")
        host = urlparse(normalized).hostname
        if host is None or cls._is_local_host(host):
            return normalized
        raise SummarizationUnavailable(
            f"Remote endpoint '{url}' is not permitted. Point OLLAMA_HOST at a local server."
        )

    @staticmethod
    def _is_local_host(host: str) -> bool:
        lowered = host.lower()
        if lowered in {"localhost", "127.0.0.1", "0.0.0.0", "::1", "host.docker.internal"}:
            return True
        if lowered.endswith(".local") or lowered.endswith(".localdomain"):
            return True
        try:
            ip = ipaddress.ip_address(lowered)
        except ValueError:
            return False
        return ip.is_loopback


__all__ = ["GenerateRequest", "OllamaRunner", "SummarizationUnavailable"]
