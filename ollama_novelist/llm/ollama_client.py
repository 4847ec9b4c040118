"""
Ollama /api/generate wrapper
 • one blocking, non-streaming request per call
 • <think>…</think> reasoning split off before the text is returned
"""

from __future__ import annotations

import logging
import re
from typing import List, NamedTuple
from urllib.parse import urlsplit

import requests

from ollama_novelist.errors import ServiceError, TransportError
from ollama_novelist.models import DEFAULT_BASE_URL, DEFAULT_MODEL

logger = logging.getLogger(__name__)

THINK_RE = re.compile(r"<think>(.*?)</think>", re.S)


class ReasoningSplit(NamedTuple):
    text: str
    segments: List[str]


def strip_reasoning(raw: str) -> ReasoningSplit:
    """
    Remove every ``<think>…</think>`` block (tags included) from *raw*.

    Returns the trimmed remainder plus the block bodies, in the order they
    appeared.  Text without such blocks comes back unchanged apart from the
    trim.
    """
    segments = THINK_RE.findall(raw)
    return ReasoningSplit(THINK_RE.sub("", raw).strip(), segments)


DEFAULT_PORT = 11434


def ollama_url(host: str) -> str:
    """
    Base URL from an OLLAMA_HOST-style value.

    ``127.0.0.1:11434``, ``localhost`` or ``http://box:8080/`` all work: the
    scheme defaults to http, the port to 11434, and the bind-all address
    0.0.0.0 is reached through 127.0.0.1.
    """
    host = host.strip() or DEFAULT_BASE_URL
    if "://" not in host:
        host = "http://" + host
    parts = urlsplit(host)
    hostname = parts.hostname or "127.0.0.1"
    if hostname == "0.0.0.0":
        hostname = "127.0.0.1"
    if ":" in hostname:
        hostname = f"[{hostname}]"
    port = parts.port or (443 if parts.scheme == "https" else DEFAULT_PORT)
    return f"{parts.scheme}://{hostname}:{port}{parts.path.rstrip('/')}"


class GenerationClient:
    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        language: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        if not model:
            raise ValueError("model identifier must be non-empty")
        self.model = model
        self.url = ollama_url(base_url) + "/api/generate"
        self.language = language
        self.timeout = timeout
        self.session = session or requests.Session()

    def _with_language(self, prompt: str) -> str:
        if not self.language:
            return prompt
        return f"Respond in the language {self.language}. " + prompt

    def generate(self, prompt: str, model: str | None = None) -> str:
        """
        Send *prompt* and return the cleaned response text.

        Raises TransportError (unreachable / non-2xx) or ServiceError
        (body is not the expected ``{"response": ...}`` envelope).
        """
        model = model or self.model
        logger.info("Calling Ollama with model: %s", model)

        try:
            resp = self.session.post(
                self.url,
                json={"model": model, "prompt": self._with_language(prompt), "stream": False},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Ollama unreachable at {self.url}: {exc}") from exc

        if not resp.ok:
            raise TransportError(f"HTTP error! status: {resp.status_code}", status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ServiceError(f"Response body is not JSON: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise ServiceError("Response body has no 'response' text")

        split = strip_reasoning(data["response"])
        for seg in split.segments:
            logger.info("Model thinking: %s", seg.strip())
        logger.debug("model=%s  prompt=%d chars  reply=%d chars", model, len(prompt), len(split.text))
        return split.text
