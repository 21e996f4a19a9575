"""LLM-backed extractor that proposes study fact candidates."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from http import client as http_client
from pathlib import Path
from string import Template
from typing import Any, Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from pydantic import BaseModel, Field, ValidationError

from studyfacts.config import GenerationConfig
from studyfacts.extraction.cleaning import clean_candidates, strip_bullet_prefix
from studyfacts.extraction.extractor_interface import FactExtractorInterface

LLM_EXTRACTION_PROMPT_VERSION = "facts.v1"
_PROMPT_FILES: dict[str, Path] = {
    "facts.v1": Path(__file__).resolve().parent / "prompts" / "facts_v1.txt",
}
_ITEM_TEXT_KEYS = ("fact", "text", "statement")


class LLMExtractionError(RuntimeError):
    """Raised when a provider call fails or its response envelope is invalid."""


class GenerationClient(Protocol):
    """Protocol for pluggable text-generation providers."""

    model: str

    def generate(self, system_prompt: str, text: str) -> str:
        """Return the raw model output for the given instructions and text."""


@dataclass(slots=True)
class OllamaGenerateClient:
    """Local-style provider speaking the Ollama ``/api/generate`` protocol."""

    url: str
    model: str
    timeout_seconds: int = 60

    def generate(self, system_prompt: str, text: str) -> str:
        payload = {
            "model": self.model,
            "prompt": f"{system_prompt}\n\nText:\n{text}",
            "stream": False,
            "format": "json",
            "options": {"temperature": 0.2},
        }
        decoded = _post_json(
            self.url,
            payload,
            headers={"Content-Type": "application/json"},
            timeout_seconds=self.timeout_seconds,
            provider_label="Ollama",
        )
        content = decoded.get("response") if isinstance(decoded, dict) else None
        if not isinstance(content, str):
            raise LLMExtractionError("Ollama returned an unexpected response without a 'response' string")
        return content


@dataclass(slots=True)
class OpenAIChatCompletionsClient:
    """Remote-API provider using OpenAI Chat Completions over stdlib HTTP."""

    api_key: str
    model: str
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: int = 60

    def generate(self, system_prompt: str, text: str) -> str:
        payload = {
            "model": self.model,
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
        }
        decoded = _post_json(
            f"{self.base_url.rstrip('/')}/chat/completions",
            payload,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout_seconds=self.timeout_seconds,
            provider_label="OpenAI",
        )
        try:
            content = decoded["choices"][0]["message"]["content"]
            if not isinstance(content, str):
                raise TypeError("OpenAI response content is not a string")
            return content
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMExtractionError("OpenAI returned an unexpected chat response") from exc


def _post_json(
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str],
    timeout_seconds: int,
    provider_label: str,
) -> Any:
    req = urllib_request.Request(
        url=url,
        data=json.dumps(payload).encode("utf-8"),
        method="POST",
        headers=headers,
    )
    try:
        with urllib_request.urlopen(req, timeout=timeout_seconds) as resp:
            raw = resp.read().decode("utf-8")
    except urllib_error.HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        raise LLMExtractionError(f"{provider_label} HTTP {exc.code}: {detail}") from exc
    except urllib_error.URLError as exc:
        raise LLMExtractionError(f"{provider_label} request failed: {exc.reason}") from exc
    except OSError as exc:
        raise LLMExtractionError(f"{provider_label} request failed: {exc}") from exc
    except http_client.HTTPException as exc:
        raise LLMExtractionError(f"{provider_label} returned an unreadable response: {exc!r}") from exc
    except UnicodeDecodeError as exc:
        raise LLMExtractionError(f"{provider_label} returned a response body that is not UTF-8") from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LLMExtractionError(f"{provider_label} returned a non-JSON response body") from exc


def _build_ollama_client(config: GenerationConfig) -> GenerationClient | None:
    return OllamaGenerateClient(
        url=config.ollama_url,
        model=config.ollama_model,
        timeout_seconds=config.timeout_seconds,
    )


def _build_openai_client(config: GenerationConfig) -> GenerationClient | None:
    if not config.openai_api_key:
        return None
    return OpenAIChatCompletionsClient(
        api_key=config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout_seconds=config.timeout_seconds,
    )


_PROVIDER_FACTORIES: dict[str, Callable[[GenerationConfig], GenerationClient | None]] = {
    "ollama": _build_ollama_client,
    "openai": _build_openai_client,
}


def build_generation_client(config: GenerationConfig) -> GenerationClient | None:
    """Return the configured provider client, or ``None`` when it lacks credentials."""

    factory = _PROVIDER_FACTORIES.get(config.provider)
    if factory is None:
        raise LLMExtractionError(f"Unknown fact provider: {config.provider}")
    return factory(config)


@lru_cache(maxsize=8)
def _load_prompt_template(version: str = LLM_EXTRACTION_PROMPT_VERSION) -> str:
    prompt_file = _PROMPT_FILES.get(version)
    if prompt_file is None:
        raise LLMExtractionError(f"Extraction prompt version is not registered: {version}")
    try:
        prompt_text = prompt_file.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise LLMExtractionError(f"Failed to load extraction prompt file: {prompt_file}") from exc
    if not prompt_text:
        raise LLMExtractionError(f"Extraction prompt file is empty: {prompt_file}")
    return prompt_text


def get_extraction_system_prompt(max_facts: int, version: str = LLM_EXTRACTION_PROMPT_VERSION) -> str:
    return Template(_load_prompt_template(version)).safe_substitute(max_facts=max_facts)


class _RawFactPayload(BaseModel):
    facts: list[Any] = Field(default_factory=list)


def _candidates_from_json(decoded: Any) -> list[str] | None:
    if isinstance(decoded, list):
        decoded = {"facts": decoded}
    if not isinstance(decoded, dict):
        return None
    try:
        payload = _RawFactPayload.model_validate(decoded)
    except ValidationError:
        return None
    candidates: list[str] = []
    for item in payload.facts:
        if isinstance(item, str):
            candidates.append(item)
        elif isinstance(item, dict):
            for key in _ITEM_TEXT_KEYS:
                value = item.get(key)
                if isinstance(value, str):
                    candidates.append(value)
                    break
    return candidates or None


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        first_nl = text.find("\n")
        text = text[first_nl + 1 :] if first_nl != -1 else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _parse_direct_json(content: str) -> list[str] | None:
    try:
        decoded = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError:
        return None
    return _candidates_from_json(decoded)


def _parse_brace_sliced_json(content: str) -> list[str] | None:
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        decoded = json.loads(content[start : end + 1])
    except json.JSONDecodeError:
        return None
    return _candidates_from_json(decoded)


def _parse_bullet_lines(content: str) -> list[str] | None:
    lines = [strip_bullet_prefix(line).strip() for line in content.splitlines()]
    candidates = [line for line in lines if line]
    return candidates or None


PARSE_STRATEGIES: tuple[Callable[[str], list[str] | None], ...] = (
    _parse_direct_json,
    _parse_brace_sliced_json,
    _parse_bullet_lines,
)


def parse_fact_candidates(content: str, source_text: str, limit: int) -> list[str]:
    """Recover cleaned candidates from raw model output.

    Strategies run in order; the first whose candidates survive cleaning wins.
    """

    if not content or not content.strip():
        return []
    for strategy in PARSE_STRATEGIES:
        raw = strategy(content)
        if not raw:
            continue
        cleaned = clean_candidates(raw, source_text, limit)
        if cleaned:
            return cleaned
    return []


class LLMFactExtractor(FactExtractorInterface):
    """Generative extractor that normalizes provider output into fact candidates."""

    def __init__(self, client: GenerationClient | None) -> None:
        self._client = client
        self._last_raw_output: str | None = None

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "LLMFactExtractor":
        return cls(build_generation_client(config))

    def extract_candidates(self, text: str, *, max_facts: int) -> list[str]:
        """Return cleaned candidates for one text segment.

        Provider failures raise ``LLMExtractionError``; output that cannot be
        parsed yields an empty list.
        """

        self._last_raw_output = None
        segment = text.strip()
        if self._client is None or not segment or max_facts <= 0:
            return []
        content = self._client.generate(get_extraction_system_prompt(max_facts), segment)
        self._last_raw_output = content
        return parse_fact_candidates(content, segment, max_facts)

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def prompt_version(self) -> str:
        return LLM_EXTRACTION_PROMPT_VERSION

    @property
    def model_name(self) -> str:
        if self._client is None:
            return "unconfigured"
        return str(getattr(self._client, "model", self._client.__class__.__name__))

    @property
    def last_raw_output(self) -> str | None:
        return self._last_raw_output
