"""Text-generation providers for the learning planner.

Each provider implements the same small contract, ``generate(prompt) -> str``,
and fails only with :class:`core.errors.GenerationError`. One provider is
chosen per planner by :func:`select_provider` and built by
:func:`build_generator`; when no credential is configured the planner runs on
the deterministic fallback plan instead.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Optional

import httpx
from anthropic import Anthropic, AnthropicError
from openai import OpenAI, OpenAIError

from core.config import Settings
from core.errors import GenerationError

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert career counselor and learning path designer."


class ProviderTag(str, Enum):
    OLLAMA = "ollama"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"
    MOCK = "mock"


def select_provider(settings: Settings) -> ProviderTag:
    if settings.use_ollama:
        return ProviderTag.OLLAMA
    if settings.anthropic_api_key:
        return ProviderTag.ANTHROPIC
    if settings.openai_api_key:
        return ProviderTag.OPENAI
    if settings.google_api_key:
        return ProviderTag.GOOGLE
    return ProviderTag.MOCK


class TextGenerator:
    """Send one prompt, get back the raw reply text."""

    tag: ProviderTag

    def __init__(self, model: str) -> None:
        self.model = model

    def generate(self, prompt: str) -> str:
        started = time.perf_counter()
        LOGGER.info("[%s] start model=%s prompt_chars=%d", self.tag.value, self.model, len(prompt))
        try:
            text = self._generate(prompt)
        except GenerationError as exc:
            elapsed = time.perf_counter() - started
            LOGGER.error("[%s] error model=%s elapsed=%.2fs: %s", self.tag.value, self.model, elapsed, exc)
            raise
        elapsed = time.perf_counter() - started
        LOGGER.info("[%s] done model=%s elapsed=%.2fs chars=%d", self.tag.value, self.model, elapsed, len(text))
        return text

    def _generate(self, prompt: str) -> str:
        raise NotImplementedError

    def close(self) -> None:
        pass


class AnthropicGenerator(TextGenerator):
    tag = ProviderTag.ANTHROPIC

    def __init__(self, settings: Settings, client: Any = None) -> None:
        super().__init__(settings.anthropic_model)
        self.max_tokens = settings.llm_max_tokens
        self.client = client or Anthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    def _generate(self, prompt: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except AnthropicError as exc:
            raise GenerationError(f"Anthropic request failed: {exc}") from exc

        parts = [block.text for block in (response.content or []) if getattr(block, "type", None) == "text"]
        if not parts:
            raise GenerationError("Anthropic response has no text content")
        return "".join(parts)


class OpenAIGenerator(TextGenerator):
    tag = ProviderTag.OPENAI

    def __init__(self, settings: Settings, client: Any = None) -> None:
        super().__init__(settings.openai_model)
        self.max_tokens = settings.llm_max_tokens
        self.temperature = settings.llm_temperature
        self.client = client or OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    def _generate(self, prompt: str) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except OpenAIError as exc:
            raise GenerationError(f"OpenAI request failed: {exc}") from exc

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise GenerationError("OpenAI response has no choices") from exc
        if not content:
            raise GenerationError("OpenAI response is empty")
        return content


class _HttpGenerator(TextGenerator):
    """Providers reached with a plain JSON POST over httpx."""

    def __init__(self, model: str, timeout: float, http_client: Optional[httpx.Client] = None) -> None:
        super().__init__(model)
        self.http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def _post(self, url: str, payload: dict, params: Optional[dict] = None) -> Any:
        try:
            resp = self.http.post(url, json=payload, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise GenerationError(f"{self.tag.value} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"{self.tag.value} request failed: {exc}") from exc
        except ValueError as exc:
            raise GenerationError(f"{self.tag.value} returned a non-JSON body") from exc


class GeminiGenerator(_HttpGenerator):
    tag = ProviderTag.GOOGLE

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        super().__init__(settings.google_model, settings.llm_timeout_seconds, http_client)
        self.api_key = settings.google_api_key
        self.base_url = settings.google_base_url.rstrip("/")

    def _generate(self, prompt: str) -> str:
        data = self._post(
            f"{self.base_url}/models/{self.model}:generateContent",
            {"contents": [{"parts": [{"text": prompt}]}]},
            params={"key": self.api_key},
        )
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GenerationError("Gemini response has an unexpected shape") from exc


class OllamaGenerator(_HttpGenerator):
    tag = ProviderTag.OLLAMA

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        super().__init__(settings.ollama_model, settings.llm_timeout_seconds, http_client)
        self.base_url = settings.ollama_base_url.rstrip("/")

    def _generate(self, prompt: str) -> str:
        data = self._post(
            f"{self.base_url}/api/generate",
            {"model": self.model, "prompt": prompt, "stream": False},
        )
        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise GenerationError("Ollama response has no 'response' text")
        return text


_GENERATORS = {
    ProviderTag.OLLAMA: OllamaGenerator,
    ProviderTag.ANTHROPIC: AnthropicGenerator,
    ProviderTag.OPENAI: OpenAIGenerator,
    ProviderTag.GOOGLE: GeminiGenerator,
}


def build_generator(tag: ProviderTag, settings: Settings) -> Optional[TextGenerator]:
    if tag is ProviderTag.MOCK:
        return None
    return _GENERATORS[tag](settings)
