"""Gemini (Generative Language REST API) client.

API docs: https://ai.google.dev/api/generate-content
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import requests

from ..core.constants import AI_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class AssistantUnavailable(Exception):
    """The text generation backend failed or answered with nothing usable."""


class TextGenerator(Protocol):
    def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[dict] = None,
        model: Optional[str] = None,
    ) -> str:
        raise NotImplementedError


class GeminiClient(TextGenerator):
    """Client for ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        timeout: float = AI_TIMEOUT_SECONDS,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _payload(
        self,
        prompt: str,
        system_instruction: Optional[str],
        temperature: Optional[float],
        response_schema: Optional[dict],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        generation: dict[str, Any] = {}
        if temperature is not None:
            generation["temperature"] = temperature
        if response_schema is not None:
            generation["responseMimeType"] = "application/json"
            generation["responseSchema"] = response_schema
        if generation:
            payload["generationConfig"] = generation
        return payload

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[dict] = None,
        model: Optional[str] = None,
    ) -> str:
        if not self.is_configured:
            raise AssistantUnavailable("GEMINI_API_KEY not configured")

        model = model or self.model
        url = f"{self.base_url}/models/{model}:generateContent"
        try:
            resp = self._session.post(
                url,
                params={"key": self.api_key},
                json=self._payload(prompt, system_instruction, temperature, response_schema),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AssistantUnavailable(f"request to {model} failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("Gemini %s returned %s: %s", model, resp.status_code, resp.text[:300])
            raise AssistantUnavailable(f"{model} returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AssistantUnavailable("response is not JSON") from e

        text = extract_text(data)
        if not text:
            raise AssistantUnavailable("empty response")
        return text


def extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate."""

    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()
