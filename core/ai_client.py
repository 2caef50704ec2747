"""Thin Gemini wrapper returning parsed JSON objects."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

import google.generativeai as genai

LOGGER = logging.getLogger("infinytix.ai")

_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class AIUnavailableError(RuntimeError):
    """Raised when no generative model is configured."""


class AIResponseError(ValueError):
    """Raised when the model answers with something that is not a JSON object."""


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse a model response into a dict, tolerating code fences and surrounding prose."""
    cleaned = _CODE_FENCE_PATTERN.sub("", (text or "").strip())
    if not cleaned:
        raise AIResponseError("Model returned an empty response.")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_PATTERN.search(cleaned)
        if match is None:
            raise AIResponseError("Model response did not contain JSON.") from None
        try:
            payload = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise AIResponseError(f"Model response contained malformed JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise AIResponseError("Model response JSON is not an object.")
    return payload


class GeminiClient:
    """Generate JSON completions with a Gemini model."""

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash", timeout: float = 30.0) -> None:
        if not api_key:
            raise AIUnavailableError("GEMINI_API_KEY is not set.")
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout

    def generate_json(self, system: str, prompt: str) -> dict[str, Any]:
        """Send one prompt and return the parsed JSON object from the reply."""
        model = genai.GenerativeModel(self.model_name, system_instruction=system)
        response = model.generate_content(
            prompt,
            generation_config={"response_mime_type": "application/json"},
            request_options={"timeout": self.timeout},
        )
        text = getattr(response, "text", None) or ""
        return parse_json_object(text)


def build_ai_client(config: Mapping[str, Any]) -> GeminiClient | None:
    """Create the configured client, or None when generation is switched off."""
    if not config.get("AI_ENABLED"):
        LOGGER.info("AI generation disabled; using local fallbacks")
        return None
    api_key = config.get("GEMINI_API_KEY") or ""
    if not api_key:
        LOGGER.warning("AI_ENABLED is set but GEMINI_API_KEY is missing; using local fallbacks")
        return None
    return GeminiClient(
        api_key=api_key,
        model_name=config.get("GEMINI_MODEL") or "gemini-1.5-flash",
        timeout=float(config.get("AI_TIMEOUT_SECONDS") or 30),
    )
