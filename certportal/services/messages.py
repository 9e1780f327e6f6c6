from __future__ import annotations

import logging
from typing import NamedTuple

import requests

from ..constants import (
    DEFAULT_GENERATED_MESSAGE,
    GEMINI_API_BASE,
    GEMINI_MODEL,
    GENERATION_MAX_OUTPUT_TOKENS,
    GENERATION_TEMPERATURE,
    IMPACT_PROMPT_TEMPLATE,
)

logger = logging.getLogger("certportal.messages")


class GenerationResult(NamedTuple):
    text: str
    fallback_used: bool
    error: str | None = None


def build_prompt(name: str) -> str:
    return IMPACT_PROMPT_TEMPLATE.format(name=name.strip())


def _extract_text(payload: dict) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        raise ValueError("response has no candidates")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def generate_impact_message(
    name: str,
    *,
    api_key: str | None,
    model: str = GEMINI_MODEL,
    api_base: str = GEMINI_API_BASE,
    session: requests.Session | None = None,
) -> GenerationResult:
    """Ask the text-generation service for a short Turkish thank-you.

    Never raises. Any failure yields the fixed default sentence with
    ``fallback_used`` set, and is logged.
    """

    def fallback(reason: str) -> GenerationResult:
        logger.warning("[GEN-FAIL] model=%s reason=%s", model, reason)
        return GenerationResult(DEFAULT_GENERATED_MESSAGE, True, reason)

    if not api_key:
        return fallback("missing api key")

    http = session or requests.Session()
    url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
    body = {
        "contents": [{"parts": [{"text": build_prompt(name)}]}],
        "generationConfig": {
            "temperature": GENERATION_TEMPERATURE,
            "maxOutputTokens": GENERATION_MAX_OUTPUT_TOKENS,
        },
    }
    try:
        response = http.post(url, json=body, headers={"x-goog-api-key": api_key})
        response.raise_for_status()
        text = _extract_text(response.json()).strip()
    except requests.RequestException as exc:
        return fallback(f"transport error: {exc}")
    except (ValueError, AttributeError, TypeError) as exc:
        return fallback(f"malformed response: {exc}")
    if not text:
        return fallback("empty response")
    logger.info("[GEN] model=%s words=%s", model, len(text.split()))
    return GenerationResult(text, False)


def compose_impact_message(name: str, **kwargs) -> str:
    return generate_impact_message(name, **kwargs).text
