"""
Text-generation client for the Gemini REST API.

Usage:
    text = await generate(prompt)
    data = await generate_json(prompt)

Rate-limited calls (HTTP 429) are retried with exponential backoff; every
other failure surfaces immediately as one of the LLMError subclasses.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

import httpx

from vocabnote.config import Settings, settings as default_settings
from vocabnote.errors import LLMUnavailableError, MalformedResponseError, RateLimitedError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class _RateLimited(Exception):
    pass


def is_configured(settings: Settings | None = None) -> bool:
    return bool((settings or default_settings).gemini_api_key)


async def _post_generate(
    client: httpx.AsyncClient, settings: Settings, prompt: str
) -> dict:
    url = f"{settings.llm_base_url.rstrip('/')}/models/{settings.llm_model}:generateContent"
    payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    try:
        res = await client.post(
            url,
            params={"key": settings.gemini_api_key},
            json=payload,
            timeout=settings.llm_timeout,
        )
    except httpx.HTTPError as e:
        raise LLMUnavailableError(f"Could not reach the language model API: {e}") from e

    if res.status_code == 429:
        raise _RateLimited(res.text)
    if res.status_code >= 400:
        logger.warning("Model API returned %d: %s", res.status_code, res.text[:500])
        raise LLMUnavailableError(f"Language model API error (HTTP {res.status_code})")

    try:
        return res.json()
    except ValueError as e:
        raise MalformedResponseError("Language model API returned a non-JSON body") from e


def _extract_text(body: dict) -> str:
    try:
        parts = body["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("Language model response had no text") from e
    if not text.strip():
        raise MalformedResponseError("Language model returned an empty answer")
    return text


async def generate(
    prompt: str,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Send one prompt and return the model's text.

    Raises LLMUnavailableError when no API key is set or the API fails,
    RateLimitedError once retries are exhausted, MalformedResponseError when
    the response carries no text.
    """
    settings = settings or default_settings
    if not settings.gemini_api_key:
        raise LLMUnavailableError("No API key configured for the language model")

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient()
    attempts = max(1, settings.llm_max_retries)
    attempt = 0
    try:
        while True:
            try:
                body = await _post_generate(client, settings, prompt)
                return _extract_text(body)
            except _RateLimited:
                attempt += 1
                if attempt >= attempts:
                    raise RateLimitedError(
                        "Language model API rate limit exceeded. Wait a minute or two and "
                        "try again, or look words up one at a time."
                    ) from None
            delay = settings.llm_retry_initial_delay * (2 ** (attempt - 1))
            logger.info(
                "Rate limit hit. Retrying in %.1fs (attempt %d/%d)", delay, attempt, attempts
            )
            await asyncio.sleep(delay)
    finally:
        if owns_client:
            await client.aclose()


def parse_json_text(text: str) -> Any:
    """Parse model output as JSON, tolerating Markdown code fences around it."""
    cleaned = _CODE_FENCE.sub("", text).replace("```", "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Could not parse model output as JSON: %s", cleaned[:500])
        raise MalformedResponseError("Could not parse the language model's answer") from e


async def generate_json(
    prompt: str,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> Any:
    return parse_json_text(await generate(prompt, settings=settings, client=client))
