"""Thin wrapper around the Groq OpenAI-compatible chat endpoint."""
from __future__ import annotations

import json
from typing import Any

from openai import APIError, AuthenticationError, BadRequestError, OpenAI

from jobflow.config import groq_settings
from jobflow.log import get_logger
from jobflow.retry import retry

log = get_logger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class LLMUnavailable(RuntimeError):
    """No API key is configured, so callers should use their local fallback."""


def _hopeless(exc: BaseException) -> bool:
    return isinstance(exc, (AuthenticationError, BadRequestError))


@retry(max_attempts=2, base_delay=2.0, retryable=(APIError, ValueError), giveup=_hopeless)
def _chat(api_key: str, model: str, prompt: str, max_tokens: int, temperature: float) -> str:
    client = OpenAI(api_key=api_key, base_url=GROQ_BASE_URL)
    resp = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=max_tokens,
        temperature=temperature,
    )
    text = (resp.choices[0].message.content or "").strip()
    if not text:
        raise ValueError("LLM returned an empty reply")
    return text


def complete(prompt: str, *, max_tokens: int = 600, temperature: float = 0.3, api_key: str | None = None) -> str:
    key, model = groq_settings()
    key = api_key or key
    if not key:
        raise LLMUnavailable("GROQ_API_KEY is not set")
    return _chat(key, model, prompt, max_tokens, temperature)


def parse_json_reply(raw: str, opener: str = "{") -> Any:
    """Decode the first JSON object (or array) in a reply that may carry code fences."""
    closer = "}" if opener == "{" else "]"
    text = raw.replace("```json", "").replace("```", "").strip()
    start = text.find(opener)
    end = text.rfind(closer) + 1
    if start == -1 or end == 0:
        raise ValueError("LLM did not return valid JSON")
    return json.loads(text[start:end])
