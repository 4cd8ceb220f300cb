# src/doit_tracker/llm/client.py

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any

import httpx
import openai
from openai import OpenAI

logger = logging.getLogger(__name__)

_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)

SYSTEM_PROMPT = (
    "You are a terse productivity assistant. "
    "Answer ONLY with a JSON array of short strings, no prose, no markdown."
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"AuthenticationError", "PermissionDeniedError", "UnauthorizedError"}


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError) or exc.__class__.__name__ == "NotFoundError"


def parse_string_list(text: str | None) -> list[str]:
    """
    Extract a JSON array of strings from a model reply.

    Models sometimes wrap the array in prose or ```json fences; take the first [...] span.
    Non-string items are dropped. Returns [] when nothing parseable is found.
    """
    if not text:
        return []
    m = _JSON_ARRAY_RE.search(text)
    if not m:
        return []
    try:
        val = json.loads(m.group(0))
    except json.JSONDecodeError:
        return []
    if not isinstance(val, list):
        return []
    return [str(v).strip() for v in val if isinstance(v, str) and v.strip()]


class OpenRouterSuggestionClient:
    """
    OpenAI-compatible (OpenRouter) suggestion client.

    - Tries models in the configured order.
    - 404 -> model parked for an hour, next model.
    - Auth error -> give up immediately (every model would fail the same way).
    - Anything else -> next model.
    Never raises from suggest(); all failures end in [].
    """

    def __init__(self, settings, *, client: Any | None = None) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = getattr(settings, "openrouter_base_url", "") or ""
        if client is None:
            if not api_key or not str(api_key).strip():
                raise RuntimeError("LLM API key is not set. Set DOIT_OPENROUTER_API_KEY in your .env.")
            timeout = httpx.Timeout(
                connect=_env_float("DOIT_LLM_CONNECT_TIMEOUT_SECONDS", 5.0),
                read=_env_float("DOIT_LLM_READ_TIMEOUT_SECONDS", 25.0),
                write=10.0,
                pool=5.0,
            )
            # No SDK retries: falling through to the next model is faster.
            client = OpenAI(base_url=str(base_url), api_key=str(api_key), timeout=timeout, max_retries=0)
        self._client = client
        self._models: list[str] = [m.strip() for m in (getattr(settings, "llm_models", []) or []) if m.strip()]
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

    def suggest(self, prompt: str) -> list[str]:
        now = time.monotonic()
        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            try:
                resp = self._client.chat.completions.create(
                    model=model,
                    extra_headers=self._headers or None,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                )
                content = resp.choices[0].message.content
            except Exception as e:
                if _is_auth_error(e):
                    logger.error("LLM authentication failed; check DOIT_OPENROUTER_API_KEY.")
                    return []
                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + 3600.0
                    logger.info("LLM: model not available (404): %s", model)
                    continue
                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            items = parse_string_list(content)
            if items:
                logger.debug("LLM: %d suggestions from model=%s", len(items), model)
                return items
            logger.info("LLM: unparseable reply from model=%s, trying next", model)

        logger.warning("LLM: all models failed; no suggestions.")
        return []
