from __future__ import annotations

import os
from typing import Any, Optional

OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


def openai_compatible_api_key() -> Optional[str]:
    value = str(os.getenv("OPENAI_API_KEY") or "").strip()
    if value:
        return value
    value = str(os.getenv("OPENROUTER_API_KEY") or "").strip()
    return value or None


def openai_compatible_base_url() -> Optional[str]:
    for env_name in ("GRANTAXIOM_LLM_BASE_URL", "OPENAI_BASE_URL", "OPENROUTER_BASE_URL"):
        value = str(os.getenv(env_name) or "").strip()
        if value:
            return value
    if str(os.getenv("OPENROUTER_API_KEY") or "").strip():
        return OPENROUTER_DEFAULT_BASE_URL
    return None


def openai_compatible_default_headers() -> dict[str, str]:
    headers: dict[str, str] = {}
    http_referer = str(
        os.getenv("GRANTAXIOM_LLM_HTTP_REFERER")
        or os.getenv("OPENROUTER_HTTP_REFERER")
        or os.getenv("OPENROUTER_SITE_URL")
        or ""
    ).strip()
    x_title = str(os.getenv("GRANTAXIOM_LLM_APP_NAME") or os.getenv("OPENROUTER_X_TITLE") or "").strip()
    if http_referer:
        headers["HTTP-Referer"] = http_referer
    if x_title:
        headers["X-Title"] = x_title
    return headers


def openai_compatible_llm_available() -> bool:
    return bool(openai_compatible_api_key())


def openai_compatible_missing_reason() -> str:
    return "OPENAI_API_KEY / OPENROUTER_API_KEY missing"


def chat_openai_init_kwargs(
    *,
    model: str,
    temperature: Optional[float] = None,
    reasoning_effort: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> Optional[dict[str, Any]]:
    api_key = openai_compatible_api_key()
    if not api_key:
        return None
    kwargs: dict[str, Any] = {
        "model": model,
        "api_key": api_key,
        # Failures are terminal for the request; callers decide the fallback.
        "max_retries": 0,
    }
    if temperature is not None:
        kwargs["temperature"] = temperature
    if reasoning_effort:
        kwargs["reasoning_effort"] = reasoning_effort
    if timeout_s is not None:
        kwargs["timeout"] = timeout_s
    base_url = openai_compatible_base_url()
    if base_url:
        kwargs["base_url"] = base_url
    headers = openai_compatible_default_headers()
    if headers:
        kwargs["default_headers"] = headers
    return kwargs
