from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from grantaxiom.core.config import OracleSettings, config
from grantaxiom.core.errors import OracleUnavailableError
from grantaxiom.oracle.llm_provider import (
    chat_openai_init_kwargs,
    openai_compatible_missing_reason,
)

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL: Dict[str, str] = {"type": "web_search_preview"}
JSON_RESPONSE_FORMAT: Dict[str, str] = {"type": "json_object"}


class OracleConfig(BaseModel):
    """Per-call options for a single oracle request."""

    response_format: Literal["json", "text"] = "text"
    reasoning_budget: int = Field(default=0, ge=0)
    enable_search_tool: bool = False
    system_instruction: Optional[str] = None

    model_config = ConfigDict(frozen=True)


def reasoning_effort_for_budget(budget: int) -> Optional[str]:
    if budget <= 0:
        return None
    if budget < 2048:
        return "low"
    if budget < 4096:
        return "medium"
    return "high"


def message_text(message: Any) -> str:
    """Flatten chat-model output to plain text.

    Tool-augmented responses arrive as a list of content blocks; only the text
    blocks are kept.
    """
    content = getattr(message, "content", message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") in {"text", "output_text"}:
                parts.append(str(block.get("text") or ""))
        return "".join(parts)
    return str(content)


class OracleClient:
    """Thin wrapper over an OpenAI-compatible chat model.

    Errors are not caught here: transport and provider exceptions propagate to
    the call site, which owns the fallback.
    """

    def __init__(self, settings: Optional[OracleSettings] = None) -> None:
        self._settings = settings or config.oracle

    def _runnable(self, oracle_config: OracleConfig) -> Any:
        effort = None
        if self._settings.reasoning_effort_enabled:
            effort = reasoning_effort_for_budget(oracle_config.reasoning_budget)
        llm_kwargs = chat_openai_init_kwargs(
            model=self._settings.model,
            temperature=self._settings.temperature,
            reasoning_effort=effort,
            timeout_s=self._settings.timeout_s,
        )
        if llm_kwargs is None:
            raise OracleUnavailableError(openai_compatible_missing_reason())

        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(**llm_kwargs)
        bind_kwargs: Dict[str, Any] = {}
        if oracle_config.response_format == "json":
            bind_kwargs["response_format"] = JSON_RESPONSE_FORMAT
        if oracle_config.enable_search_tool:
            return llm.bind_tools([WEB_SEARCH_TOOL], **bind_kwargs)
        if bind_kwargs:
            return llm.bind(**bind_kwargs)
        return llm

    def generate(self, prompt: str, oracle_config: OracleConfig) -> str:
        runnable = self._runnable(oracle_config)

        from langchain_core.messages import HumanMessage, SystemMessage

        messages: List[Any] = []
        if oracle_config.system_instruction:
            messages.append(SystemMessage(content=oracle_config.system_instruction))
        messages.append(HumanMessage(content=prompt))

        logger.info(
            "Oracle call (model=%s format=%s budget=%s search=%s prompt_chars=%s)",
            self._settings.model,
            oracle_config.response_format,
            oracle_config.reasoning_budget,
            oracle_config.enable_search_tool,
            len(prompt),
        )
        return message_text(runnable.invoke(messages))
