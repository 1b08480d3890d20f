# grantaxiom/audit/service.py
"""The three workbench operations: audit, chat, and simulation generation.

Each operation catches oracle failures at the call site and converts them into
a mode-specific fallback, so callers never see an exception.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Sequence

from grantaxiom.audit.normalizer import extract_code, normalize_audit_response, normalize_chat_response
from grantaxiom.audit.prompts import (
    ASSISTANT_SYSTEM_INSTRUCTION,
    AUDITOR_SYSTEM_INSTRUCTION,
    HistoryItem,
    build_audit_prompt,
    build_chat_prompt,
    build_simulation_prompt,
)
from grantaxiom.core.config import config
from grantaxiom.core.errors import InvalidOracleResponseError
from grantaxiom.core.models import AnalysisReport, Reference, fallback_report
from grantaxiom.oracle.client import OracleClient, OracleConfig

logger = logging.getLogger(__name__)

AUDIT_FAILURE_ISSUE = "Error analyzing proposal. Please try again."
CHAT_FAILURE_REPLY = "I'm having trouble connecting to the network right now."
SIMULATION_FALLBACK_HTML = (
    '<html><body style="background:#0f172a;color:white;display:flex;align-items:center;'
    'justify-content:center;"><h3>Failed to generate simulation. Please try again.</h3></body></html>'
)


class Oracle(Protocol):
    def generate(self, prompt: str, oracle_config: OracleConfig) -> str: ...


_default_oracle: Optional[Oracle] = None


def default_oracle() -> Oracle:
    global _default_oracle
    if _default_oracle is None:
        _default_oracle = OracleClient()
    return _default_oracle


def audit_oracle_config() -> OracleConfig:
    return OracleConfig(
        response_format="json",
        reasoning_budget=config.oracle.audit_reasoning_budget,
        enable_search_tool=False,
        system_instruction=AUDITOR_SYSTEM_INSTRUCTION,
    )


def chat_oracle_config() -> OracleConfig:
    return OracleConfig(
        response_format="text",
        reasoning_budget=0,
        enable_search_tool=True,
        system_instruction=ASSISTANT_SYSTEM_INSTRUCTION,
    )


def simulation_oracle_config() -> OracleConfig:
    return OracleConfig(
        response_format="text",
        reasoning_budget=config.oracle.simulation_reasoning_budget,
        enable_search_tool=False,
    )


def invalid_response_issue(exc: InvalidOracleResponseError) -> str:
    return f"Audit response failed validation ({exc.kind}). Please try again."


def run_audit(
    proposal_text: str,
    references: Sequence[Reference],
    *,
    oracle: Optional[Oracle] = None,
) -> AnalysisReport:
    oracle = oracle or default_oracle()
    prompt = build_audit_prompt(proposal_text, references)
    try:
        raw = oracle.generate(prompt, audit_oracle_config())
    except Exception:
        logger.exception("Audit failed")
        return fallback_report(AUDIT_FAILURE_ISSUE)

    try:
        return normalize_audit_response(raw)
    except InvalidOracleResponseError as exc:
        logger.warning("Audit response rejected (kind=%s): %s", exc.kind, exc.detail)
        return fallback_report(invalid_response_issue(exc))


def send_chat_message(
    history: Iterable[HistoryItem],
    new_message: str,
    context: Optional[str] = None,
    *,
    oracle: Optional[Oracle] = None,
) -> str:
    oracle = oracle or default_oracle()
    prompt = build_chat_prompt(history, new_message, context)
    try:
        raw = oracle.generate(prompt, chat_oracle_config())
    except Exception:
        logger.exception("Chat failed")
        return CHAT_FAILURE_REPLY
    return normalize_chat_response(raw)


def generate_simulation(
    proposal_text: str,
    references: Sequence[Reference],
    report: Optional[AnalysisReport],
    user_goal: Optional[str] = None,
    *,
    oracle: Optional[Oracle] = None,
) -> str:
    oracle = oracle or default_oracle()
    prompt = build_simulation_prompt(proposal_text, references, report, user_goal)
    try:
        raw = oracle.generate(prompt, simulation_oracle_config())
    except Exception:
        logger.exception("Simulation generation failed")
        return SIMULATION_FALLBACK_HTML
    return extract_code(raw)
