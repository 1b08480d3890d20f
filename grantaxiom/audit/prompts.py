# grantaxiom/audit/prompts.py
"""Prompt builders for the three oracle calls.

Every builder here is pure: the same inputs give the same prompt string.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from grantaxiom.core.config import config
from grantaxiom.core.models import AnalysisReport, ChatMessage, Reference

HistoryItem = Union[ChatMessage, Mapping[str, Any]]

REFERENCE_SEPARATOR = "\n---\n"
NO_CONTEXT_PLACEHOLDER = "No specific context provided."
NO_AUDIT_PLACEHOLDER = "Audit not yet performed."
DEFAULT_SIMULATION_GOAL = (
    "Generate a highly interactive, scientifically accurate simulation based on the methodology and "
    "findings described above. Make it visually stunning."
)

AUDITOR_SYSTEM_INSTRUCTION = """
You are GrantAxiom, an elite scientific grant auditor. Your goal is to maximize the user's chance of funding.
You rigorously check claims against provided references.
You are strict, precise, and empirical.
When analyzing, categorize claims as:
- Verified (Green): Fully supported by references.
- Warning (Yellow): Supported but lacks nuance or specific citation.
- Contradiction (Red): Directly opposes reference material.
""".strip()

ASSISTANT_SYSTEM_INSTRUCTION = (
    "You are a helpful GrantAxiom assistant. Assist the researcher in refining their proposal. "
    "Be concise and helpful."
)

AUDIT_OUTPUT_SCHEMA = """
Output valid JSON matching this schema:
{
  "overallScore": integer (0-100),
  "claims": [
    {
      "id": "string",
      "text": "The exact text of the claim",
      "status": "verified" | "warning" | "contradiction",
      "confidence": number (0-1),
      "sourceId": "ref-id or null",
      "explanation": "Why this status was assigned",
      "suggestion": "How to fix it (if not verified)"
    }
  ],
  "complianceIssues": ["string", "string"],
  "toneAnalysis": "Brief analysis of the scientific tone"
}
""".strip()

SIMULATION_REQUIREMENTS: Tuple[str, ...] = (
    "Output ONLY valid HTML code. Start with <!DOCTYPE html>.",
    "Use HTML5 Canvas for rendering.",
    "Include interactivity (mouse, click, or sliders).",
    "Styling: Dark mode, scientific aesthetic (slate/blue/neon colors), clean typography (sans-serif).",
    "The code must be self-contained (no external CSS/JS files unless using reliable CDNs like Tailwind or Recharts).",
    "Ensure the simulation actually runs and doesn't just show static text.",
    "Do not include markdown code fences (like ```html). Just return the raw HTML string.",
)


def format_reference(reference: Reference) -> str:
    return f"[ID: {reference.id}] Title: {reference.title} ({reference.year})\nSnippet: {reference.content_snippet}"


def format_reference_library(references: Iterable[Reference]) -> str:
    return REFERENCE_SEPARATOR.join(format_reference(r) for r in references)


def build_audit_prompt(proposal_text: str, references: Sequence[Reference]) -> str:
    return (
        "Analyze the following Grant Proposal Text against the provided Reference Library.\n\n"
        "Proposal Text:\n"
        f'"""\n{proposal_text}\n"""\n\n'
        "Reference Library:\n"
        f'"""\n{format_reference_library(references)}\n"""\n\n'
        "Perform a deep audit. Identify key scientific claims. Cross-reference them.\n\n"
        f"{AUDIT_OUTPUT_SCHEMA}\n"
    )


def _role_and_text(item: HistoryItem) -> Tuple[str, str]:
    if isinstance(item, ChatMessage):
        return item.role, item.text
    return str(item.get("role") or ""), str(item.get("text") or "")


def build_chat_prompt(history: Iterable[HistoryItem], new_message: str, context: Optional[str] = None) -> str:
    transcript = "\n".join(f"{role}: {text}" for role, text in map(_role_and_text, history))
    return (
        f"Context: {context or NO_CONTEXT_PLACEHOLDER}\n\n"
        "Chat History:\n"
        f"{transcript}\n\n"
        f"User: {new_message}\n"
    )


def audit_status_line(report: Optional[AnalysisReport]) -> str:
    if report is None:
        return NO_AUDIT_PLACEHOLDER
    key_issue = report.compliance_issues[0] if report.compliance_issues else "None"
    return f"Audit Score: {report.overall_score}. Key Issue: {key_issue}"


def build_simulation_prompt(
    proposal_text: str,
    references: Sequence[Reference],
    report: Optional[AnalysisReport],
    user_goal: Optional[str] = None,
) -> str:
    limits = config.workbench
    reference_lines = "\n".join(
        f"- {r.title}: {r.content_snippet[: limits.simulation_snippet_chars]}..."
        for r in list(references)[: limits.simulation_reference_limit]
    )
    requirements = "\n".join(f"{idx}. {line}" for idx, line in enumerate(SIMULATION_REQUIREMENTS, start=1))
    goal = (user_goal or "").strip() or DEFAULT_SIMULATION_GOAL
    return (
        "You are an expert scientific visualization engineer and educator.\n\n"
        "Task: Create a self-contained, interactive HTML5 simulation (HTML, CSS, JS) to demonstrate the core "
        'scientific concepts or "Broader Impacts" of the following research proposal.\n'
        "The target audience is high school students or the general public.\n\n"
        "Context (Proposal):\n"
        f'"""\n{proposal_text[: limits.simulation_proposal_chars]}\n"""\n\n'
        "Context (Key References):\n"
        f'"""\n{reference_lines}\n"""\n\n'
        "Context (Audit Status):\n"
        f"{audit_status_line(report)}\n\n"
        f"User Requirement: {goal}\n\n"
        "Requirements:\n"
        f"{requirements}\n\n"
        "Make it impressive.\n"
    )
