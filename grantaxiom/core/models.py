# grantaxiom/core/models.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClaimStatus(str, Enum):
    verified = "verified"
    warning = "warning"
    contradiction = "contradiction"


class Reference(BaseModel):
    """A user-supplied document excerpt used as ground truth during audits."""

    id: str = Field(min_length=1)
    title: str
    authors: str = ""
    year: int
    content_snippet: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Claim(BaseModel):
    id: str
    text: str
    status: ClaimStatus
    confidence: float = Field(ge=0.0, le=1.0, strict=True)
    source_id: Optional[str] = None
    explanation: str = ""
    suggestion: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def _numeric_id_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("source_id", mode="before")
    @classmethod
    def _blank_source_is_none(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if not text or text.lower() in {"null", "none"}:
            return None
        return text


class AnalysisReport(BaseModel):
    """One audit run. A new report replaces the previous one; no history is kept."""

    overall_score: int = Field(ge=0, le=100, strict=True)
    claims: List[Claim] = Field(default_factory=list)
    compliance_issues: List[str] = Field(default_factory=list)
    tone_analysis: str = ""

    model_config = WIRE_CONFIG

    @field_validator("overall_score", mode="before")
    @classmethod
    def _round_fractional_score(cls, value: Any) -> Any:
        # Oracles sometimes answer 81.6 for an integer field.
        if isinstance(value, float) and math.isfinite(value):
            return int(round(value))
        return value


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_thinking: bool = False

    model_config = WIRE_CONFIG


def fallback_report(issue: str) -> AnalysisReport:
    return AnalysisReport(
        overall_score=0,
        claims=[],
        compliance_issues=[issue],
        tone_analysis="N/A",
    )
