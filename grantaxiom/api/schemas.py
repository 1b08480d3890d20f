from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from grantaxiom.core.models import AnalysisReport, ChatMessage, Reference

REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")
RESPONSE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSessionRequest(BaseModel):
    seed_samples: bool = True

    model_config = REQUEST_CONFIG


class ProposalUpdateRequest(BaseModel):
    proposal_text: str

    model_config = REQUEST_CONFIG


class ReferenceCreateRequest(BaseModel):
    id: Optional[str] = None
    title: str = Field(min_length=1)
    authors: str = ""
    year: int
    content_snippet: str = ""

    model_config = REQUEST_CONFIG


class ChatRequest(BaseModel):
    message: str
    context: Optional[str] = None

    model_config = REQUEST_CONFIG


class SimulationRequest(BaseModel):
    user_goal: Optional[str] = None

    model_config = REQUEST_CONFIG


class SessionPublicResponse(BaseModel):
    session_id: str
    proposal_text: str
    references: List[Reference]
    report: Optional[AnalysisReport] = None
    transcript: List[ChatMessage]
    has_simulation: bool
    pending_actions: List[str]

    model_config = RESPONSE_CONFIG


class ReferenceListPublicResponse(BaseModel):
    session_id: str
    references: List[Reference]

    model_config = RESPONSE_CONFIG


class AuditPublicResponse(BaseModel):
    request_id: int
    applied: bool
    report: AnalysisReport

    model_config = RESPONSE_CONFIG


class ChatPublicResponse(BaseModel):
    request_id: int
    reply: str
    transcript: List[ChatMessage]

    model_config = RESPONSE_CONFIG


class SimulationPublicResponse(BaseModel):
    request_id: int
    applied: bool
    code: str

    model_config = RESPONSE_CONFIG
