from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from grantaxiom.api.demo_ui import render_demo_ui_html
from grantaxiom.api.schemas import (
    AuditPublicResponse,
    ChatPublicResponse,
    ChatRequest,
    CreateSessionRequest,
    ProposalUpdateRequest,
    ReferenceCreateRequest,
    ReferenceListPublicResponse,
    SessionPublicResponse,
    SimulationPublicResponse,
    SimulationRequest,
)
from grantaxiom.api.security import (
    api_key_configured,
    install_openapi_api_key_security,
    read_auth_required,
    require_api_key_if_configured,
)
from grantaxiom.audit.service import Oracle, generate_simulation, run_audit, send_chat_message
from grantaxiom.core.config import config
from grantaxiom.core.models import ChatMessage, Reference
from grantaxiom.core.session import InMemorySessionStore, WorkbenchSession
from grantaxiom.core.version import __version__
from grantaxiom.memory_bank.ingest import reference_from_upload
from grantaxiom.oracle.client import OracleClient
from grantaxiom.oracle.llm_provider import openai_compatible_llm_available, openai_compatible_missing_reason

logger = logging.getLogger(__name__)

app = FastAPI(
    title="GrantAxiom API",
    description="Grant proposal audit workbench backed by an external LLM oracle",
    version=__version__,
)

SESSION_STORE = InMemorySessionStore()
ORACLE: Oracle = OracleClient()

install_openapi_api_key_security(app)


def _get_session(session_id: str) -> WorkbenchSession:
    session = SESSION_STORE.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _session_payload(session: WorkbenchSession) -> SessionPublicResponse:
    return SessionPublicResponse(
        session_id=session.id,
        proposal_text=session.proposal_text,
        references=session.references,
        report=session.report,
        transcript=session.transcript,
        has_simulation=session.simulation_code is not None,
        pending_actions=session.pending_actions,
    )


def _health_diagnostics() -> dict[str, Any]:
    oracle_available = openai_compatible_llm_available()
    oracle_info: dict[str, Any] = {"available": oracle_available, "model": config.oracle.model}
    if not oracle_available:
        oracle_info["reason"] = openai_compatible_missing_reason()
    return {
        "oracle": oracle_info,
        "session_store": {"mode": "inmem", "sessions": SESSION_STORE.count()},
        "auth": {
            "api_key_configured": bool(api_key_configured()),
            "read_auth_required": bool(read_auth_required()),
        },
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "version": __version__, "diagnostics": _health_diagnostics()}


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/demo")


@app.get("/demo", response_class=HTMLResponse, include_in_schema=False)
def demo_console():
    return HTMLResponse(render_demo_ui_html())


@app.post("/sessions", response_model=SessionPublicResponse, status_code=201)
def create_session(request: Request, req: Optional[CreateSessionRequest] = None):
    require_api_key_if_configured(request)
    seed_samples = req.seed_samples if req is not None else True
    session = SESSION_STORE.create(seed_samples=seed_samples)
    logger.info("Session created (session=%s seeded=%s)", session.id, seed_samples)
    return _session_payload(session)


@app.get("/sessions/{session_id}", response_model=SessionPublicResponse)
def get_session(session_id: str, request: Request):
    require_api_key_if_configured(request, for_read=True)
    return _session_payload(_get_session(session_id))


@app.delete("/sessions/{session_id}")
def end_session(session_id: str, request: Request):
    require_api_key_if_configured(request)
    if not SESSION_STORE.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted", "session_id": session_id}


@app.put("/sessions/{session_id}/proposal", response_model=SessionPublicResponse)
def update_proposal(session_id: str, req: ProposalUpdateRequest, request: Request):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    session.set_proposal_text(req.proposal_text)
    return _session_payload(session)


@app.post("/sessions/{session_id}/references", response_model=ReferenceListPublicResponse, status_code=201)
def add_reference(session_id: str, req: ReferenceCreateRequest, request: Request):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    reference = Reference(
        id=(req.id or "").strip() or f"local-{uuid.uuid4().hex}",
        title=req.title,
        authors=req.authors,
        year=req.year,
        content_snippet=req.content_snippet,
    )
    try:
        session.add_reference(reference)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ReferenceListPublicResponse(session_id=session.id, references=session.references)


@app.post(
    "/sessions/{session_id}/references/upload",
    response_model=ReferenceListPublicResponse,
    status_code=201,
)
async def upload_references(session_id: str, request: Request, files: List[UploadFile] = File(...)):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    max_bytes = config.workbench.max_upload_mb * 1024 * 1024

    new_references: List[Reference] = []
    for upload in files:
        filename = (upload.filename or "").strip()
        if not filename:
            raise HTTPException(status_code=400, detail="Missing uploaded file name")
        content = await upload.read()
        if not content:
            raise HTTPException(status_code=400, detail=f"Uploaded file is empty: {filename}")
        if len(content) > max_bytes:
            raise HTTPException(status_code=413, detail=f"Uploaded file exceeds {config.workbench.max_upload_mb}MB: {filename}")
        try:
            new_references.append(reference_from_upload(filename, content, upload.content_type or ""))
        except Exception as exc:
            raise HTTPException(status_code=400, detail=f"Could not read {filename}: {exc}") from exc

    for reference in new_references:
        session.add_reference(reference)
    return ReferenceListPublicResponse(session_id=session.id, references=session.references)


@app.delete("/sessions/{session_id}/references/{reference_id}", response_model=ReferenceListPublicResponse)
def remove_reference(session_id: str, reference_id: str, request: Request):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    if not session.remove_reference(reference_id):
        raise HTTPException(status_code=404, detail="Reference not found")
    return ReferenceListPublicResponse(session_id=session.id, references=session.references)


@app.post("/sessions/{session_id}/audit", response_model=AuditPublicResponse)
def audit_session(session_id: str, request: Request):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    proposal_text = session.proposal_text
    if not proposal_text.strip():
        raise HTTPException(status_code=400, detail="Proposal text is empty")

    request_id = session.begin_request("audit")
    report = run_audit(proposal_text, session.references, oracle=ORACLE)
    applied = session.set_report(report, request_id=request_id)
    return AuditPublicResponse(request_id=request_id, applied=applied, report=report)


@app.post("/sessions/{session_id}/chat", response_model=ChatPublicResponse)
def chat(session_id: str, req: ChatRequest, request: Request):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    message = req.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is empty")

    history = session.transcript
    request_id = session.begin_request("chat")
    session.append_message(ChatMessage(role="user", text=message))
    reply = send_chat_message(history, message, req.context, oracle=ORACLE)
    session.append_message(ChatMessage(role="model", text=reply), request_id=request_id)
    return ChatPublicResponse(request_id=request_id, reply=reply, transcript=session.transcript)


@app.post("/sessions/{session_id}/simulation", response_model=SimulationPublicResponse)
def simulate(session_id: str, request: Request, req: Optional[SimulationRequest] = None):
    require_api_key_if_configured(request)
    session = _get_session(session_id)
    user_goal = req.user_goal if req is not None else None

    request_id = session.begin_request("simulation")
    code = generate_simulation(
        session.proposal_text,
        session.references,
        session.report,
        user_goal,
        oracle=ORACLE,
    )
    applied = session.set_simulation_code(code, request_id=request_id)
    return SimulationPublicResponse(request_id=request_id, applied=applied, code=code)


@app.get("/sessions/{session_id}/simulation", response_class=HTMLResponse)
def get_simulation(session_id: str, request: Request):
    require_api_key_if_configured(request, for_read=True)
    code = _get_session(session_id).simulation_code
    if code is None:
        raise HTTPException(status_code=404, detail="No simulation generated yet")
    return HTMLResponse(code)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO)
    uvicorn.run(app, host=config.api_host, port=config.api_port, reload=config.debug)
