from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, Iterable, List, Literal, Optional, Set

from grantaxiom.core.models import AnalysisReport, ChatMessage, Reference
from grantaxiom.core.samples import MOCK_PROPOSAL, MOCK_REFERENCES

logger = logging.getLogger(__name__)

Action = Literal["audit", "chat", "simulation"]
ACTIONS: tuple[Action, ...] = ("audit", "chat", "simulation")

ASSISTANT_GREETING = (
    "Hello! I am GrantAxiom. I can help refine your proposal or search for the latest literature."
)


class WorkbenchSession:
    """Application state for one user session.

    State changes only through the transition methods below. Each action keeps a
    monotonically increasing request id; a result carrying an id that is no longer
    the latest for its action is discarded instead of overwriting newer state.
    """

    def __init__(
        self,
        session_id: str,
        *,
        proposal_text: str = "",
        references: Optional[Iterable[Reference]] = None,
    ) -> None:
        self.id = session_id
        self._proposal_text = proposal_text
        self._references: List[Reference] = list(references or [])
        self._report: Optional[AnalysisReport] = None
        self._transcript: List[ChatMessage] = [ChatMessage(role="model", text=ASSISTANT_GREETING)]
        self._simulation_code: Optional[str] = None
        self._latest: Dict[str, int] = {action: 0 for action in ACTIONS}
        self._pending: Set[str] = set()
        self._lock = threading.Lock()

    # ---------------- Reads ----------------

    @property
    def proposal_text(self) -> str:
        with self._lock:
            return self._proposal_text

    @property
    def references(self) -> List[Reference]:
        with self._lock:
            return list(self._references)

    @property
    def report(self) -> Optional[AnalysisReport]:
        with self._lock:
            return self._report

    @property
    def transcript(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._transcript)

    @property
    def simulation_code(self) -> Optional[str]:
        with self._lock:
            return self._simulation_code

    @property
    def pending_actions(self) -> List[str]:
        with self._lock:
            return sorted(self._pending)

    # ---------------- Context edits ----------------

    def set_proposal_text(self, text: str) -> None:
        with self._lock:
            self._proposal_text = text

    def add_reference(self, reference: Reference) -> None:
        with self._lock:
            if any(r.id == reference.id for r in self._references):
                raise ValueError(f"Duplicate reference id: {reference.id}")
            self._references.append(reference)

    def remove_reference(self, reference_id: str) -> bool:
        with self._lock:
            before = len(self._references)
            self._references = [r for r in self._references if r.id != reference_id]
            return len(self._references) != before

    # ---------------- Request sequencing ----------------

    def begin_request(self, action: Action) -> int:
        if action not in ACTIONS:
            raise ValueError(f"Unsupported action: {action}")
        with self._lock:
            self._latest[action] += 1
            self._pending.add(action)
            return self._latest[action]

    def _settle(self, action: Action, request_id: Optional[int]) -> bool:
        # Caller holds the lock.
        if request_id is None:
            return True
        if request_id != self._latest[action]:
            logger.info(
                "Discarding stale %s result (session=%s request=%s latest=%s)",
                action,
                self.id,
                request_id,
                self._latest[action],
            )
            return False
        self._pending.discard(action)
        return True

    # ---------------- Result transitions ----------------

    def set_report(self, report: AnalysisReport, *, request_id: Optional[int] = None) -> bool:
        with self._lock:
            if not self._settle("audit", request_id):
                return False
            self._report = report
            return True

    def append_message(self, message: ChatMessage, *, request_id: Optional[int] = None) -> None:
        # The transcript is append-only; replies are kept even when a newer chat request exists.
        with self._lock:
            self._transcript.append(message)
            if request_id is not None and request_id == self._latest["chat"]:
                self._pending.discard("chat")

    def set_simulation_code(self, code: str, *, request_id: Optional[int] = None) -> bool:
        with self._lock:
            if not self._settle("simulation", request_id):
                return False
            self._simulation_code = code
            return True


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, WorkbenchSession] = {}
        self._lock = threading.Lock()

    def create(self, *, seed_samples: bool = True) -> WorkbenchSession:
        session = WorkbenchSession(
            uuid.uuid4().hex,
            proposal_text=MOCK_PROPOSAL if seed_samples else "",
            references=MOCK_REFERENCES if seed_samples else None,
        )
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[WorkbenchSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
