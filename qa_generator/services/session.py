from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Optional

from ..errors import GenerationInProgress
from ..schemas import GenerationRequest, GenerationResult
from ..settings import settings

@dataclass(frozen=True)
class SessionSnapshot:
    request: Optional[GenerationRequest] = None
    result: Optional[GenerationResult] = None
    error: Optional[str] = None
    is_generating: bool = False

EMPTY = SessionSnapshot()

class SessionStore:
    """
    Latest request/result per UI session. Snapshots are immutable and swapped
    wholesale, so a reader never sees a half-updated session.

    Holds at most `max_sessions` entries; the least recently used idle session
    is evicted first. In-flight sessions are never evicted.
    """

    def __init__(self, max_sessions: int | None = None):
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self._sessions: OrderedDict[str, SessionSnapshot] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> SessionSnapshot:
        if session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return self._sessions[session_id]
        return EMPTY

    def _put(self, session_id: str, snap: SessionSnapshot) -> SessionSnapshot:
        self._sessions[session_id] = snap
        self._sessions.move_to_end(session_id)
        if len(self._sessions) > self.max_sessions:
            for sid in list(self._sessions):
                if len(self._sessions) <= self.max_sessions:
                    break
                if sid != session_id and not self._sessions[sid].is_generating:
                    del self._sessions[sid]
        return snap

    def begin(self, session_id: str, request: GenerationRequest) -> SessionSnapshot:
        if self.get(session_id).is_generating:
            raise GenerationInProgress("A generation request is already running for this session.")
        return self._put(session_id, SessionSnapshot(request=request, is_generating=True))

    def complete(self, session_id: str, result: GenerationResult) -> SessionSnapshot:
        return self._put(session_id, replace(self.get(session_id), result=result, error=None, is_generating=False))

    def fail(self, session_id: str, message: str) -> SessionSnapshot:
        return self._put(session_id, replace(self.get(session_id), result=None, error=message, is_generating=False))

    def clear(self) -> None:
        self._sessions.clear()

store = SessionStore()
