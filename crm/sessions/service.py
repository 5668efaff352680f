from __future__ import annotations

import logging
from typing import List, Optional

from crm.common.error_envelope import CrmError
from crm.operator.prompts import SYSTEM_PROMPT
from crm.sessions.models import Message, MessageRole, Session, SessionKey
from crm.sessions.repository import InMemorySessionRepository, SessionRepository

logger = logging.getLogger(__name__)

CONTEXT_WINDOW = 16


class SessionNotFound(CrmError):
    status_code = 500
    error_code = "ai_session.not_found"
    resource_kind = "ai_session"

    def __init__(self, key: SessionKey) -> None:
        super().__init__(
            f"AI session {key.session_id} not found for tenant={key.tenant_id} user={key.user_id}",
            details={"session_id": key.session_id},
        )


class SessionService:
    def __init__(self, repo: Optional[SessionRepository] = None, seed_prompt: str = SYSTEM_PROMPT) -> None:
        self.repo = repo or InMemorySessionRepository()
        self._seed_prompt = seed_prompt

    def ensure(self, key: SessionKey) -> None:
        """Create the session with its seeded system message unless it already exists."""
        self.repo.ensure(key, Message(role=MessageRole.system, text=self._seed_prompt))

    def append_and_fetch(self, key: SessionKey, message: Message) -> Session:
        session = self.repo.append_and_fetch(key, message)
        if session is None:
            logger.error("Session %s missing after ensure for tenant=%s", key.session_id, key.tenant_id)
            raise SessionNotFound(key)
        return session

    def append(self, key: SessionKey, message: Message) -> None:
        self.append_and_fetch(key, message)

    def get(self, key: SessionKey) -> Session:
        session = self.repo.get(key)
        if session is None:
            raise SessionNotFound(key)
        return session

    @staticmethod
    def recent_context(session: Session, n: int = CONTEXT_WINDOW) -> List[Message]:
        """Last ``n`` messages in conversation order; older ones stay stored."""
        if n <= 0:
            return []
        return list(session.messages[-n:])


_default_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    global _default_service
    if _default_service is None:
        _default_service = SessionService()
    return _default_service


def set_session_service(service: SessionService) -> None:
    global _default_service
    _default_service = service
