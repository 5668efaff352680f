"""One operator chat turn, end to end.

ensure session -> append user message -> generate from the last 16 messages ->
extract directives -> resolve visual / execute action -> append reply.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from crm.actions.executor import ActionExecutor, ActionResult
from crm.common.error_envelope import CrmError
from crm.common.identity import RequestContext
from crm.directives.extraction import extract_directives
from crm.llm.gemini import ContentTurn, GeminiTextGenerator, GenerationError, TextGenerator
from crm.operator.prompts import FALLBACK_REPLY
from crm.sessions.models import DEFAULT_SESSION_ID, Message, MessageRole, Session, SessionKey
from crm.sessions.service import CONTEXT_WINDOW, SessionService, get_session_service
from crm.visuals.models import VisualPayload
from crm.visuals.resolver import VisualResolver

logger = logging.getLogger(__name__)


class MissingText(CrmError):
    status_code = 400
    error_code = "ai.missing_text"
    resource_kind = "ai_chat"

    def __init__(self) -> None:
        super().__init__("Missing text")


@dataclass
class TurnResult:
    reply_text: str
    visual: Optional[VisualPayload] = None
    action: Optional[ActionResult] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "replyText": self.reply_text,
            "visual": self.visual.model_dump() if self.visual else None,
            "action": self.action.to_payload() if self.action else None,
        }


def to_generation_contents(history: List[Message]) -> List[ContentTurn]:
    """Stored ``model`` turns stay ``model``; system and user turns are both sent as ``user``."""
    return [
        ContentTurn(role="model" if m.role == MessageRole.model else "user", text=m.text)
        for m in history
    ]


class ConversationTurnProcessor:
    def __init__(
        self,
        sessions: Optional[SessionService] = None,
        generator: Optional[TextGenerator] = None,
        resolver: Optional[VisualResolver] = None,
        executor: Optional[ActionExecutor] = None,
        context_window: int = CONTEXT_WINDOW,
    ) -> None:
        self.sessions = sessions or get_session_service()
        self.generator = generator or GeminiTextGenerator()
        self.resolver = resolver or VisualResolver()
        self.executor = executor or ActionExecutor()
        self._context_window = context_window

    def process_turn(self, ctx: RequestContext, text: Optional[str], session_id: Optional[str] = None) -> TurnResult:
        if not text or not text.strip():
            raise MissingText()
        key = SessionKey(ctx.tenant_id, ctx.user_id, session_id or DEFAULT_SESSION_ID)

        self.sessions.ensure(key)
        session = self.sessions.append_and_fetch(key, Message(role=MessageRole.user, text=text))
        history = self.sessions.recent_context(session, self._context_window)

        raw = self._generate(to_generation_contents(history))
        extracted = extract_directives(raw.strip() or FALLBACK_REPLY)

        visual = self.resolver.resolve(extracted.visual)
        outcome = self.executor.execute(ctx, extracted.action)
        reply_text = extracted.reply_text + outcome.annotation

        self.sessions.append(key, Message(role=MessageRole.model, text=reply_text))
        return TurnResult(reply_text=reply_text, visual=visual, action=outcome.result)

    def _generate(self, contents: List[ContentTurn]) -> str:
        try:
            return self.generator.generate(contents) or ""
        except Exception as exc:
            logger.exception("Generation backend failed")
            raise GenerationError(f"Generation failed: {exc}") from exc

    def ping(self) -> Optional[str]:
        try:
            text = self.generator.generate([ContentTurn(role="user", text="ping")])
        except Exception as exc:
            logger.exception("Generation ping failed")
            raise GenerationError(f"Generation failed: {exc}") from exc
        return text or None

    def get_session(self, ctx: RequestContext, session_id: Optional[str] = None) -> Session:
        return self.sessions.get(SessionKey(ctx.tenant_id, ctx.user_id, session_id or DEFAULT_SESSION_ID))


_default_processor: Optional[ConversationTurnProcessor] = None


def get_turn_processor() -> ConversationTurnProcessor:
    global _default_processor
    if _default_processor is None:
        _default_processor = ConversationTurnProcessor()
    return _default_processor


def set_turn_processor(processor: ConversationTurnProcessor) -> None:
    global _default_processor
    _default_processor = processor
