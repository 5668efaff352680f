"""Audit events for every successful model/record write."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from crm.common.identity import RequestContext
from crm.event_store.models import RECORD_CREATED, Event
from crm.event_store.repository import EventRepository, InMemoryEventRepository
from crm.store.mongo import to_jsonable

logger = logging.getLogger(__name__)


class EventStoreService:
    def __init__(self, repo: Optional[EventRepository] = None) -> None:
        self.repo = repo or InMemoryEventRepository()

    def record_created(self, ctx: RequestContext, model: str, after: Dict[str, Any]) -> Event:
        event = Event(
            tenant_id=ctx.tenant_id,
            type=RECORD_CREATED,
            model=model,
            actor=ctx.actor_id,
            after=to_jsonable(after),
        )
        self.repo.append(event)
        logger.info("record.created model=%s tenant=%s", model, ctx.tenant_id)
        return event

    def list_events(self, ctx: RequestContext, event_type: Optional[str] = None, limit: int = 100) -> List[Event]:
        return self.repo.list(ctx.tenant_id, event_type=event_type, limit=limit)


_default_service: Optional[EventStoreService] = None


def get_event_store_service() -> EventStoreService:
    global _default_service
    if _default_service is None:
        _default_service = EventStoreService()
    return _default_service


def set_event_store_service(service: EventStoreService) -> None:
    global _default_service
    _default_service = service
