"""Explicit service wiring.

The entry point builds the storage handle and calls ``configure_services``;
nothing below reaches for a global connection.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pymongo.database import Database

from crm.actions.executor import ActionExecutor
from crm.design.repository import InMemoryModelDefRepository, MongoModelDefRepository
from crm.design.service import ModelDesignService, set_model_design_service
from crm.event_store.repository import InMemoryEventRepository, MongoEventRepository
from crm.event_store.service import EventStoreService, set_event_store_service
from crm.llm.gemini import GeminiTextGenerator, TextGenerator
from crm.llm.imagen import ImageGenerator, ImagenImageGenerator
from crm.operator.service import ConversationTurnProcessor, set_turn_processor
from crm.records.repository import InMemoryRecordRepository, MongoRecordRepository
from crm.records.service import RecordService, set_record_service
from crm.runtime.repository import InMemoryMetaRepository, MongoMetaRepository
from crm.runtime.service import RuntimeBootstrapService, set_runtime_service
from crm.sessions.repository import InMemorySessionRepository, MongoSessionRepository
from crm.sessions.service import SessionService, set_session_service
from crm.visuals.resolver import VisualResolver
from crm.visuals.youtube import VideoSearch, YouTubeSearchClient

logger = logging.getLogger(__name__)


@dataclass
class Services:
    events: EventStoreService
    design: ModelDesignService
    records: RecordService
    runtime: RuntimeBootstrapService
    sessions: SessionService
    processor: ConversationTurnProcessor


def build_services(
    db: Optional[Database] = None,
    generator: Optional[TextGenerator] = None,
    image_generator: Optional[ImageGenerator] = None,
    video_search: Optional[VideoSearch] = None,
) -> Services:
    """In-memory repositories when ``db`` is None, MongoDB repositories otherwise."""
    if db is None:
        events = EventStoreService(repo=InMemoryEventRepository())
        design = ModelDesignService(repo=InMemoryModelDefRepository(), events=events)
        records = RecordService(repo=InMemoryRecordRepository(), design=design, events=events)
        runtime = RuntimeBootstrapService(repo=InMemoryMetaRepository(), design=design)
        sessions = SessionService(repo=InMemorySessionRepository())
    else:
        events = EventStoreService(repo=MongoEventRepository(db))
        design = ModelDesignService(repo=MongoModelDefRepository(db), events=events)
        records = RecordService(repo=MongoRecordRepository(db), design=design, events=events)
        runtime = RuntimeBootstrapService(repo=MongoMetaRepository(db), design=design)
        sessions = SessionService(repo=MongoSessionRepository(db))

    processor = ConversationTurnProcessor(
        sessions=sessions,
        generator=generator or GeminiTextGenerator(),
        resolver=VisualResolver(
            image_generator=image_generator or ImagenImageGenerator(),
            video_search=video_search or YouTubeSearchClient(),
        ),
        executor=ActionExecutor(design=design, records=records),
    )
    return Services(
        events=events,
        design=design,
        records=records,
        runtime=runtime,
        sessions=sessions,
        processor=processor,
    )


def install_services(services: Services) -> Services:
    set_event_store_service(services.events)
    set_model_design_service(services.design)
    set_record_service(services.records)
    set_runtime_service(services.runtime)
    set_session_service(services.sessions)
    set_turn_processor(services.processor)
    return services


def configure_services(
    db: Optional[Database] = None,
    generator: Optional[TextGenerator] = None,
    image_generator: Optional[ImageGenerator] = None,
    video_search: Optional[VideoSearch] = None,
) -> Services:
    services = build_services(db, generator=generator, image_generator=image_generator, video_search=video_search)
    logger.info("Configured services with %s store", "mongo" if db is not None else "in-memory")
    return install_services(services)
