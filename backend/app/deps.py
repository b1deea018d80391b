from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager

from fastapi import Depends, Request

from app.config import Settings
from app.database import build_engine, build_session_factory, create_schema
from app.services.applications import ApplicationService
from app.services.connections import ConnectionRegistry
from app.services.jobs import JobService
from app.services.matcher import JobMatcher
from app.services.messaging import MessageRouter
from app.services.profiles import ProfileService
from app.services.ratings import RatingService
from app.storage import MemoryStorage, SqlStorage, Storage


StorageProvider = Callable[[], AbstractContextManager[Storage]]


def build_storage_provider(settings: Settings) -> StorageProvider:
    """Return a context-manager factory handing out a Storage per unit of work."""
    if settings.storage_backend == "memory":
        memory = MemoryStorage()

        @contextmanager
        def open_memory() -> Iterator[Storage]:
            yield memory

        return open_memory

    if settings.storage_backend != "sql":
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    settings.ensure_directories()
    engine = build_engine(settings.database_url)
    create_schema(engine)
    session_factory = build_session_factory(engine)

    @contextmanager
    def open_sql() -> Iterator[Storage]:
        db = session_factory()
        try:
            yield SqlStorage(db)
        finally:
            db.close()

    return open_sql


def get_storage(request: Request) -> Iterator[Storage]:
    with request.app.state.open_storage() as storage:
        yield storage


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_job_service(storage: Storage = Depends(get_storage)) -> JobService:
    return JobService(storage)


def get_matcher(storage: Storage = Depends(get_storage)) -> JobMatcher:
    return JobMatcher(storage)


def get_application_service(storage: Storage = Depends(get_storage)) -> ApplicationService:
    return ApplicationService(storage)


def get_rating_service(storage: Storage = Depends(get_storage)) -> RatingService:
    return RatingService(storage)


def get_profile_service(storage: Storage = Depends(get_storage)) -> ProfileService:
    return ProfileService(storage)


def get_message_router(
    storage: Storage = Depends(get_storage),
    registry: ConnectionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> MessageRouter:
    return MessageRouter(storage, registry, max_message_length=settings.max_message_length)
