from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import applications, auth, jobs, messages, notifications, profiles, ratings, realtime
from app.config import Settings, settings as default_settings
from app.deps import build_storage_provider
from app.errors import register_exception_handlers
from app.logging_config import configure_logging, get_logger
from app.services.connections import ConnectionRegistry


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # No filesystem work before startup.
    app.state.open_storage = build_storage_provider(app.state.settings)
    logger.info(
        "app_started",
        app_name=app.state.settings.app_name,
        environment=app.state.settings.environment,
        storage_backend=app.state.settings.storage_backend,
    )
    yield
    logger.info("app_stopped", open_channels=len(app.state.registry.connected_users()))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = ConnectionRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
    app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
    app.include_router(ratings.router, prefix="/api/ratings", tags=["ratings"])
    app.include_router(messages.router, prefix="/api/messages", tags=["messages"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
    app.include_router(profiles.router, prefix="/api", tags=["profiles"])
    app.include_router(realtime.router, tags=["realtime"])
    return app


app = create_app()
