"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adminkit.api.entities import create_entity_router
from adminkit.api.errors import register_exception_handlers
from adminkit.api.metadata import create_metadata_router
from adminkit.bootstrap import build_registry
from adminkit.config import AppConfig
from adminkit.persistence import DatabaseConfig, StorageClient, create_client
from adminkit.registry import EntityRegistry

logger = logging.getLogger(__name__)


def _base_path() -> Path:
    """Project root, whether started from the repo root or from backend/."""
    cwd = Path.cwd()
    return cwd.parent if cwd.name == "backend" else cwd


def create_app(
    registry: EntityRegistry | None = None,
    client: StorageClient | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build the API for a registry.

    Args:
        registry: Entities to serve; defaults to build_registry() with the
            configured metadata path
        client: Storage client; when omitted one is created from
            DatabaseConfig.from_env() on startup and closed on shutdown
        config: App settings; defaults to AppConfig.from_env()
    """
    if config is None:
        config = AppConfig.from_env()
    if registry is None:
        registry = build_registry(config.metadata_path)

    services = {
        name: registry.generate_service(name) for name in registry.get_entity_names()
    }
    if client is not None:
        for service in services.values():
            service.bind(client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.client is None:
            db_config = DatabaseConfig.from_env(_base_path())
            owned = create_client(db_config, registry.get_all_entities())
            for service in services.values():
                service.bind(owned)
            app.state.client = owned
            logger.info("Storage ready at %s", db_config.url)

        yield

        if owned is not None:
            owned.close()

    app = FastAPI(title="AdminKit API", lifespan=lifespan)
    app.state.registry = registry
    app.state.client = client
    app.state.config = config
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(create_metadata_router(lambda: app.state.registry))
    for name in registry.get_entity_names():
        app.include_router(
            create_entity_router(
                name,
                lambda name=name: app.state.services.get(name),
                registry.get_entity(name).actions,
            )
        )

    return app


app = create_app()
