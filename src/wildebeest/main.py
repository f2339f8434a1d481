from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from wildebeest.api import admin
from wildebeest.api.error_handlers import register_error_handlers
from wildebeest.api.responses import json_response
from wildebeest.api.router import api_router
from wildebeest.clients.registry import ClientRegistry
from wildebeest.config import Settings, get_settings
from wildebeest.identity import StaticTokenIdentity
from wildebeest.instance.config_store import InstanceConfigStore
from wildebeest.notifications.subscriptions import SubscriptionManager
from wildebeest.storage.database import Database

logger = structlog.get_logger()

load_dotenv()


def init_app_state(application: FastAPI, settings: Settings) -> Database:
    """Open storage and attach the services to app.state."""
    db = Database(settings.db_path)
    config_store = InstanceConfigStore(db)
    application.state.db = db
    application.state.config_store = config_store
    application.state.client_registry = ClientRegistry(db, config_store)
    application.state.subscription_manager = SubscriptionManager(db)
    if getattr(application.state, "identity_lookup", None) is None:
        application.state.identity_lookup = StaticTokenIdentity()
    return db


@asynccontextmanager
async def lifespan(
    app: FastAPI,
) -> AsyncGenerator[None]:
    settings = get_settings()
    logger.info("starting_up", version=settings.app_version, db_path=str(settings.db_path))
    db = init_app_state(app, settings)
    if not app.state.config_store.vapid_public_key():
        logger.warning("vapid_keys_missing")

    yield

    db.close()
    logger.info("shutting_down")


class _PreflightMiddleware(BaseHTTPMiddleware):
    """Answer CORS preflight for every path."""

    async def dispatch(self, request, call_next):  # type: ignore[no-untyped-def]
        if request.method == "OPTIONS":
            return json_response({})
        return await call_next(request)


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    application.add_middleware(_PreflightMiddleware)
    register_error_handlers(application)
    application.include_router(api_router, prefix="/api")
    application.include_router(
        admin.router,
        prefix="/start-instance",
        tags=["admin"],
    )
    return application


app = create_app()


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
