"""Instance metadata endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from wildebeest.api.responses import json_response
from wildebeest.config import get_settings
from wildebeest.instance.config_store import InstanceConfigStore

router = APIRouter()


def _serving_domain(request: Request) -> str:
    return get_settings().domain or request.url.hostname or ""


@router.get("/v1/instance")
async def instance_v1(request: Request) -> JSONResponse:
    """Mastodon v1 instance information."""
    store: InstanceConfigStore = request.app.state.config_store
    config = store.get_config()
    return json_response(
        {
            "uri": _serving_domain(request),
            "title": config.title,
            "description": config.description,
            "short_description": config.short_description,
            "email": config.email,
            "version": get_settings().app_version,
            "rules": [],
        }
    )


@router.get("/v2/instance")
async def instance_v2(request: Request) -> JSONResponse:
    """Mastodon v2 instance information."""
    store: InstanceConfigStore = request.app.state.config_store
    config = store.get_config()
    return json_response(
        {
            "domain": _serving_domain(request),
            "title": config.title,
            "version": get_settings().app_version,
            "description": config.description,
            "contact": {"email": config.email},
            "rules": [],
        }
    )
