"""Administrative bootstrap: configure the instance and its VAPID keys."""

import secrets

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from wildebeest.api.body import read_body
from wildebeest.api.responses import json_response
from wildebeest.config import get_settings
from wildebeest.errors import Unauthorized, ValidationError
from wildebeest.identity import bearer_token
from wildebeest.instance.config_store import InstanceConfigStore
from wildebeest.instance.models import VapidKeysRequest


def require_admin(request: Request) -> None:
    """Reject callers without the configured admin token."""
    expected = get_settings().admin_token
    token = bearer_token(request)
    if not expected or token is None or not secrets.compare_digest(token, expected):
        raise Unauthorized("admin token required")


router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("")
async def start_instance(request: Request) -> JSONResponse:
    """Configure title, uri, email and description."""
    store: InstanceConfigStore = request.app.state.config_store
    body = await read_body(request)
    config = store.configure(body)
    return json_response(config.model_dump(exclude={"vapid_private_key"}))


@router.post("/vapid-keys")
async def generate_vapid_keys(request: Request) -> JSONResponse:
    """Generate the VAPID keypair; an existing one is kept unless regenerate is set."""
    store: InstanceConfigStore = request.app.state.config_store
    raw = await request.body()
    body = await read_body(request) if raw.strip() else {}
    try:
        opts = VapidKeysRequest.model_validate(body)
    except pydantic.ValidationError as e:
        raise ValidationError("regenerate must be a boolean", field="regenerate") from e
    public_key = store.generate_vapid_keys(regenerate=opts.regenerate)
    return json_response({"vapid_key": public_key})
