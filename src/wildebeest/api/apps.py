"""Client application registration (creation only)."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from wildebeest.api.body import read_body
from wildebeest.api.responses import json_response
from wildebeest.clients.registry import ClientRegistry
from wildebeest.errors import MethodNotAllowed

router = APIRouter()


@router.post("")
async def register_app(request: Request) -> JSONResponse:
    """Register a client and return its credentials."""
    registry: ClientRegistry = request.app.state.client_registry
    body = await read_body(request)
    app = registry.register_client(body)
    return json_response(app.model_dump())


@router.api_route("", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
async def reject_non_creation(request: Request) -> JSONResponse:
    """Apps can only be created."""
    raise MethodNotAllowed(request.method)
