"""Web Push subscription endpoints.

All handlers depend on the caller's identity, so none of them is cached.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from wildebeest.api.body import read_body
from wildebeest.api.responses import json_response
from wildebeest.clients.models import Client
from wildebeest.clients.registry import ClientRegistry
from wildebeest.identity import Identity, require_identity
from wildebeest.instance.config_store import InstanceConfigStore
from wildebeest.notifications.models import Subscription, SubscriptionView
from wildebeest.notifications.subscriptions import SubscriptionManager

router = APIRouter()


def _client(request: Request, identity: Identity) -> Client:
    registry: ClientRegistry = request.app.state.client_registry
    return registry.get_client(identity.client_id)


def _render(request: Request, sub: Subscription) -> JSONResponse:
    store: InstanceConfigStore = request.app.state.config_store
    view = SubscriptionView(
        id=sub.id,
        endpoint=sub.endpoint,
        keys=sub.keys,
        alerts=sub.alerts,
        policy=sub.policy,
        server_key=store.vapid_public_key(),
    )
    return json_response(view.model_dump(mode="json"))


@router.get("")
async def get_subscription(
    request: Request,
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    """Return the caller's subscription for this client."""
    manager: SubscriptionManager = request.app.state.subscription_manager
    sub = manager.get(identity.actor, _client(request, identity))
    return _render(request, sub)


@router.post("")
async def create_subscription(
    request: Request,
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    """Create the caller's subscription, replacing any existing one."""
    manager: SubscriptionManager = request.app.state.subscription_manager
    client = _client(request, identity)
    body = await read_body(request)
    sub = manager.create_or_replace(identity.actor, client, body)
    return _render(request, sub)


@router.delete("")
async def delete_subscription(
    request: Request,
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    """Remove the caller's subscription for this client."""
    manager: SubscriptionManager = request.app.state.subscription_manager
    manager.delete(identity.actor, _client(request, identity))
    return json_response({})
