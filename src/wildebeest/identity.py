"""Boundary to the external identity subsystem.

Actors are created and authenticated elsewhere. This module only defines
what a lookup returns and how a request's bearer token reaches it.
"""

from dataclasses import dataclass
from typing import Protocol

from fastapi import Request

from wildebeest.errors import Unauthorized


@dataclass(frozen=True)
class Actor:
    """An authenticated actor, known here only by its id."""

    id: str


@dataclass(frozen=True)
class Identity:
    """Who is calling, and through which client."""

    actor: Actor
    client_id: str


class IdentityLookup(Protocol):
    def __call__(self, token: str) -> Identity | None: ...


class StaticTokenIdentity:
    """In-memory token table filled by the embedding system."""

    def __init__(self) -> None:
        self._tokens: dict[str, Identity] = {}

    def grant(self, token: str, identity: Identity) -> None:
        self._tokens[token] = identity

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    def __call__(self, token: str) -> Identity | None:
        return self._tokens.get(token)


def bearer_token(request: Request) -> str | None:
    """Token from an ``Authorization: Bearer`` header."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_identity(request: Request) -> Identity:
    """FastAPI dependency resolving the caller.

    Raises:
        Unauthorized: If the token is absent or unknown.
    """
    token = bearer_token(request)
    if token is None:
        raise Unauthorized()
    lookup: IdentityLookup = request.app.state.identity_lookup
    identity = lookup(token)
    if identity is None:
        raise Unauthorized()
    return identity
