"""Client registry: issues and looks up application credentials."""

from __future__ import annotations

import secrets
import time
import uuid
from collections.abc import Mapping
from typing import Any

import pydantic
import structlog

from wildebeest.clients.models import AppRegistration, Client, RegisteredApp
from wildebeest.errors import Conflict, NotFound, ValidationError
from wildebeest.instance.config_store import InstanceConfigStore
from wildebeest.storage.database import Database

logger = structlog.get_logger()

# 64 random bytes, 512 bits of entropy
SECRET_BYTES = 64

_INSERT_ATTEMPTS = 3


def generate_client_secret() -> str:
    """Opaque URL-safe client secret."""
    return secrets.token_urlsafe(SECRET_BYTES)


class ClientRegistry:
    """Creates immutable client records and serves lookups."""

    def __init__(self, db: Database, config: InstanceConfigStore) -> None:
        self._db = db
        self._config = config

    def register_client(self, request: Mapping[str, Any]) -> RegisteredApp:
        """Register a new client application.

        Args:
            request: Fields redirect_uris, client_name, scopes and
                optionally website.

        Returns:
            RegisteredApp carrying the new credentials and the
            instance VAPID public key.

        Raises:
            ValidationError: If a required field is missing.
        """
        try:
            reg = AppRegistration.model_validate(dict(request))
        except pydantic.ValidationError as e:
            field = ".".join(str(p) for p in e.errors()[0]["loc"])
            raise ValidationError(f"missing or invalid field: {field}", field=field) from e

        client = self._insert(reg)
        logger.info("client_registered", client_id=client.id, name=client.name)
        return RegisteredApp(
            name=client.name,
            website=client.website,
            redirect_uri=client.redirect_uri,
            client_id=client.id,
            client_secret=client.secret,
            vapid_key=self._config.vapid_public_key(),
        )

    def _insert(self, reg: AppRegistration) -> Client:
        for attempt in range(_INSERT_ATTEMPTS):
            client = Client(
                id=str(uuid.uuid4()),
                name=reg.client_name,
                website=reg.website,
                redirect_uri=reg.redirect_uris,
                scopes=reg.scopes,
                secret=generate_client_secret(),
            )
            try:
                self._db.execute(
                    "INSERT INTO clients"
                    " (id, name, website, redirect_uri, scopes, secret, created_at)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        client.id,
                        client.name,
                        client.website,
                        client.redirect_uri,
                        client.scopes,
                        client.secret,
                        time.time(),
                    ),
                )
            except Conflict:
                logger.debug("client_id_collision", attempt=attempt)
                continue
            return client
        raise Conflict("could not allocate a unique client id")

    def get_client(self, client_id: str) -> Client:
        """Look up a client by id.

        Raises:
            NotFound: If no client has this id.
        """
        row = self._db.fetch_one(
            "SELECT id, name, website, redirect_uri, scopes, secret"
            " FROM clients WHERE id = ?",
            (client_id,),
        )
        if row is None:
            raise NotFound("client", client_id)
        return Client(**dict(row))
