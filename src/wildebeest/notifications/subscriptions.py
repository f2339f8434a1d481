"""SQLite-backed push subscription manager."""

from __future__ import annotations

import json
import sqlite3
import time
from collections.abc import Mapping
from typing import Any

import pydantic
import structlog

from wildebeest.clients.models import Client
from wildebeest.errors import NotFound, ValidationError
from wildebeest.identity import Actor
from wildebeest.notifications.models import (
    PushKeys,
    Subscription,
    SubscriptionRequest,
)
from wildebeest.storage.database import Database

logger = structlog.get_logger()

_COLUMNS = "id, actor_id, client_id, endpoint, key_p256dh, key_auth, alerts, policy"


def _to_subscription(row: sqlite3.Row) -> Subscription:
    return Subscription(
        id=row["id"],
        actor_id=row["actor_id"],
        client_id=row["client_id"],
        endpoint=row["endpoint"],
        keys=PushKeys(p256dh=row["key_p256dh"], auth=row["key_auth"]),
        alerts=json.loads(row["alerts"]),
        policy=row["policy"],
    )


class SubscriptionManager:
    """At most one push subscription per (actor, client) pair.

    Creation and replacement share one atomic upsert keyed by the
    UNIQUE (actor_id, client_id) constraint, so concurrent creates for
    the same pair can never leave two rows behind.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def create_or_replace(
        self,
        actor: Actor,
        client: Client,
        payload: Mapping[str, Any],
    ) -> Subscription:
        """Insert the pair's subscription, or overwrite it in place.

        An existing row keeps its id; endpoint, keys, alerts and
        policy are replaced.

        Raises:
            ValidationError: If the payload is malformed. Nothing is
                written in that case.
        """
        try:
            req = SubscriptionRequest.model_validate(dict(payload))
        except pydantic.ValidationError as e:
            field = ".".join(str(p) for p in e.errors()[0]["loc"])
            raise ValidationError(f"missing or invalid field: {field}", field=field) from e

        now = time.time()
        row = self._db.execute_returning(
            "INSERT INTO subscriptions"
            " (actor_id, client_id, endpoint, key_p256dh, key_auth,"
            "  alerts, policy, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"
            " ON CONFLICT (actor_id, client_id) DO UPDATE SET"
            "   endpoint = excluded.endpoint,"
            "   key_p256dh = excluded.key_p256dh,"
            "   key_auth = excluded.key_auth,"
            "   alerts = excluded.alerts,"
            "   policy = excluded.policy,"
            "   updated_at = excluded.updated_at"
            f" RETURNING {_COLUMNS}",
            (
                actor.id,
                client.id,
                req.subscription.endpoint,
                req.subscription.keys.p256dh,
                req.subscription.keys.auth,
                json.dumps(req.data.alerts),
                req.data.policy.value,
                now,
                now,
            ),
        )
        sub = _to_subscription(row)
        logger.info(
            "subscription_upserted",
            subscription_id=sub.id,
            actor_id=actor.id,
            client_id=client.id,
        )
        return sub

    def get(self, actor: Actor, client: Client) -> Subscription:
        """The pair's subscription.

        Raises:
            NotFound: If the pair has no subscription.
        """
        sub = self._find(actor.id, client.id)
        if sub is None:
            logger.debug("subscription_absent", actor_id=actor.id, client_id=client.id)
            raise NotFound("subscription")
        return sub

    def delete(self, actor: Actor, client: Client) -> None:
        """Remove the pair's subscription.

        Raises:
            NotFound: If the pair has no subscription.
        """
        removed = self._db.execute(
            "DELETE FROM subscriptions WHERE actor_id = ? AND client_id = ?",
            (actor.id, client.id),
        )
        if not removed:
            raise NotFound("subscription")
        logger.info("subscription_deleted", actor_id=actor.id, client_id=client.id)

    def count(self) -> int:
        """Total stored subscriptions."""
        row = self._db.fetch_one("SELECT count(*) AS count FROM subscriptions")
        return row["count"] if row else 0

    def _find(self, actor_id: str, client_id: str) -> Subscription | None:
        row = self._db.fetch_one(
            f"SELECT {_COLUMNS} FROM subscriptions WHERE actor_id = ? AND client_id = ?",
            (actor_id, client_id),
        )
        return _to_subscription(row) if row is not None else None
