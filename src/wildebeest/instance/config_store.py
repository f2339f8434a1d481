"""Instance configuration: a single persisted row behind a store handle."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pydantic
import structlog

from wildebeest.errors import ConfigError, NotConfigured
from wildebeest.instance.models import InstanceConfig, InstanceSettings
from wildebeest.instance.vapid import generate_vapid_keypair
from wildebeest.storage.database import Database

logger = structlog.get_logger()


class InstanceConfigStore:
    """Holds the instance configuration and its VAPID keypair.

    The persisted row is the only state. Every read is a single SELECT
    of the committed row, and every write decides from a row read inside
    its own transaction, so several stores (or processes) sharing one
    database agree on what exists.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def _load(self) -> dict[str, Any]:
        row = self._db.fetch_one("SELECT * FROM instance_config WHERE id = 1")
        return dict(row) if row is not None else {}

    def configure(self, settings: Mapping[str, Any]) -> InstanceConfig:
        """Persist instance settings, keeping any existing keypair.

        Raises:
            ConfigError: If title, uri, email or description is missing.
        """
        try:
            parsed = InstanceSettings.model_validate(dict(settings))
        except pydantic.ValidationError as e:
            field = ".".join(str(p) for p in e.errors()[0]["loc"])
            raise ConfigError(f"missing or invalid setting: {field}", field=field) from e

        with self._db.transaction():
            self._db.execute(
                "INSERT INTO instance_config"
                " (id, title, uri, email, description, short_description)"
                " VALUES (1, ?, ?, ?, ?, ?)"
                " ON CONFLICT (id) DO UPDATE SET"
                "   title = excluded.title,"
                "   uri = excluded.uri,"
                "   email = excluded.email,"
                "   description = excluded.description,"
                "   short_description = excluded.short_description",
                (
                    parsed.title,
                    parsed.uri,
                    parsed.email,
                    parsed.description,
                    parsed.short_description,
                ),
            )
            row = self._load()
        logger.info("instance_configured", uri=parsed.uri)
        return _to_config(row)

    def generate_vapid_keys(self, regenerate: bool = False) -> str:
        """Generate and persist the VAPID keypair.

        An existing keypair is kept unless regenerate is set, since
        replacing it breaks every subscription created under the old key.

        Returns:
            The URL-safe base64 public key.
        """
        with self._db.transaction():
            current = self._load().get("vapid_public_key")
            if current and not regenerate:
                logger.info("vapid_keys_exist")
                return current

            keys = generate_vapid_keypair()
            self._db.execute(
                "INSERT INTO instance_config"
                " (id, vapid_public_key, vapid_private_key)"
                " VALUES (1, ?, ?)"
                " ON CONFLICT (id) DO UPDATE SET"
                "   vapid_public_key = excluded.vapid_public_key,"
                "   vapid_private_key = excluded.vapid_private_key",
                (keys.public_key, keys.private_key_pem),
            )

        if current:
            logger.warning("vapid_keys_regenerated")
        else:
            logger.info("vapid_keys_generated")
        return keys.public_key

    def get_config(self) -> InstanceConfig:
        """Current configuration.

        Raises:
            NotConfigured: If configure() was never called.
        """
        return _to_config(self._load())

    def vapid_public_key(self) -> str:
        """Public key, or an empty string before generation."""
        return self._load().get("vapid_public_key") or ""


def _to_config(row: dict[str, Any]) -> InstanceConfig:
    if not row.get("title"):
        raise NotConfigured()
    return InstanceConfig(
        title=row["title"],
        uri=row["uri"],
        email=row["email"],
        description=row["description"],
        short_description=row["short_description"] or row["description"],
        vapid_public_key=row["vapid_public_key"],
        vapid_private_key=row["vapid_private_key"],
    )
