import json
from pathlib import Path

from pydantic import AliasChoices, Field, ValidationError, computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "wildebeest"
    app_version: str = "0.3.0"

    # Instance
    domain: str | None = Field(
        default=None,
        description="Public domain served by this instance (defaults to the request host)",
    )
    admin_token: str | None = Field(
        default=None,
        description="Bearer token guarding the start-instance endpoints",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = Field(default=8787, gt=0, lt=65536)

    # Paths
    state_dir: str = Field(
        default=str(Path.home() / ".wildebeest"),
        validation_alias=AliasChoices("state_dir", "WILDEBEEST_STATE"),
        description="Directory for state files (config.json, wildebeest.db)",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def db_path(self) -> Path:
        """SQLite database path."""
        return Path(self.state_dir) / "wildebeest.db"

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


_override: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings instance."""
    if _override:
        return _override
    settings = Settings()
    return _load_config_file(settings)


def _load_config_file(settings: Settings) -> Settings:
    """Load and merge config.json if it exists."""
    config_path = Path(settings.state_dir) / "config.json"
    if not config_path.exists():
        return settings

    try:
        data = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError):
        return settings
    if not isinstance(data, dict):
        return settings

    if isinstance(data.get("state_dir"), str):
        data["state_dir"] = str(Path(data["state_dir"]).expanduser())

    try:
        return Settings.model_validate({**settings.model_dump(), **data})
    except ValidationError:
        return settings


def override_settings(s: Settings | None) -> None:
    """Swap in a custom Settings (use None to reset)."""
    global _override  # noqa: PLW0603
    _override = s
