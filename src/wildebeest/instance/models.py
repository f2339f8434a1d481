"""Pydantic models for instance configuration."""

from pydantic import BaseModel, ConfigDict, Field


class InstanceSettings(BaseModel):
    """Input accepted by the configure step."""

    title: str = Field(min_length=1)
    uri: str = Field(min_length=1)
    email: str = Field(min_length=1)
    description: str = Field(min_length=1)
    short_description: str | None = None


class InstanceConfig(BaseModel):
    """Snapshot of the singleton configuration row."""

    model_config = ConfigDict(frozen=True)

    title: str
    uri: str
    email: str
    description: str
    short_description: str
    vapid_public_key: str | None = None
    vapid_private_key: str | None = Field(default=None, repr=False)


class VapidKeysRequest(BaseModel):
    """Body of the key generation endpoint."""

    regenerate: bool = False
