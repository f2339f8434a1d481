"""Pydantic models for client application registration."""

from pydantic import BaseModel, ConfigDict, Field


class AppRegistration(BaseModel):
    """POST /api/v1/apps request body."""

    redirect_uris: str = Field(min_length=1)
    client_name: str = Field(min_length=1)
    scopes: str = Field(min_length=1)
    website: str | None = None


class Client(BaseModel):
    """A registered client application."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    website: str | None
    redirect_uri: str
    scopes: str
    secret: str = Field(repr=False)


class RegisteredApp(BaseModel):
    """App registration response body."""

    name: str
    website: str | None
    redirect_uri: str
    client_id: str
    client_secret: str
    vapid_key: str
