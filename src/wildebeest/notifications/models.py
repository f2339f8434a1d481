"""Pydantic models for Web Push subscriptions."""

from enum import StrEnum
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

ALERT_TYPES = (
    "mention",
    "status",
    "reblog",
    "follow",
    "follow_request",
    "favourite",
    "poll",
    "update",
    "admin.sign_up",
    "admin.report",
)


class SubscriptionPolicy(StrEnum):
    """Whose notifications are pushed."""

    ALL = "all"
    FOLLOWED = "followed"
    FOLLOWER = "follower"
    NONE = "none"


class PushKeys(BaseModel):
    """Receiver's public encryption material."""

    p256dh: str = Field(min_length=1)
    auth: str = Field(min_length=1)


class PushEndpoint(BaseModel):
    """The push service side of a subscription."""

    endpoint: str
    keys: PushKeys

    @field_validator("endpoint")
    @classmethod
    def _absolute_uri(cls, v: str) -> str:
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("endpoint must be an absolute URI")
        return v


class SubscriptionData(BaseModel):
    """Which alerts to push and for whom."""

    alerts: dict[str, bool] = Field(default_factory=dict, validate_default=True)
    policy: SubscriptionPolicy = SubscriptionPolicy.ALL

    @field_validator("alerts")
    @classmethod
    def _known_alerts(cls, v: dict[str, bool]) -> dict[str, bool]:
        unknown = sorted(set(v) - set(ALERT_TYPES))
        if unknown:
            raise ValueError(f"unknown alert types: {', '.join(unknown)}")
        return {name: v.get(name, False) for name in ALERT_TYPES}


class SubscriptionRequest(BaseModel):
    """POST /api/v1/push/subscription request body."""

    subscription: PushEndpoint
    data: SubscriptionData = Field(default_factory=SubscriptionData)


class Subscription(BaseModel):
    """A stored push subscription."""

    id: int
    actor_id: str
    client_id: str
    endpoint: str
    keys: PushKeys
    alerts: dict[str, bool]
    policy: SubscriptionPolicy


class SubscriptionView(BaseModel):
    """Subscription as rendered to the client."""

    id: int
    endpoint: str
    keys: PushKeys
    alerts: dict[str, bool]
    policy: SubscriptionPolicy
    server_key: str
