"""Typed errors raised by the registration and subscription services.

Every error carries a stable ``code`` and the HTTP status the response
layer renders it with. ``Conflict`` never reaches a caller: it is raised
by storage and resolved by the service that triggered it.
"""


class WildebeestError(Exception):
    """Base exception for all service errors."""

    code = "internal_error"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WildebeestError):
    """A required field is missing or malformed."""

    code = "validation_error"
    http_status = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigError(ValidationError):
    """Instance settings are incomplete."""

    code = "config_error"


class MethodNotAllowed(WildebeestError):
    """Verb not supported by a creation-only resource."""

    code = "method_not_allowed"
    http_status = 400

    def __init__(self, method: str) -> None:
        super().__init__(f"method {method} not allowed")
        self.method = method


class NotFound(WildebeestError):
    """Requested resource does not exist."""

    code = "not_found"
    http_status = 404

    def __init__(self, resource_type: str, resource_id: str | None = None) -> None:
        if resource_id is None:
            message = f"{resource_type} not found"
        else:
            message = f"{resource_type} '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class NotConfigured(NotFound):
    """The instance has not been configured yet."""

    code = "not_configured"

    def __init__(self) -> None:
        super().__init__("instance configuration")


class Conflict(WildebeestError):
    """A uniqueness constraint rejected a write."""

    code = "conflict"
    http_status = 409


class Unauthorized(WildebeestError):
    """Credentials are absent or invalid."""

    code = "unauthorized"
    http_status = 401

    def __init__(self, message: str = "the access token is invalid") -> None:
        super().__init__(message)
