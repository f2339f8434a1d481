"""Response contract shared by every handler.

JSON body, permissive CORS headers, and a Cache-Control header only for
payloads that are identical for every caller.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "content-type, authorization, idempotency-key",
    "Access-Control-Allow-Methods": "GET, PUT, POST, DELETE, OPTIONS",
}


def json_response(
    content: Any,
    status_code: int = 200,
    cache_max_age: int | None = None,
) -> JSONResponse:
    """Render content with the contract headers.

    Args:
        content: Anything jsonable_encoder accepts.
        status_code: HTTP status.
        cache_max_age: Seconds the payload may be cached. Leave unset
            for caller-specific or mutating handlers.
    """
    headers = dict(CORS_HEADERS)
    if cache_max_age is not None:
        headers["Cache-Control"] = f"public, max-age={cache_max_age}"
    return JSONResponse(
        content=jsonable_encoder(content),
        status_code=status_code,
        headers=headers,
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    """Mastodon-style ``{"error": ...}`` body."""
    return json_response({"error": message}, status_code=status_code)
