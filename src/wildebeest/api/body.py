"""Request body decoding for JSON and form submissions."""

import json
from typing import Any

from fastapi import Request

from wildebeest.errors import ValidationError

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_body(request: Request) -> dict[str, Any]:
    """Decode the body as a JSON object or as form fields.

    Raises:
        ValidationError: If the body is not a JSON object or a form.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in _FORM_TYPES:
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    raw = await request.body()
    if not raw.strip():
        raise ValidationError("request body is empty")
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("request body is not valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data
