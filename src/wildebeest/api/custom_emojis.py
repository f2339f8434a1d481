from fastapi import APIRouter
from fastapi.responses import JSONResponse

from wildebeest.api.responses import json_response

router = APIRouter()

# The listing is identical for every caller.
CUSTOM_EMOJIS_MAX_AGE = 300


@router.get("")
async def custom_emojis() -> JSONResponse:
    """Custom emojis are not supported; the listing is always empty."""
    return json_response([], cache_max_age=CUSTOM_EMOJIS_MAX_AGE)
