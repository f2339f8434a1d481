from fastapi import APIRouter

from wildebeest.api import apps, custom_emojis, instance, push

api_router = APIRouter()
api_router.include_router(instance.router, tags=["instance"])
api_router.include_router(apps.router, prefix="/v1/apps", tags=["apps"])
api_router.include_router(
    custom_emojis.router,
    prefix="/v1/custom_emojis",
    tags=["custom_emojis"],
)
api_router.include_router(
    push.router,
    prefix="/v1/push/subscription",
    tags=["push"],
)
