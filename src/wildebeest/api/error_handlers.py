"""Global exception handlers mapping service errors to responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from wildebeest.api.responses import error_response
from wildebeest.errors import Conflict, NotFound, WildebeestError

logger = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(WildebeestError)
    async def service_error_handler(request: Request, exc: WildebeestError):
        if isinstance(exc, NotFound):
            logger.debug("not_found", path=request.url.path, error=exc.message)
        elif isinstance(exc, Conflict):
            # Conflicts are resolved below this layer; one escaping is a bug.
            logger.error("unresolved_conflict", path=request.url.path, error=exc.message)
            return error_response(500, "internal server error")
        else:
            logger.info(
                "request_rejected",
                path=request.url.path,
                code=exc.code,
                error=exc.message,
            )
        return error_response(exc.http_status, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def routing_error_handler(request: Request, exc: StarletteHTTPException):
        # Wrong verb on a route is a bad request here, never a 405.
        status = 400 if exc.status_code == 405 else exc.status_code
        logger.info(
            "routing_rejected",
            path=request.url.path,
            method=request.method,
            status=exc.status_code,
        )
        return error_response(status, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("request_invalid", path=request.url.path, errors=exc.errors())
        return error_response(400, "invalid request")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path)
        return error_response(500, "internal server error")
