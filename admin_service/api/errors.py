"""Map service errors and unexpected failures onto the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import InternalError, ServiceError
from ..schemas import failure

logger = logging.getLogger(__name__)


def _validation_summary(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def install_error_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register handlers so every failure leaves as ``{success: false, ...}``."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code in (401, 403):
            logger.warning("HTTP %s at %s: %s", exc.status_code, request.url.path, exc.message)
        if isinstance(exc, InternalError):
            logger.error("internal error at %s", request.url.path, exc_info=exc)
            return JSONResponse(
                status_code=exc.status_code,
                content=failure("something went wrong", str(exc.__cause__ or exc) if debug else None),
            )
        return JSONResponse(status_code=exc.status_code, content=failure(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=failure("validation failed", _validation_summary(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=failure(str(exc.detail)))

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled error at %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=failure("something went wrong", str(exc) if debug else None),
        )
