"""
Exception handlers for the FastAPI application.

Service errors (``ViraError`` subclasses) become JSON responses carrying
their own status code and details. Request validation failures (a missing
field, a value out of range) answer 400 with the pydantic errors attached.
Anything else is caught by the global handler, logged with an error id and
request context, and answered with a generic 500.
"""

import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vira.core.errors import ViraError
from vira.core.logging_config import get_logger
from vira.core.monitoring import log_error

logger = get_logger(__name__)


async def vira_error_handler(request: Request, exc: ViraError) -> JSONResponse:
    """Turn a service error into ``{"detail": message, "details": ...}``."""
    level_log = logger.error if exc.status_code >= 500 else logger.info
    level_log(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
        exc_info=exc.status_code >= 500,
    )
    content = {"detail": exc.message}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed requests with 400, naming the missing fields when there are any."""
    errors = jsonable_encoder(exc.errors())
    missing = [".".join(str(part) for part in error["loc"][1:]) for error in errors if error.get("type") == "missing"]
    if missing:
        detail = f"Missing required fields: {', '.join(missing)}"
    else:
        detail = "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=400, content={"detail": detail, "details": errors})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and answer with a reference id.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = uuid.uuid4().hex[:12]

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ViraError, vira_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
