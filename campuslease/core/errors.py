"""
Service-layer errors and the handlers that turn them into HTTP responses.
"""

from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class ServiceError(ValueError):
    """Base class for errors raised by the service modules."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409


class InvalidPayloadError(ServiceError):
    """Raised with the list of human readable problems found in a payload."""

    def __init__(self, errors: List[str]):
        super().__init__("Invalid payload")
        self.errors = errors


def _describe(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    msg = error.get("msg", "invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, InvalidPayloadError):
        logger.info(f"Rejected payload on {request.url.path}: {exc.errors}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": str(exc), "errors": exc.errors},
        )

    logger.info(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_describe(e) for e in exc.errors()]
    logger.info(f"Rejected payload on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid payload", "errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
