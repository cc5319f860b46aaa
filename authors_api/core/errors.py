from collections.abc import Mapping, Sequence
from typing import Any, cast
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from authors_api.core.logging import get_logger, request_user


class ApiError(Exception):
    """Base class for errors that end the current request with a known status."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "server_error"

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message: str = message
        self.headers: dict[str, str] | None = headers


class Unauthenticated(ApiError):
    status_code = HTTP_401_UNAUTHORIZED
    error_type = "unauthenticated"

    def __init__(self, message: str = "Missing or invalid bearer credential"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class PolicyDenied(ApiError):
    status_code = HTTP_403_FORBIDDEN
    error_type = "policy_denied"

    def __init__(self, policy: str):
        super().__init__(f"Caller does not satisfy the '{policy}' policy")
        self.policy: str = policy


class NotFound(ApiError):
    status_code = HTTP_404_NOT_FOUND
    error_type = "not_found"


class DuplicateName(ApiError):
    status_code = HTTP_400_BAD_REQUEST
    error_type = "duplicate_name"

    def __init__(self, name: str):
        super().__init__(f"An author named '{name}' already exists")
        self.name: str = name


class StorageUnavailable(ApiError):
    status_code = HTTP_503_SERVICE_UNAVAILABLE
    error_type = "storage_unavailable"

    def __init__(self, message: str = "Storage backend unavailable"):
        super().__init__(message)


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "user": request_user(request),
        "path": request.url.path,
        "method": request.method,
    }

def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                ctx["error"] = str(ctx["error"])
            serialized_error["ctx"] = ctx
        serialized_errors.append(serialized_error)
    return serialized_errors


def _envelope_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorEnvelope(
        error=ErrorBody(type=error_type, message=message, details=details),
        meta=_build_meta(request),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("%s: %s", exc.error_type, exc.message, extra={"status_code": exc.status_code})
        return _envelope_response(
            request, exc.status_code, exc.error_type, exc.message, headers=exc.headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        if isinstance(exc.detail, dict):
            message = "Request failed"
            details = cast(dict[str, object], exc.detail)
        else:
            message = exc.detail or "HTTP error"
            details = None
        return _envelope_response(
            request, exc.status_code, "http_error", message, details, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        return _envelope_response(
            request,
            HTTP_400_BAD_REQUEST,
            "validation_error",
            "Invalid request payload",
            {"errors": _serialize_validation_errors(exc.errors())},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc.orig)})
        return _envelope_response(
            request, HTTP_400_BAD_REQUEST, "constraint_violation", "Data integrity violation"
        )

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.error("Storage unavailable", exc_info=exc)
        unavailable = StorageUnavailable()
        return _envelope_response(
            request, unavailable.status_code, unavailable.error_type, unavailable.message
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _envelope_response(
            request, HTTP_500_INTERNAL_SERVER_ERROR, "server_error", "Internal Server Error"
        )
