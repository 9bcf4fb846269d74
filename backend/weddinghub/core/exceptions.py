"""
Domain error taxonomy and the FastAPI handlers that map it to HTTP.

Services raise these errors; only the API boundary translates them into
status codes. Every response body carries a machine-readable ``kind`` and a
human ``detail`` message.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from weddinghub.core.logging import get_logger

logger = get_logger(__name__)


class DomainError(Exception):
    """Base class for all errors the API maps to a client-facing response."""

    kind: str = "domain_error"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "detail": self.message}


class ValidationError(DomainError):
    kind = "validation_error"

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class Unauthorized(DomainError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(DomainError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransition(DomainError):
    kind = "invalid_transition"


class InvalidMutation(DomainError):
    kind = "invalid_mutation"


class InvalidSignature(DomainError):
    kind = "invalid_signature"


class UnsupportedCurrency(DomainError):
    kind = "unsupported_currency"


class GatewayUnavailable(DomainError):
    kind = "gateway_unavailable"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DuplicateVendorProfile(DomainError):
    kind = "duplicate_vendor_profile"
    status_code = status.HTTP_409_CONFLICT


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, GatewayUnavailable):
        logger.error("gateway_unavailable", path=request.url.path, error=exc.message)
    else:
        logger.info("domain_error", kind=exc.kind, path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    error = ValidationError("Request validation failed", errors=errors)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "server_error", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
