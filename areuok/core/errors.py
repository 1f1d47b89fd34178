"""
Custom exception hierarchy for areuok.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AreuokException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(AreuokException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class RequestNotFoundError(NotFoundError):
    code = "REQUEST_NOT_FOUND"

    def __init__(self, request_id: str, reason: str = "Request not found."):
        super().__init__(
            message=reason,
            details={"request_id": request_id},
        )


class RelationshipNotFoundError(NotFoundError):
    code = "RELATIONSHIP_NOT_FOUND"

    def __init__(self, relationship_id: str):
        super().__init__(
            message="Relationship not found.",
            details={"relationship_id": relationship_id},
        )


class WrongTargetError(AreuokException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "WRONG_TARGET"

    def __init__(self, request_id: str, target_device_id: str, device_id: str):
        super().__init__(
            message="This request is not for this device.",
            details={
                "request_id": request_id,
                "target_device_id": target_device_id,
                "device_id": device_id,
            },
        )


class NotAuthorizedError(AreuokException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "NOT_AUTHORIZED"

    def __init__(self, mode: str):
        super().__init__(
            message="Only supervisor devices can send supervision requests.",
            details={"mode": mode},
        )


class RequestNotPendingError(AreuokException):
    http_status = status.HTTP_409_CONFLICT
    code = "REQUEST_NOT_PENDING"

    def __init__(self, request_id: str, current_status: str):
        super().__init__(
            message=f"Request is already {current_status}.",
            details={"request_id": request_id, "status": current_status},
        )


class StorageError(AreuokException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"

    def __init__(self, key: str, operation: str, reason: str):
        super().__init__(
            message=f"Failed to {operation} record '{key}': {reason}",
            details={"key": key, "operation": operation},
        )


class RemoteError(AreuokException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "REMOTE_ERROR"

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        details: dict[str, Any] = {}
        if endpoint:
            details["endpoint"] = endpoint
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message=message, details=details)


class InvalidEmailAddressError(AreuokException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_EMAIL_ADDRESS"

    def __init__(self, field: str, value: str):
        super().__init__(
            message=f"Invalid {field} email: {value!r}",
            details={"field": field},
        )


class EmailDeliveryError(AreuokException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "EMAIL_DELIVERY_ERROR"

    def __init__(self, reason: str):
        super().__init__(message=f"Failed to send email: {reason}")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def areuok_exception_handler(request: Request, exc: AreuokException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
