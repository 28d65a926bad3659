"""API error type and response envelope helpers"""

from typing import Any, Optional

from fastapi import HTTPException, status


# Default codes for plain HTTPExceptions raised by dependencies and FastAPI itself
STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_502_BAD_GATEWAY: "UPSTREAM_ERROR",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}


class ApiError(HTTPException):
    """HTTP error carrying a machine readable code for the error envelope."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


def bad_request(message: str, code: str = "INVALID_INPUT", details: Any = None) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, code, message, details)


def not_found(message: str = "Not found", code: str = "NOT_FOUND") -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, code, message)


def conflict(message: str, code: str = "CONFLICT") -> ApiError:
    return ApiError(status.HTTP_409_CONFLICT, code, message)


def ok(data: Any = None, meta: Optional[dict] = None) -> dict:
    """Success envelope"""
    body = {"ok": True, "data": data}
    if meta is not None:
        body["meta"] = meta
    return body


def error_body(code: str, message: str, details: Any = None) -> dict:
    """Failure envelope"""
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"ok": False, "error": error}
