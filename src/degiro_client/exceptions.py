"""Error hierarchy and code mapping for the DeGiro client."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    AUTH_FAILED = "AUTH_FAILED"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    API_REJECTED = "API_REJECTED"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    INVALID_ARGS = "INVALID_ARGS"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


EXIT_CODE_BY_ERROR: dict[ErrorCode, int] = {
    ErrorCode.INVALID_ARGS: 2,
    ErrorCode.AUTH_FAILED: 3,
    ErrorCode.NOT_AUTHENTICATED: 3,
    ErrorCode.API_REJECTED: 4,
    ErrorCode.PRODUCT_NOT_FOUND: 5,
    ErrorCode.MALFORMED_RESPONSE: 6,
    ErrorCode.TRANSPORT_ERROR: 7,
}


class DegiroError(Exception):
    """Base typed exception for every failure the client classifies itself."""

    code: ErrorCode = ErrorCode.INVALID_ARGS

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

    @property
    def exit_code(self) -> int:
        return EXIT_CODE_BY_ERROR.get(self.code, 1)

    def to_error_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        return payload


class AuthenticationError(DegiroError):
    """Login did not yield a session, or a call was made without one."""

    code = ErrorCode.AUTH_FAILED


class ApiError(DegiroError):
    """A write action answered with a non-zero status; message is the server's."""

    code = ErrorCode.API_REJECTED

    def __init__(self, message: str, *, status: int | None = None, details: dict[str, Any] | None = None) -> None:
        merged = dict(details or {})
        if status is not None:
            merged.setdefault("status", status)
        super().__init__(message, details=merged)
        self.status = status


class MalformedResponseError(DegiroError):
    """A response lacked the shape the caller needs."""

    code = ErrorCode.MALFORMED_RESPONSE


class ProductNotFoundError(DegiroError):
    """Product search returned no candidates."""

    code = ErrorCode.PRODUCT_NOT_FOUND
