from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    HTTP_ERROR = "HTTP_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


class ApiError(Exception):
    """Base error raised when a dispatched call fails.

    The message is what callers surface to the user, so it is kept verbatim
    from the backend whenever the backend supplied one.
    """

    kind: ErrorKind = ErrorKind.HTTP_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not found", *, status_code: Optional[int] = 404) -> None:
        super().__init__(message, status_code=status_code)


class RequestValidationError(ApiError):
    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str = "Missing required fields", *, status_code: Optional[int] = 400) -> None:
        super().__init__(message, status_code=status_code)


class HttpStatusError(ApiError):
    kind = ErrorKind.HTTP_ERROR


class TransportError(ApiError):
    """No response was received at all (DNS, refused connection, reset...)."""

    kind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, status_code=None)
        self.cause = cause


class SessionError(Exception):
    """Raised when the locally stored user profile is missing or unreadable."""

    def __init__(self, message: str = "User information not found") -> None:
        super().__init__(message)
        self.message = message


@dataclass
class ApiResult(Generic[T]):
    """Either a value or an ApiError, never both."""

    value: Optional[T] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: Any = None) -> "ApiResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "ApiResult":
        return cls(error=error)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "ApiResult":
        return cls(error=NotFoundError(message))

    @classmethod
    def validation_failed(cls, message: str = "Missing required fields") -> "ApiResult":
        return cls(error=RequestValidationError(message))


def error_for_status(status_code: int, message: str) -> ApiError:
    """Map a non-2xx HTTP status onto the matching ApiError variant."""
    if status_code == 404:
        return NotFoundError(message, status_code=status_code)
    if status_code in (400, 409, 422):
        return RequestValidationError(message, status_code=status_code)
    return HttpStatusError(message, status_code=status_code)


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Coerce form input into a float.

    Absent or blank values take ``default``; anything unparseable or non-finite
    (NaN, Infinity, 1e999) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return default if value is None else float(value)
    if isinstance(value, str) and not value.strip():
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Could not coerce %r to a number; using 0", value)
        return 0.0
    if not math.isfinite(number):
        logger.warning("Non-finite number %r; using 0", value)
        return 0.0
    return number
