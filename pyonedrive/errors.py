"""Exceptions raised by the OneDrive client.

Every failure reaches the immediate caller as one of the exceptions below.
Nothing is retried internally: a caller that sees ``RateLimitedError`` or a
429 ``APIError`` decides itself when to reissue the call.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ErrorDetail


class OneDriveError(Exception):
    """Base exception for all client errors."""

    pass


class RateLimitedError(OneDriveError):
    """Raised before any I/O when the throttle gate refuses a request.

    Attributes:
        retry_after: Time left until the gate admits requests again.
    """

    def __init__(self, retry_after: timedelta) -> None:
        self.retry_after = retry_after
        super().__init__(
            f"Rate limited: retry in {retry_after.total_seconds():.0f} seconds"
        )


class InvalidRequestError(OneDriveError):
    """Raised when a request cannot be built from the given inputs."""

    pass


class TransportError(OneDriveError):
    """Raised when the underlying HTTP transport fails."""

    pass


class APIError(OneDriveError):
    """Raised when the service answers with an error envelope.

    Attributes:
        status_code: HTTP status of the response.
        error: The decoded error, including its inner error chain.
    """

    def __init__(self, status_code: int, error: ErrorDetail) -> None:
        self.status_code = status_code
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def inner_error(self) -> ErrorDetail | None:
        return self.error.inner_error

    @property
    def codes(self) -> list[str]:
        """Error codes from the most general to the most specific."""
        return self.error.codes()


class MalformedResponseError(OneDriveError):
    """Raised when a response body cannot be decoded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedThrottleHeaderError(OneDriveError):
    """Raised when a ``Retry-After`` value is not a whole number of seconds.

    Attributes:
        value: The offending header value.
        api_error: The rate limit error that carried the header, if any.
    """

    def __init__(self, value: object, api_error: APIError | None = None) -> None:
        self.value = value
        self.api_error = api_error
        super().__init__(f"Invalid Retry-After value: {value!r}")


class FileTooLargeError(OneDriveError):
    """Raised when a file exceeds the simple upload size limit."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"File is {size} bytes; simple upload supports less than {limit} bytes"
        )
