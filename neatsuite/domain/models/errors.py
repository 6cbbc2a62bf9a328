"""Typed failures raised by the NetSuite client.

Every failure that leaves the request pipeline is a ``NetSuiteError``. The
``kind`` field is the discriminant callers branch on: ``API`` for responses
the platform rejected, ``TIMEOUT``/``TRANSPORT`` for connection-level
problems and ``UNKNOWN`` for everything else.
"""

import enum
from typing import Any, List, Optional

# Machine-readable codes produced by the client itself
HTTP_ERROR = "HTTP_ERROR"
TIMEOUT = "TIMEOUT"
UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorKind(str, enum.Enum):
    """Discriminant for ``NetSuiteError``."""
    API = "api"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class NetSuiteError(Exception):
    """Failure of a NetSuite API call.

    Attributes:
        message: Human readable description.
        status: HTTP status code, when one is known.
        code: Machine-readable error code (e.g. ``HTTP_ERROR``, ``TIMEOUT``
            or the platform's ``o:errorCode``).
        details: Decoded error body returned by the platform, if any.
        response: The raw transport response, if any.
        kind: Discriminant distinguishing API failures from transport ones.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
        response: Any = None,
        kind: ErrorKind = ErrorKind.API,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details
        self.response = response
        self.kind = kind

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses, which are never worth retrying."""
        return self.status is not None and 400 <= self.status < 500

    def __repr__(self) -> str:
        return (
            f"NetSuiteError(message={self.message!r}, status={self.status!r}, "
            f"code={self.code!r}, kind={self.kind.value!r})"
        )


class BatchResultMissingError(LookupError):
    """Raised for a batched key the batch processor returned no result for."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No result for key: {key}")


class ConfigurationError(ValueError):
    """Raised when a client configuration fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid NetSuite configuration: " + "; ".join(self.errors))
