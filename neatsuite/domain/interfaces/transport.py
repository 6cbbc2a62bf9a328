"""Interface for the HTTP transport the client dispatches through.

Hides the HTTP library behind a single ``send`` call so the client facade
only deals with domain request/response records.
"""

import abc
from typing import Any, Dict, Optional

from ..models.http import TransportResponse


class HttpTransport(abc.ABC):
    """Abstract Base Class for issuing HTTP requests."""

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        **options: Any,
    ) -> TransportResponse:
        """Sends one HTTP request.

        Statuses accepted by the transport's status validation are returned;
        others raise the underlying library's status error.

        Args:
            method: HTTP verb.
            url: Absolute request URL.
            headers: Per-request headers, merged over the transport defaults.
            body: JSON-serialisable request body, or None.
            **options: Library-specific overrides.

        Returns:
            The decoded response.
        """
        pass

    @abc.abstractmethod
    async def aclose(self) -> None:
        """Releases pooled connections."""
        pass
