"""HttpTransport implementation backed by ``httpx.AsyncClient``.

Owns the connection pool, request timeout and default headers. Responses
below 500 are returned to the caller for inspection; 5xx responses raise
``httpx.HTTPStatusError`` so they surface as transport failures.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from neatsuite.domain.interfaces.transport import HttpTransport
from neatsuite.domain.models.http import TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept-Encoding": "gzip, deflate",
}
MAX_REDIRECTS = 5


def default_validate_status(status: int) -> bool:
    """Statuses below 500 do not raise."""
    return status < 500


def decode_body(response: httpx.Response) -> Any:
    """Decodes a JSON body, falling back to text for anything else."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport(HttpTransport):
    """Async HTTP transport with keep-alive pooling."""

    def __init__(
        self,
        timeout_ms: float,
        headers: Optional[Mapping[str, str]] = None,
        validate_status: Callable[[int], bool] = default_validate_status,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initializes the httpx client.

        Args:
            timeout_ms: Request timeout in milliseconds.
            headers: Extra default headers, merged over ``DEFAULT_HEADERS``.
            validate_status: Returns True for statuses that should not raise.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        self._validate_status = validate_status
        self._client = httpx.AsyncClient(
            timeout=timeout_ms / 1000,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            limits=httpx.Limits(keepalive_expiry=30.0),
            transport=transport,
        )

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        **options: Any,
    ) -> TransportResponse:
        if body is not None and "content" not in options and "data" not in options:
            options["json"] = body

        logger.debug(f"HTTP {method} {url}")
        response = await self._client.request(method, url, headers=headers, **options)
        logger.debug(f"HTTP {method} {url} -> {response.status_code}")

        if not self._validate_status(response.status_code):
            raise httpx.HTTPStatusError(
                f"Server error '{response.status_code} {response.reason_phrase}' for url '{url}'",
                request=response.request,
                response=response,
            )

        return TransportResponse(
            data=decode_body(response),
            status=response.status_code,
            headers=dict(response.headers),
            raw=response,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
