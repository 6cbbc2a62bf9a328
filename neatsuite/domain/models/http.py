"""Domain models for configuring the client and describing requests/responses.

Includes the client configuration, per-call request options, the context
handed to middleware and the response records returned to callers.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from .common import AccountId, HttpMethod

T = TypeVar("T")

DEFAULT_TIMEOUT_MS = 15000
DEFAULT_RETRIES = 3

# --- Configuration ---

@dataclass(frozen=True)
class OAuthConfig:
    """OAuth 1.0a (token based authentication) credentials."""
    consumer_key: str
    consumer_secret: str
    token_key: str
    token_secret: str
    realm: str


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration of a ``NetSuiteClient``."""
    oauth: OAuthConfig
    account_id: AccountId
    timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds
    retries: int = DEFAULT_RETRIES
    headers: Mapping[str, str] = field(default_factory=dict)
    enable_performance_logging: bool = False

    def __post_init__(self) -> None:
        # Read-only copy; later changes to the caller's dict do not leak in
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Builds a config from a plain mapping, applying defaults for absent keys.

        The mapping is expected to have passed ``validate_config`` already.
        """
        oauth = data["oauth"]
        timeout = data.get("timeout")
        retries = data.get("retries")
        return cls(
            oauth=oauth if isinstance(oauth, OAuthConfig) else OAuthConfig(
                consumer_key=oauth["consumer_key"],
                consumer_secret=oauth["consumer_secret"],
                token_key=oauth["token_key"],
                token_secret=oauth["token_secret"],
                realm=oauth["realm"],
            ),
            account_id=AccountId(str(data["account_id"])),
            timeout=int(timeout) if timeout is not None else DEFAULT_TIMEOUT_MS,
            retries=int(retries) if retries is not None else DEFAULT_RETRIES,
            headers=dict(data.get("headers") or {}),
            enable_performance_logging=bool(data.get("enable_performance_logging", False)),
        )


# --- Request side ---

@dataclass
class RequestOptions:
    """Options for a single API call. Built fresh per call, never shared."""
    url: str
    method: HttpMethod = "GET"
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    retries: Optional[int] = None  # Overrides ClientConfig.retries for this call
    transport_options: Dict[str, Any] = field(default_factory=dict)  # Extra httpx.request kwargs


@dataclass
class RestletParams:
    """Addresses a RESTlet deployment plus extra query parameters."""
    script: Union[str, int]
    deploy: Union[str, int]
    params: Dict[str, Union[str, int, bool]] = field(default_factory=dict)


@dataclass
class RequestContext:
    """Record passed through the middleware chain for one request.

    Middleware may modify ``options`` and ``auth_headers``; the terminal
    transport call reads them after the chain has run.
    """
    options: RequestOptions
    auth_headers: Dict[str, str]
    start_time: float  # time.monotonic() at request start


# --- Response side ---

@dataclass
class TransportResponse:
    """Raw response as seen by middleware."""
    data: Any
    status: int
    headers: Dict[str, str]
    raw: Any = None  # httpx.Response


@dataclass(frozen=True)
class ClientResponse(Generic[T]):
    """Response returned to callers of the client."""
    data: T
    status: int
    headers: Dict[str, str]
    duration: float  # milliseconds


@dataclass(frozen=True)
class PerformanceResult(Generic[T]):
    """Result of a timed operation."""
    result: T
    duration: float  # milliseconds


NextHandler = Callable[[], Awaitable[TransportResponse]]
Middleware = Callable[[RequestContext, NextHandler], Awaitable[TransportResponse]]
