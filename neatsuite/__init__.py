"""neatsuite: an async NetSuite API client.

OAuth 1.0a signed RESTlet and REST calls with middleware, retries with
exponential backoff, and caching, rate limiting and batching utilities.
"""

from neatsuite.core.client import NetSuiteClient
from neatsuite.core.middleware import MiddlewareChain
from neatsuite.domain.models.errors import (
    BatchResultMissingError,
    ConfigurationError,
    ErrorKind,
    NetSuiteError,
)
from neatsuite.domain.models.http import (
    ClientConfig,
    ClientResponse,
    Middleware,
    OAuthConfig,
    PerformanceResult,
    RequestContext,
    RequestOptions,
    RestletParams,
    TransportResponse,
)
from neatsuite.infrastructure.auth.oauth_signer import OAuthSigner
from neatsuite.infrastructure.cache.response_cache import ResponseCache
from neatsuite.infrastructure.http.transport import HttpxTransport
from neatsuite.infrastructure.monitoring.logger_setup import StdlibLogger, setup_logging
from neatsuite.infrastructure.resilience.api_retry import RetryController, retry_with_backoff
from neatsuite.infrastructure.resilience.batcher import BatchState, RequestBatcher
from neatsuite.infrastructure.resilience.rate_limiter import RateLimiter
from neatsuite.utils.helpers import (
    build_search_query,
    create_cache_key,
    format_netsuite_date,
    parse_netsuite_date,
    parse_netsuite_error,
    sanitize_field_value,
    to_internal_id,
    validate_config,
)

__version__ = "2.1.2"

__all__ = [
    "NetSuiteClient",
    "MiddlewareChain",
    "BatchResultMissingError",
    "ConfigurationError",
    "ErrorKind",
    "NetSuiteError",
    "ClientConfig",
    "ClientResponse",
    "Middleware",
    "OAuthConfig",
    "PerformanceResult",
    "RequestContext",
    "RequestOptions",
    "RestletParams",
    "TransportResponse",
    "OAuthSigner",
    "ResponseCache",
    "HttpxTransport",
    "StdlibLogger",
    "setup_logging",
    "RetryController",
    "retry_with_backoff",
    "BatchState",
    "RequestBatcher",
    "RateLimiter",
    "build_search_query",
    "create_cache_key",
    "format_netsuite_date",
    "parse_netsuite_date",
    "parse_netsuite_error",
    "sanitize_field_value",
    "to_internal_id",
    "validate_config",
]
