"""NetSuite API client facade.

Composes the OAuth signer, the middleware chain, the retry controller and
the HTTP transport into ``request`` plus the RESTlet and verb helpers.

Example:
    async with NetSuiteClient(config) as client:
        response = await client.restlet({"script": "123", "deploy": "1", "params": {"id": "456"}})
        print(response.data)
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar, Union
from urllib.parse import urlencode

import httpx

from neatsuite.core.middleware import MiddlewareChain
from neatsuite.domain.interfaces.logger import Logger
from neatsuite.domain.interfaces.transport import HttpTransport
from neatsuite.domain.models.common import BODY_METHODS, HTTP_METHODS
from neatsuite.domain.models.errors import (
    HTTP_ERROR,
    TIMEOUT,
    UNKNOWN_ERROR,
    ConfigurationError,
    ErrorKind,
    NetSuiteError,
)
from neatsuite.domain.models.http import (
    ClientConfig,
    ClientResponse,
    Middleware,
    PerformanceResult,
    RequestContext,
    RequestOptions,
    RestletParams,
    TransportResponse,
)
from neatsuite.infrastructure.auth.oauth_signer import OAuthSigner
from neatsuite.infrastructure.http.transport import HttpxTransport, decode_body
from neatsuite.infrastructure.resilience.api_retry import RetryController
from neatsuite.utils.helpers import validate_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESTLET_URL_TEMPLATE = "https://{account_id}.restlets.api.netsuite.com/app/site/hosting/restlet.nl"

# Backoff used for requests: 1s, 2s, then capped at 3s
REQUEST_INITIAL_DELAY_MS = 1000
REQUEST_MAX_DELAY_MS = 3000

# Logger method to try when the collaborator lacks the requested one
_LEVEL_ALIASES = {"warn": "warning"}


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_fields(data: Any) -> Dict[str, Any]:
    """Pulls a message and error code out of a NetSuite error body."""
    if not isinstance(data, dict):
        return {"message": None, "code": None}

    code = data.get("o:errorCode")
    details = data.get("o:errorDetails")
    if not code and isinstance(details, list) and details and isinstance(details[0], dict):
        code = details[0].get("o:errorCode")

    message = data.get("detail") or data.get("title")
    restlet_error = data.get("error")
    if isinstance(restlet_error, dict):
        # RESTlets report failures as {"error": {"code": ..., "message": ...}}
        message = message or restlet_error.get("message")
        code = code or restlet_error.get("code")
    return {"message": message, "code": code}


class NetSuiteClient:
    """Async client for NetSuite RESTlets and REST endpoints."""

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any]],
        logger: Optional[Logger] = None,
        transport: Optional[HttpTransport] = None,
        retry_controller: Optional[RetryController] = None,
        signer: Optional[OAuthSigner] = None,
    ):
        """Initializes the client.

        Args:
            config: A ``ClientConfig`` or a mapping of the same shape.
            logger: Optional structured logger; the client is silent without one.
            transport: HTTP transport; an ``HttpxTransport`` built from the
                config by default.
            retry_controller: Backoff policy; built from ``config.retries`` by default.
            signer: OAuth signer; built from ``config.oauth`` by default.

        Raises:
            ConfigurationError: If a mapping config is missing required fields.
        """
        if not isinstance(config, ClientConfig):
            errors = validate_config(config)
            if errors:
                raise ConfigurationError(errors)
            config = ClientConfig.from_dict(config)

        self.config = config
        self._logger = logger
        self._signer = signer or OAuthSigner(config.oauth)
        self._transport = transport or HttpxTransport(timeout_ms=config.timeout, headers=config.headers)
        self._retry = retry_controller or RetryController(
            max_retries=config.retries,
            initial_delay_ms=REQUEST_INITIAL_DELAY_MS,
            max_delay_ms=REQUEST_MAX_DELAY_MS,
        )
        self._middleware = MiddlewareChain()

    async def __aenter__(self) -> "NetSuiteClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes pooled connections of the transport."""
        logger.debug("Closing NetSuite client transport.")
        await self._transport.aclose()

    # --- Logging helpers ---

    def _log(self, level: str, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        if self._logger is None:
            return
        emit = getattr(self._logger, level, None)
        if emit is None:
            emit = getattr(self._logger, _LEVEL_ALIASES.get(level, level))
        emit(message, meta)

    def _on_retry(self, max_retries: int) -> Callable[[int, BaseException], None]:
        def observer(attempt: int, error: BaseException) -> None:
            self._log("warn", "NetSuite API retry attempt", {
                "attempt_number": attempt,
                "retries_left": max_retries - attempt + 1,
                "error": str(error),
            })
        return observer

    # --- Middleware ---

    def use(self, middleware: Middleware) -> None:
        """Adds middleware to the request pipeline.

        Applies to requests started after this call.
        """
        self._middleware.use(middleware)

    # --- Core pipeline ---

    @staticmethod
    def should_retry(error: BaseException) -> bool:
        """Retry policy: 4xx responses are permanent, everything else is transient."""
        status = getattr(error, "status", None)
        return not (isinstance(status, int) and 400 <= status < 500)

    async def measure_performance(
        self, operation: str, fn: Callable[[], Awaitable[T]]
    ) -> PerformanceResult[T]:
        """Times ``fn`` and logs the outcome.

        Completion is logged only with ``enable_performance_logging``;
        failures are always logged.
        """
        start = time.monotonic()
        try:
            result = await fn()
        except Exception as e:
            duration = (time.monotonic() - start) * 1000
            self._log("error", f"[Performance] {operation} failed", {"duration": duration, "error": str(e)})
            raise

        duration = (time.monotonic() - start) * 1000
        if self.config.enable_performance_logging:
            self._log("info", f"[Performance] {operation} completed", {"duration": duration})
        return PerformanceResult(result=result, duration=duration)

    async def request(self, options: Union[RequestOptions, Mapping[str, Any]]) -> ClientResponse:
        """Makes a signed request to the NetSuite API.

        Args:
            options: ``RequestOptions`` or a mapping of its fields.

        Returns:
            The decoded response with its measured duration.

        Raises:
            NetSuiteError: For non-2xx responses (after retries for 5xx) and
                for transport failures such as timeouts.
            ValueError: For an unsupported HTTP method.
        """
        if not isinstance(options, RequestOptions):
            options = RequestOptions(**options)

        method = options.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {options.method}")

        auth_headers = self._signer.sign(options.url, method)
        context = RequestContext(options=options, auth_headers=auth_headers, start_time=time.monotonic())
        middlewares = self._middleware.snapshot()
        max_retries = self.config.retries if options.retries is None else options.retries

        async def transport_call() -> TransportResponse:
            current = context.options
            headers = {**context.auth_headers, **current.headers}
            body = current.body if method in BODY_METHODS else None

            self._log("debug", "NetSuite API Request", {"method": method, "url": current.url})
            try:
                response = await self._transport.send(
                    method, current.url, headers=headers, body=body, **current.transport_options
                )
            except (httpx.HTTPError, OSError, asyncio.TimeoutError) as e:
                error = self.create_error(e)
                self._log("error", "NetSuite API Response Error", {
                    "status": error.status, "url": current.url, "error": error.message,
                })
                raise error from e

            self._log("debug", "NetSuite API Response", {"status": response.status, "url": current.url})
            self._check_status(response)
            return response

        async def terminal() -> TransportResponse:
            return await self._retry.execute(
                transport_call,
                max_retries=max_retries,
                should_retry=self.should_retry,
                on_retry=self._on_retry(max_retries),
            )

        async def run_chain() -> TransportResponse:
            response = await self._middleware.run(context, terminal, middlewares)
            # Middleware may answer without reaching the transport
            self._check_status(response)
            return response

        measured = await self.measure_performance(f"NetSuite API {method} {options.url}", run_chain)
        response = measured.result
        return ClientResponse(
            data=response.data,
            status=response.status,
            headers=dict(response.headers),
            duration=measured.duration,
        )

    @staticmethod
    def _check_status(response: TransportResponse) -> None:
        """Raises ``NetSuiteError`` (``HTTP_ERROR``) for any non-2xx response."""
        if not 200 <= response.status < 300:
            raise NetSuiteError(
                f"NetSuite API returned status {response.status}",
                status=response.status,
                code=HTTP_ERROR,
                details=response.data,
                response=response.raw,
                kind=ErrorKind.API,
            )

    # --- RESTlets ---

    def build_restlet_url(self, params: Union[RestletParams, Mapping[str, Any]]) -> str:
        """Builds the RESTlet URL for the configured account."""
        if not isinstance(params, RestletParams):
            params = RestletParams(**params)
        query = {
            "script": _query_value(params.script),
            "deploy": _query_value(params.deploy),
        }
        for key, value in (params.params or {}).items():
            query[key] = _query_value(value)
        base_url = RESTLET_URL_TEMPLATE.format(account_id=self.config.account_id)
        return f"{base_url}?{urlencode(query)}"

    async def restlet(self, params: Union[RestletParams, Mapping[str, Any]], **options: Any) -> ClientResponse:
        """Calls a RESTlet deployment.

        Args:
            params: Script id, deploy id and extra query parameters.
            **options: Any other ``RequestOptions`` field (method, body, ...).
        """
        return await self.request(RequestOptions(url=self.build_restlet_url(params), **options))

    # --- Verb helpers ---

    async def get(self, url: str, **options: Any) -> ClientResponse:
        return await self.request(RequestOptions(url=url, method="GET", **options))

    async def post(self, url: str, body: Any = None, **options: Any) -> ClientResponse:
        return await self.request(RequestOptions(url=url, method="POST", body=body, **options))

    async def put(self, url: str, body: Any = None, **options: Any) -> ClientResponse:
        return await self.request(RequestOptions(url=url, method="PUT", body=body, **options))

    async def patch(self, url: str, body: Any = None, **options: Any) -> ClientResponse:
        return await self.request(RequestOptions(url=url, method="PATCH", body=body, **options))

    async def delete(self, url: str, **options: Any) -> ClientResponse:
        return await self.request(RequestOptions(url=url, method="DELETE", **options))

    # --- Error helpers ---

    @staticmethod
    def is_netsuite_error(error: Any) -> bool:
        """True if ``error`` is a client failure, judged by its ``kind`` tag."""
        return isinstance(getattr(error, "kind", None), ErrorKind)

    @staticmethod
    def create_error(error: BaseException) -> NetSuiteError:
        """Normalises any transport failure into a ``NetSuiteError``."""
        if NetSuiteClient.is_netsuite_error(error):
            return error  # type: ignore[return-value]

        if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
            return NetSuiteError(
                "Request timeout - NetSuite API is taking too long to respond",
                status=504,
                code=TIMEOUT,
                kind=ErrorKind.TIMEOUT,
            )

        if isinstance(error, httpx.HTTPStatusError):
            data = decode_body(error.response)
            fields = _error_fields(data)
            return NetSuiteError(
                fields["message"] or "Error from NetSuite API",
                status=error.response.status_code,
                code=fields["code"],
                details=data,
                response=error.response,
                kind=ErrorKind.API,
            )

        kind = ErrorKind.TRANSPORT if isinstance(error, (httpx.TransportError, OSError)) else ErrorKind.UNKNOWN
        return NetSuiteError(
            str(error) or "Unknown error occurred",
            status=500,
            code=UNKNOWN_ERROR,
            kind=kind,
        )
