import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest

from neatsuite.core.client import NetSuiteClient
from neatsuite.domain.models.errors import HTTP_ERROR, TIMEOUT, UNKNOWN_ERROR, ConfigurationError, ErrorKind, NetSuiteError
from neatsuite.domain.models.http import TransportResponse

RECORD_URL = "https://1234567.suitetalk.api.netsuite.com/services/rest/record/v1/customer/42"


class CountingHandler:
    """MockTransport handler replaying ``responses`` and recording requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


# --- Construction ---

def test_mapping_config_is_validated():
    with pytest.raises(ConfigurationError) as exc_info:
        NetSuiteClient({})

    assert exc_info.value.errors == ["OAuth configuration is required", "Account ID is required"]


def test_mapping_config_applies_defaults():
    client = NetSuiteClient({
        "oauth": {"consumer_key": "a", "consumer_secret": "b", "token_key": "c", "token_secret": "d", "realm": "R"},
        "account_id": "1234567",
    })

    assert client.config.timeout == 15000
    assert client.config.retries == 3
    assert client.config.enable_performance_logging is False


def test_build_restlet_url(make_client):
    client = make_client(CountingHandler())

    url = client.build_restlet_url({"script": 123, "deploy": 1, "params": {"action": "x", "flag": True}})

    assert url == (
        "https://1234567.restlets.api.netsuite.com/app/site/hosting/restlet.nl"
        "?script=123&deploy=1&action=x&flag=true"
    )


# --- Requests ---

@pytest.mark.asyncio
async def test_restlet_call_end_to_end(make_client):
    handler = CountingHandler(httpx.Response(200, json={"id": 1}))

    async with make_client(handler) as client:
        response = await client.restlet({"script": "123", "deploy": "1", "params": {"action": "x"}})

    request = handler.requests[0]
    assert request.method == "GET"
    assert request.url.host == "1234567.restlets.api.netsuite.com"
    assert "script=123&deploy=1&action=x" in str(request.url)
    assert request.headers["authorization"].startswith('OAuth realm="1234567_SB1"')
    assert response.data == {"id": 1}
    assert response.status == 200
    assert response.duration >= 0


@pytest.mark.asyncio
async def test_post_sends_json_body(make_client):
    handler = CountingHandler(httpx.Response(204))

    async with make_client(handler) as client:
        response = await client.post(RECORD_URL, body={"companyName": "Acme"})

    assert json.loads(handler.requests[0].content) == {"companyName": "Acme"}
    assert response.status == 204
    assert response.data is None


@pytest.mark.asyncio
async def test_get_never_sends_a_body(make_client):
    handler = CountingHandler(httpx.Response(200, json={}))

    async with make_client(handler) as client:
        await client.request({"url": RECORD_URL, "method": "get", "body": {"ignored": True}})

    assert handler.requests[0].method == "GET"
    assert handler.requests[0].content == b""


@pytest.mark.asyncio
async def test_unsupported_method_is_rejected(make_client):
    handler = CountingHandler(httpx.Response(200))

    async with make_client(handler) as client:
        with pytest.raises(ValueError):
            await client.request({"url": RECORD_URL, "method": "TRACE"})

    assert handler.requests == []


@pytest.mark.asyncio
async def test_client_error_is_not_retried(make_client, recording_sleep):
    body = {"title": "Not Found", "o:errorCode": "NONEXISTENT_ID"}
    handler = CountingHandler(httpx.Response(404, json=body))

    async with make_client(handler, retries=3) as client:
        with pytest.raises(NetSuiteError) as exc_info:
            await client.get(RECORD_URL)

    error = exc_info.value
    assert len(handler.requests) == 1
    assert recording_sleep.calls == []
    assert error.status == 404
    assert error.code == HTTP_ERROR
    assert error.details == body
    assert error.kind is ErrorKind.API
    assert error.is_client_error


@pytest.mark.asyncio
async def test_server_error_is_retried_until_limit(make_client, recording_sleep):
    handler = CountingHandler(httpx.Response(503, json={"detail": "Service unavailable"}))

    async with make_client(handler, retries=2) as client:
        with pytest.raises(NetSuiteError) as exc_info:
            await client.get(RECORD_URL)

    assert len(handler.requests) == 3
    assert recording_sleep.calls == [1.0, 2.0]
    assert exc_info.value.status == 503
    assert exc_info.value.message == "Service unavailable"


@pytest.mark.asyncio
async def test_server_error_then_success(make_client):
    handler = CountingHandler(
        httpx.Response(502, text="bad gateway"),
        httpx.Response(200, json={"ok": True}),
    )

    async with make_client(handler, retries=3) as client:
        response = await client.get(RECORD_URL)

    assert len(handler.requests) == 2
    assert response.data == {"ok": True}


@pytest.mark.asyncio
async def test_per_request_retries_override_config(make_client):
    handler = CountingHandler(httpx.Response(500, json={}))

    async with make_client(handler, retries=3) as client:
        with pytest.raises(NetSuiteError):
            await client.get(RECORD_URL, retries=0)

    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_timeout_is_normalised_and_retried(make_client):
    handler = CountingHandler(httpx.ReadTimeout("timed out"))

    async with make_client(handler, retries=1) as client:
        with pytest.raises(NetSuiteError) as exc_info:
            await client.get(RECORD_URL)

    error = exc_info.value
    assert len(handler.requests) == 2
    assert error.code == TIMEOUT
    assert error.status == 504
    assert error.kind is ErrorKind.TIMEOUT
    assert error.message == "Request timeout - NetSuite API is taking too long to respond"


# --- Middleware ---

@pytest.mark.asyncio
async def test_middleware_wraps_the_transport_call(make_client):
    events = []
    handler = CountingHandler(httpx.Response(200, json={"id": 7}))

    def tracing(name):
        async def middleware(context, next_handler):
            events.append(f"{name}:before")
            response = await next_handler()
            events.append(f"{name}:after")
            return response
        return middleware

    async def add_header(context, next_handler):
        context.options.headers["X-Trace-Id"] = "abc"
        return await next_handler()

    async with make_client(handler) as client:
        client.use(tracing("A"))
        client.use(tracing("B"))
        client.use(add_header)
        await client.get(RECORD_URL)

    assert events == ["A:before", "B:before", "B:after", "A:after"]
    assert handler.requests[0].headers["x-trace-id"] == "abc"


@pytest.mark.asyncio
async def test_middleware_runs_once_per_request_despite_retries(make_client):
    calls = []
    handler = CountingHandler(httpx.Response(503, json={}), httpx.Response(200, json={}))

    async def counting(context, next_handler):
        calls.append(context.options.url)
        return await next_handler()

    async with make_client(handler) as client:
        client.use(counting)
        await client.get(RECORD_URL)

    assert calls == [RECORD_URL]
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_short_circuit_with_error_status_raises(make_client):
    handler = CountingHandler(httpx.Response(200, json={}))

    async def not_found(context, next_handler):
        return TransportResponse(data={"title": "Not Found"}, status=404, headers={})

    async with make_client(handler) as client:
        client.use(not_found)
        with pytest.raises(NetSuiteError) as exc_info:
            await client.get(RECORD_URL)

    assert handler.requests == []
    assert exc_info.value.status == 404
    assert exc_info.value.code == HTTP_ERROR
    assert exc_info.value.details == {"title": "Not Found"}


@pytest.mark.asyncio
async def test_short_circuit_with_success_status_is_returned(make_client):
    handler = CountingHandler(httpx.Response(500, json={}))

    async def cached(context, next_handler):
        return TransportResponse(data={"id": 3}, status=200, headers={"x-cache": "hit"})

    async with make_client(handler) as client:
        client.use(cached)
        response = await client.get(RECORD_URL)

    assert handler.requests == []
    assert response.data == {"id": 3}
    assert response.headers == {"x-cache": "hit"}


# --- Logging ---

@pytest.mark.asyncio
async def test_performance_logging_when_enabled(make_client):
    logger = MagicMock()
    handler = CountingHandler(httpx.Response(200, json={}))

    async with make_client(handler, logger=logger, enable_performance_logging=True) as client:
        await client.get(RECORD_URL)

    message, meta = logger.info.call_args.args
    assert message == f"[Performance] NetSuite API GET {RECORD_URL} completed"
    assert meta["duration"] >= 0


@pytest.mark.asyncio
async def test_no_performance_log_by_default(make_client):
    logger = MagicMock()
    handler = CountingHandler(httpx.Response(200, json={}))

    async with make_client(handler, logger=logger) as client:
        await client.get(RECORD_URL)

    logger.info.assert_not_called()
    logged = [call.args[0] for call in logger.debug.call_args_list]
    assert "NetSuite API Request" in logged
    assert "NetSuite API Response" in logged


@pytest.mark.asyncio
async def test_failures_and_retries_are_logged(make_client):
    logger = MagicMock()
    handler = CountingHandler(httpx.Response(503, json={}))

    async with make_client(handler, logger=logger, retries=2) as client:
        with pytest.raises(NetSuiteError):
            await client.get(RECORD_URL)

    warnings = [call.args for call in logger.warn.call_args_list]
    assert [meta["attempt_number"] for _, meta in warnings] == [1, 2]
    assert [meta["retries_left"] for _, meta in warnings] == [2, 1]
    assert all(message == "NetSuite API retry attempt" for message, _ in warnings)

    error_messages = [call.args[0] for call in logger.error.call_args_list]
    assert f"[Performance] NetSuite API GET {RECORD_URL} failed" in error_messages


class WarnOnlyLogger:
    """Logger exposing ``warn`` but not ``warning``."""

    def __init__(self):
        self.entries = []

    def debug(self, message, meta=None):
        self.entries.append(("debug", message))

    def info(self, message, meta=None):
        self.entries.append(("info", message))

    def warn(self, message, meta=None):
        self.entries.append(("warn", message))

    def error(self, message, meta=None):
        self.entries.append(("error", message))


class WarningOnlyLogger(WarnOnlyLogger):
    """Logger exposing the stdlib style ``warning`` name only."""

    warn = None

    def warning(self, message, meta=None):
        self.entries.append(("warning", message))


@pytest.mark.asyncio
@pytest.mark.parametrize("logger_cls, level", [(WarnOnlyLogger, "warn"), (WarningOnlyLogger, "warning")])
async def test_retry_warning_reaches_either_logger_style(make_client, logger_cls, level):
    logger = logger_cls()
    handler = CountingHandler(httpx.Response(503, json={}), httpx.Response(200, json={"ok": True}))

    async with make_client(handler, logger=logger) as client:
        response = await client.get(RECORD_URL)

    assert response.data == {"ok": True}
    assert len(handler.requests) == 2
    assert (level, "NetSuite API retry attempt") in logger.entries


# --- Error helpers ---

def test_is_netsuite_error_checks_the_kind_tag():
    assert NetSuiteClient.is_netsuite_error(NetSuiteError("boom", status=500))
    assert NetSuiteClient.is_netsuite_error(SimpleNamespace(kind=ErrorKind.TRANSPORT))
    assert not NetSuiteClient.is_netsuite_error(ValueError("boom"))
    assert not NetSuiteClient.is_netsuite_error(SimpleNamespace(kind="api"))


def test_create_error_passes_netsuite_errors_through():
    original = NetSuiteError("already normalised", status=400)

    assert NetSuiteClient.create_error(original) is original


def test_create_error_from_timeout():
    error = NetSuiteClient.create_error(httpx.ConnectTimeout("slow"))

    assert (error.status, error.code, error.kind) == (504, TIMEOUT, ErrorKind.TIMEOUT)


def test_create_error_from_status_error():
    request = httpx.Request("GET", RECORD_URL)
    response = httpx.Response(
        401,
        json={"detail": "Invalid login attempt.", "o:errorDetails": [{"o:errorCode": "INVALID_LOGIN"}]},
        request=request,
    )

    error = NetSuiteClient.create_error(httpx.HTTPStatusError("401", request=request, response=response))

    assert error.message == "Invalid login attempt."
    assert error.code == "INVALID_LOGIN"
    assert error.status == 401
    assert error.kind is ErrorKind.API
    assert error.response is response


def test_create_error_from_restlet_error_body():
    request = httpx.Request("POST", RECORD_URL)
    response = httpx.Response(500, json={"error": {"code": "SSS_MISSING_REQD_ARGUMENT", "message": "id required"}}, request=request)

    error = NetSuiteClient.create_error(httpx.HTTPStatusError("500", request=request, response=response))

    assert error.message == "id required"
    assert error.code == "SSS_MISSING_REQD_ARGUMENT"


def test_create_error_from_connection_and_unknown_failures():
    transport_error = NetSuiteClient.create_error(httpx.ConnectError("refused"))
    unknown_error = NetSuiteClient.create_error(RuntimeError("weird"))

    assert (transport_error.status, transport_error.code, transport_error.kind) == (500, UNKNOWN_ERROR, ErrorKind.TRANSPORT)
    assert unknown_error.kind is ErrorKind.UNKNOWN
    assert unknown_error.message == "weird"
