from __future__ import annotations

import json
from typing import Any

import aiohttp
import pytest

from pyembedded._transport import HttpTransport, raise_for_failure
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import (
    EmbeddedApiError,
    EmbeddedInvalidApiKeyError,
    EmbeddedMessagingDisabledError,
    EmbeddedSubscriptionInactiveError,
    EmbeddedTransportError,
)


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeHttp:
    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        *,
        text: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._status = status
        self._text = text if text is not None else json.dumps(body if body is not None else {})
        self._error = error
        self.requests: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self._error is not None:
            raise self._error
        return _FakeResponse(self._status, self._text)


def _config(**overrides: Any) -> EmbeddedConfig:
    return EmbeddedConfig(api_key="key-123", email="user@example.com", **overrides)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"code": "SUBSCRIPTION_INACTIVE", "msg": "Subscription inactive"}, EmbeddedSubscriptionInactiveError),
        ({"code": "Subscription_Inactive"}, EmbeddedSubscriptionInactiveError),
        ({"code": "InvalidApiKey", "msg": "Invalid API key"}, EmbeddedInvalidApiKeyError),
        ({"msg": "INVALID API KEY"}, EmbeddedInvalidApiKeyError),
    ],
)
def test_fatal_failures_are_tagged(body: dict[str, Any], expected: type[Exception]) -> None:
    with pytest.raises(expected) as exc_info:
        raise_for_failure(body, endpoint="embedded-messaging/messages", status_code=401)

    assert isinstance(exc_info.value, EmbeddedMessagingDisabledError)
    assert exc_info.value.endpoint == "embedded-messaging/messages"


def test_other_client_error_is_api_error() -> None:
    with pytest.raises(EmbeddedApiError) as exc_info:
        raise_for_failure({"code": "BadParams", "msg": "missing email"}, endpoint="x", status_code=400)

    assert not isinstance(exc_info.value, EmbeddedMessagingDisabledError)
    assert exc_info.value.code == "BadParams"


def test_server_error_is_transport_error() -> None:
    with pytest.raises(EmbeddedTransportError) as exc_info:
        raise_for_failure({"msg": "oops"}, endpoint="x", status_code=503)

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_get_json_sends_headers_and_params() -> None:
    http = _FakeHttp(body={"placements": []})
    transport = HttpTransport(_config(auth_token="jwt-abc"), http)  # type: ignore[arg-type]

    result = await transport.get_json("embedded-messaging/messages", [("email", "user@example.com")])

    assert result == {"placements": []}
    (request,) = http.requests
    assert request["method"] == "GET"
    assert request["url"] == "https://api.iterable.com/api/embedded-messaging/messages"
    assert request["params"] == [("email", "user@example.com")]
    assert request["headers"]["Api-Key"] == "key-123"
    assert request["headers"]["Authorization"] == "Bearer jwt-abc"


@pytest.mark.asyncio
async def test_post_json_encodes_body() -> None:
    http = _FakeHttp(body={"code": "Success"})
    transport = HttpTransport(_config(), http)  # type: ignore[arg-type]

    await transport.post_json("embedded-messaging/events/received", {"messageId": "m"})

    (request,) = http.requests
    assert request["method"] == "POST"
    assert json.loads(request["data"]) == {"messageId": "m"}
    assert "Authorization" not in request["headers"]


@pytest.mark.asyncio
async def test_error_status_is_classified() -> None:
    http = _FakeHttp(401, {"code": "InvalidApiKey", "msg": "Invalid API key"})
    transport = HttpTransport(_config(), http)  # type: ignore[arg-type]

    with pytest.raises(EmbeddedInvalidApiKeyError):
        await transport.get_json("embedded-messaging/messages", [])


@pytest.mark.asyncio
async def test_non_json_error_body_is_transport_error() -> None:
    http = _FakeHttp(502, text="<html>Bad gateway</html>")
    transport = HttpTransport(_config(), http)  # type: ignore[arg-type]

    with pytest.raises(EmbeddedTransportError) as exc_info:
        await transport.get_json("embedded-messaging/messages", [])

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_invalid_json_success_body_is_transport_error() -> None:
    http = _FakeHttp(200, text="not json")
    transport = HttpTransport(_config(), http)  # type: ignore[arg-type]

    with pytest.raises(EmbeddedTransportError):
        await transport.get_json("embedded-messaging/messages", [])


@pytest.mark.asyncio
async def test_client_error_is_wrapped() -> None:
    http = _FakeHttp(error=aiohttp.ClientConnectionError("connection refused"))
    transport = HttpTransport(_config(), http)  # type: ignore[arg-type]

    with pytest.raises(EmbeddedTransportError) as exc_info:
        await transport.get_json("embedded-messaging/messages", [])

    assert "connection refused" in str(exc_info.value)
