"""HTTP transport with API-key authentication and failure classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, NoReturn, Protocol

import aiohttp

from pyembedded._constants import (
    INVALID_API_KEY_MARKERS,
    SUBSCRIPTION_INACTIVE_MARKERS,
    USER_AGENT,
)
from pyembedded._redact import redact_for_log
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import (
    EmbeddedApiError,
    EmbeddedInvalidApiKeyError,
    EmbeddedSubscriptionInactiveError,
    EmbeddedTransportError,
)

_logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str]]


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: QueryParams) -> dict[str, Any]:
        ...

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> dict[str, Any]:
        ...


def _matches(value: Any, markers: frozenset[str]) -> bool:
    return isinstance(value, str) and value.strip().lower() in markers


def raise_for_failure(
    body: Mapping[str, Any],
    *,
    endpoint: str,
    status_code: int | None = None,
) -> NoReturn:
    """Map an error response body onto the exception taxonomy.

    The server reports failures as ``{"code": ..., "msg": ...}``. Fatal
    kinds are recognised by code first and by message second; both
    comparisons ignore case. Anything else is transient.
    """
    code = body.get("code")
    msg = body.get("msg") or body.get("message") or ""
    code_str = str(code) if code is not None else ""

    if _matches(code, SUBSCRIPTION_INACTIVE_MARKERS) or _matches(msg, SUBSCRIPTION_INACTIVE_MARKERS):
        raise EmbeddedSubscriptionInactiveError(
            f"{endpoint} failed: subscription inactive ({msg or code_str})",
            code=code_str,
            endpoint=endpoint,
        )
    if _matches(code, INVALID_API_KEY_MARKERS) or _matches(msg, INVALID_API_KEY_MARKERS):
        raise EmbeddedInvalidApiKeyError(
            f"{endpoint} failed: invalid API key ({msg or code_str})",
            code=code_str,
            endpoint=endpoint,
        )
    if status_code is not None and 400 <= status_code < 500 and code_str:
        raise EmbeddedApiError(
            f"{endpoint} failed: code={code_str} message={msg}",
            code=code_str,
            endpoint=endpoint,
        )
    raise EmbeddedTransportError(
        f"HTTP {status_code} from {endpoint}: {msg or code_str}",
        status_code=status_code,
        endpoint=endpoint,
    )


class HttpTransport:
    """aiohttp transport that signs every request with the project API key."""

    def __init__(self, config: EmbeddedConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "Api-Key": self._config.api_key,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "SDK-Platform": self._config.platform,
            "SDK-Version": self._config.sdk_version,
        }
        if self._config.auth_token:
            headers["Authorization"] = f"Bearer {self._config.auth_token}"
        return headers

    def _url(self, endpoint: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    async def get_json(self, endpoint: str, params: QueryParams) -> dict[str, Any]:
        if self._config.api_trace_enabled:
            _logger.debug("GET %s params=%s", endpoint, redact_for_log(list(params)))
        return await self._request("GET", endpoint, params=list(params))

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> dict[str, Any]:
        if self._config.api_trace_enabled:
            _logger.debug("POST %s body=%s", endpoint, redact_for_log(body))
        return await self._request("POST", endpoint, data=json.dumps(body, separators=(",", ":")))

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        url = self._url(endpoint)
        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._timeout,
                **kwargs,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise EmbeddedTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise EmbeddedTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            if 200 <= status < 300:
                raise EmbeddedTransportError(
                    f"Invalid JSON from {endpoint}: {text[:200]}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc
            body_json = {"msg": text[:200]}

        if not isinstance(body_json, dict):
            raise EmbeddedTransportError(
                f"Unexpected JSON document from {endpoint}: {type(body_json).__name__}",
                status_code=status,
                endpoint=endpoint,
            )

        if self._config.api_trace_enabled:
            _logger.debug("%s %s -> %d %s", method, endpoint, status, redact_for_log(body_json))

        if not 200 <= status < 300:
            raise_for_failure(body_json, endpoint=endpoint, status_code=status)

        return body_json
