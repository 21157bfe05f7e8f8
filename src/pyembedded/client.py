"""High-level async client for the embedded messaging API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Iterable
from typing import Any

import aiohttp

from pyembedded._api import events as _events_api
from pyembedded._api import messages as _messages_api
from pyembedded._transport import HttpTransport, Transport
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import EmbeddedError
from pyembedded.models.message import EmbeddedMessage
from pyembedded.models.placement import EmbeddedPlacement
from pyembedded.models.session import EmbeddedSession

_logger = logging.getLogger(__name__)


class EmbeddedClient:
    """Async client for the embedded messaging API.

    Implements the fetch, received-tracking and session-telemetry
    collaborators used by :class:`~pyembedded.manager.EmbeddedManager`.

    Usage::

        async with EmbeddedClient(config) as client:
            placements = await client.get_placements()
    """

    def __init__(
        self,
        config: EmbeddedConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> EmbeddedClient:
        self._loop = asyncio.get_running_loop()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.flush()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
        self._http_session = None
        if not self._external_transport:
            self._transport = None
        self._loop = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise EmbeddedError("Client not initialized. Use 'async with EmbeddedClient(...) as client:'")
        return self._transport

    def _fire_and_forget(self, label: str, coro: Coroutine[Any, Any, Any]) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            coro.close()
            _logger.warning("Dropping %s: client is not running", label)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(lambda t: self._on_tracking_done(label, t))

    def _on_tracking_done(self, label: str, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("%s failed: %s", label, exc)

    async def flush(self) -> None:
        """Wait for outstanding tracking calls to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def fetch_snapshot(self, known_message_ids: Iterable[str]) -> dict[str, Any]:
        """Fetch the raw placements payload."""
        transport = self._require_transport()
        return await _messages_api.fetch_embedded_messages(self._config, transport, known_message_ids)

    async def get_placements(self, known_message_ids: Iterable[str] = ()) -> list[EmbeddedPlacement]:
        """Fetch and decode placements."""
        data = await self.fetch_snapshot(known_message_ids)
        return _messages_api.parse_placements(data)

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def track_embedded_received(self, message: EmbeddedMessage) -> None:
        transport = self._require_transport()
        self._fire_and_forget(
            f"received tracking for {message.message_id}",
            _events_api.post_received(self._config, transport, message),
        )

    def track_embedded_session(self, session: EmbeddedSession) -> None:
        transport = self._require_transport()
        self._fire_and_forget(
            f"session tracking for {session.id}",
            _events_api.post_session(self._config, transport, session),
        )
