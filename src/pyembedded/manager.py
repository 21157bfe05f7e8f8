"""Sync orchestration for embedded messages.

One :class:`EmbeddedManager` owns the placement cache, the listener
registry and the engagement session for a single user. It is driven by
app state transitions and by explicit :meth:`EmbeddedManager.sync`
calls, and runs on a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any, Protocol

from pyembedded._api.messages import parse_placements
from pyembedded.actions import ActionRunner, resolve_click_action
from pyembedded.exceptions import EmbeddedError, EmbeddedMessagingDisabledError, EmbeddedPayloadError
from pyembedded.lifecycle import AppStateMonitor
from pyembedded.listeners import EmbeddedUpdateHandler, ListenerRegistry
from pyembedded.models.action import ActionSource
from pyembedded.models.message import EmbeddedMessage
from pyembedded.models.placement import EmbeddedPlacement
from pyembedded.session import EmbeddedSessionManager, SessionTelemetry
from pyembedded.state.diff import ReconcileResult
from pyembedded.state.store import MessageStore, ReceivedTracker

_logger = logging.getLogger(__name__)

SnapshotParser = Callable[[Any], Sequence[EmbeddedPlacement]]


class SnapshotFetcher(Protocol):
    """Fetches the raw placements payload for the current user."""

    async def fetch_snapshot(self, known_message_ids: Sequence[str]) -> dict[str, Any]:
        ...


class SyncState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    NOTIFYING = "notifying"
    DISABLED = "disabled"


class EmbeddedManager:
    """Keep the local placement cache in step with the server.

    Usage::

        async with EmbeddedClient(config) as client:
            manager = EmbeddedManager(client, tracker=client, telemetry=client)
            manager.add_listener(view)
            await manager.sync()
            messages = manager.get_messages(placement_id)

    Overlapping :meth:`sync` calls are allowed. Each call is numbered
    and a response is dropped when a newer call has already been
    applied, so the cache never moves back to an older snapshot.
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        *,
        tracker: ReceivedTracker | None = None,
        telemetry: SessionTelemetry | None = None,
        action_runner: ActionRunner | None = None,
        context: Any = None,
        parser: SnapshotParser = parse_placements,
        app_state: AppStateMonitor | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._parser = parser
        self._action_runner = action_runner
        self._context = context
        self._loop = loop
        self._store = MessageStore(tracker)
        self._session_manager = EmbeddedSessionManager(telemetry)
        self._listeners = ListenerRegistry(self._session_manager)
        self._state = SyncState.IDLE
        self._disabled = False
        self._cycle = 0
        self._applied_cycle = 0
        self._tasks: set[asyncio.Task[ReconcileResult | None]] = set()
        self._app_state = app_state
        if app_state is not None:
            app_state.add_callback(self)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_disabled(self) -> bool:
        """Whether the last completed cycle hit a fatal failure."""
        return self._disabled

    @property
    def session_manager(self) -> EmbeddedSessionManager:
        return self._session_manager

    @property
    def store(self) -> MessageStore:
        return self._store

    def get_messages(self, placement_id: int) -> tuple[EmbeddedMessage, ...] | None:
        """Cached messages of a placement without syncing."""
        return self._store.get_messages(placement_id)

    def get_placement_ids(self) -> tuple[int, ...]:
        return self._store.get_placement_ids()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: EmbeddedUpdateHandler) -> None:
        self._listeners.add_listener(listener)

    def remove_listener(self, listener: EmbeddedUpdateHandler) -> None:
        self._listeners.remove_listener(listener)

    def get_listeners(self) -> list[EmbeddedUpdateHandler]:
        return self._listeners.get_listeners()

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget all cached messages. Listeners are not notified."""
        self._store.clear()
        _logger.debug("Embedded message cache reset")

    async def sync(self) -> ReconcileResult | None:
        """Run one fetch-reconcile-notify cycle.

        Never raises for fetch or payload failures. Returns the
        reconciliation result, or ``None`` when the cycle was aborted.
        """
        self._cycle += 1
        cycle = self._cycle
        _logger.debug("Syncing messages cycle=%d", cycle)
        self._state = SyncState.FETCHING

        try:
            data = await self._fetcher.fetch_snapshot(self._store.seen_message_ids)
            placements = self._parser(data)
        except EmbeddedMessagingDisabledError as exc:
            _logger.error("Embedded messaging is disabled, stopping sync: %s", exc)
            self._disabled = True
            self._state = SyncState.DISABLED
            self._listeners.notify_disabled()
            return None
        except EmbeddedPayloadError as exc:
            _logger.error("Could not parse embedded messages response: %s", exc)
            self._state = SyncState.IDLE
            return None
        except EmbeddedError as exc:
            _logger.error("Error while fetching embedded messages: %s", exc)
            self._state = SyncState.IDLE
            return None
        except Exception:
            _logger.exception("Unexpected error while fetching embedded messages")
            self._state = SyncState.IDLE
            return None

        if cycle < self._applied_cycle:
            _logger.debug("Discarding stale response cycle=%d applied=%d", cycle, self._applied_cycle)
            return None
        self._applied_cycle = cycle
        self._disabled = False

        self._state = SyncState.RECONCILING
        result = self._store.reconcile(placements)
        if result.changed:
            self._state = SyncState.NOTIFYING
            self._listeners.notify_updated()
        self._state = SyncState.IDLE
        return result

    def schedule_sync(self) -> asyncio.Task[ReconcileResult | None] | None:
        """Start :meth:`sync` in the background on the owning loop."""
        try:
            loop = self._loop or asyncio.get_running_loop()
        except RuntimeError:
            _logger.warning("No running event loop; sync not scheduled")
            return None
        task = loop.create_task(self.sync())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_pending(self) -> None:
        """Wait for every background sync started by :meth:`schedule_sync`."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------

    def handle_click(self, message: EmbeddedMessage, button_id: str | None, url: str | None) -> None:
        """Dispatch a click on *message* (or one of its buttons)."""
        action = resolve_click_action(url)
        if action is None:
            return
        _logger.debug(
            "Embedded click message_id=%s button=%s action=%s",
            message.message_id,
            button_id,
            action.type,
        )
        if self._action_runner is None:
            _logger.debug("No action runner configured; click ignored")
            return
        self._action_runner.execute_action(self._context, action, ActionSource.EMBEDDED)

    # ------------------------------------------------------------------
    # App state
    # ------------------------------------------------------------------

    def on_switch_to_foreground(self) -> None:
        self._session_manager.start_session()
        self.schedule_sync()

    def on_switch_to_background(self) -> None:
        self._session_manager.end_session()

    def close(self) -> None:
        """Detach from the app state monitor."""
        if self._app_state is not None:
            self._app_state.remove_callback(self)
            self._app_state = None
