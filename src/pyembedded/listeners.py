"""Update listener registry."""

from __future__ import annotations

import contextlib
import logging
from typing import Protocol

from pyembedded.session import EmbeddedSessionManager

_logger = logging.getLogger(__name__)


class EmbeddedUpdateHandler(Protocol):
    """Subscriber interface for cache changes."""

    def on_messages_updated(self) -> None:
        ...

    def on_messaging_disabled(self) -> None:
        ...


class ListenerRegistry:
    """Ordered list of update handlers.

    The same handler may be registered more than once and is then called
    once per registration. Removing a handler also ends the current
    engagement session: detaching a view counts as leaving the surface.
    """

    def __init__(self, session_manager: EmbeddedSessionManager) -> None:
        self._session_manager = session_manager
        self._listeners: list[EmbeddedUpdateHandler] = []

    def add_listener(self, listener: EmbeddedUpdateHandler) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: EmbeddedUpdateHandler) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)
        self._session_manager.end_session()

    def get_listeners(self) -> list[EmbeddedUpdateHandler]:
        return list(self._listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def notify_updated(self) -> None:
        for listener in list(self._listeners):
            _logger.debug("Calling update handler %r", listener)
            try:
                listener.on_messages_updated()
            except Exception:
                _logger.warning("Update handler %r failed", listener, exc_info=True)

    def notify_disabled(self) -> None:
        for listener in list(self._listeners):
            _logger.debug("Broadcasting messaging disabled to %r", listener)
            try:
                listener.on_messaging_disabled()
            except Exception:
                _logger.warning("Disabled handler %r failed", listener, exc_info=True)
