"""App foreground/background signal fan-out."""

from __future__ import annotations

import contextlib
import logging
from typing import Protocol

_logger = logging.getLogger(__name__)


class AppStateCallback(Protocol):
    def on_switch_to_foreground(self) -> None:
        ...

    def on_switch_to_background(self) -> None:
        ...


class AppStateMonitor:
    """Relay app state transitions to registered callbacks.

    The host application calls :meth:`switch_to_foreground` and
    :meth:`switch_to_background`; repeated signals for the state the
    monitor is already in are ignored.
    """

    def __init__(self, *, in_foreground: bool = False) -> None:
        self._in_foreground = in_foreground
        self._callbacks: list[AppStateCallback] = []

    @property
    def is_in_foreground(self) -> bool:
        return self._in_foreground

    def add_callback(self, callback: AppStateCallback) -> None:
        self._callbacks.append(callback)

    def remove_callback(self, callback: AppStateCallback) -> None:
        with contextlib.suppress(ValueError):
            self._callbacks.remove(callback)

    def switch_to_foreground(self) -> None:
        if self._in_foreground:
            return
        self._in_foreground = True
        _logger.debug("App switched to foreground")
        for callback in list(self._callbacks):
            try:
                callback.on_switch_to_foreground()
            except Exception:
                _logger.warning("Foreground callback %r failed", callback, exc_info=True)

    def switch_to_background(self) -> None:
        if not self._in_foreground:
            return
        self._in_foreground = False
        _logger.debug("App switched to background")
        for callback in list(self._callbacks):
            try:
                callback.on_switch_to_background()
            except Exception:
                _logger.warning("Background callback %r failed", callback, exc_info=True)
