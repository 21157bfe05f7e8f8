"""Engagement session tracking.

A session spans one foreground period of the app. While it is open the
manager also accumulates per-message impressions; closing the session
hands the result to a telemetry collaborator.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from pyembedded.models.session import EmbeddedImpression, EmbeddedSession

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionTelemetry(Protocol):
    """Receives closed sessions."""

    def track_embedded_session(self, session: EmbeddedSession) -> None:
        ...


@dataclass(slots=True)
class _ImpressionTracker:
    message_id: str
    placement_id: int | None
    display_count: int = 0
    duration: float = 0.0
    started_at: datetime | None = None

    def resume(self, now: datetime) -> None:
        if self.started_at is not None:
            return
        self.display_count += 1
        self.started_at = now

    def pause(self, now: datetime) -> None:
        if self.started_at is None:
            return
        self.duration += (now - self.started_at).total_seconds()
        self.started_at = None

    def snapshot(self) -> EmbeddedImpression:
        return EmbeddedImpression(
            message_id=self.message_id,
            placement_id=self.placement_id,
            display_count=self.display_count,
            display_duration=self.duration,
        )


class EmbeddedSessionManager:
    """Start/end an engagement session on app state transitions."""

    def __init__(
        self,
        telemetry: SessionTelemetry | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._telemetry = telemetry
        self._clock = clock
        self._session_id: str | None = None
        self._started_at: datetime | None = None
        self._impressions: dict[str, _ImpressionTracker] = {}

    @property
    def is_tracking(self) -> bool:
        return self._started_at is not None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def start_session(self) -> None:
        """Open a session; a second call while one is open is ignored."""
        if self.is_tracking:
            _logger.warning("Embedded session started twice; keeping session id=%s", self._session_id)
            return
        self._session_id = str(uuid.uuid4())
        self._started_at = self._clock()
        self._impressions = {}
        _logger.debug("Embedded session started id=%s", self._session_id)

    def end_session(self) -> EmbeddedSession | None:
        """Close the open session and report it. No-op when idle."""
        if not self.is_tracking:
            _logger.debug("Embedded session end requested with no active session")
            return None
        assert self._started_at is not None  # noqa: S101
        assert self._session_id is not None  # noqa: S101

        now = self._clock()
        for impression in self._impressions.values():
            impression.pause(now)

        session = EmbeddedSession(
            id=self._session_id,
            start=self._started_at,
            end=now,
            impressions=tuple(impression.snapshot() for impression in self._impressions.values()),
        )
        self._session_id = None
        self._started_at = None
        self._impressions = {}
        _logger.debug("Embedded session ended id=%s duration=%.1fs", session.id, session.duration)

        if self._telemetry is not None:
            try:
                self._telemetry.track_embedded_session(session)
            except Exception:
                _logger.warning("Session telemetry failed for id=%s", session.id, exc_info=True)
        return session

    def start_impression(self, message_id: str, placement_id: int | None = None) -> None:
        """Mark *message_id* as visible. Ignored outside a session."""
        if not self.is_tracking:
            _logger.debug("Impression for message_id=%s outside of a session ignored", message_id)
            return
        tracker = self._impressions.get(message_id)
        if tracker is None:
            tracker = _ImpressionTracker(message_id=message_id, placement_id=placement_id)
            self._impressions[message_id] = tracker
        tracker.resume(self._clock())

    def pause_impression(self, message_id: str) -> None:
        """Mark *message_id* as no longer visible."""
        tracker = self._impressions.get(message_id)
        if tracker is None:
            return
        tracker.pause(self._clock())
