from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pyembedded.models.session import EmbeddedSession
from pyembedded.session import EmbeddedSessionManager


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class _Telemetry:
    def __init__(self) -> None:
        self.sessions: list[EmbeddedSession] = []

    def track_embedded_session(self, session: EmbeddedSession) -> None:
        self.sessions.append(session)


def test_session_reported_on_end() -> None:
    clock = _Clock()
    telemetry = _Telemetry()
    manager = EmbeddedSessionManager(telemetry, clock=clock)

    manager.start_session()
    clock.advance(30)
    session = manager.end_session()

    assert session is not None
    assert telemetry.sessions == [session]
    assert session.duration == 30.0
    assert not manager.is_tracking


def test_second_start_keeps_original_session() -> None:
    clock = _Clock()
    telemetry = _Telemetry()
    manager = EmbeddedSessionManager(telemetry, clock=clock)

    manager.start_session()
    first_id = manager.session_id
    clock.advance(10)
    manager.start_session()
    clock.advance(5)
    session = manager.end_session()

    assert session is not None
    assert session.id == first_id
    assert session.duration == 15.0
    assert len(telemetry.sessions) == 1


def test_end_without_session_is_noop() -> None:
    telemetry = _Telemetry()
    manager = EmbeddedSessionManager(telemetry)

    assert manager.end_session() is None
    assert telemetry.sessions == []


def test_impressions_accumulate_until_session_end() -> None:
    clock = _Clock()
    manager = EmbeddedSessionManager(clock=clock)
    manager.start_session()

    manager.start_impression("a", 1)
    clock.advance(2)
    manager.pause_impression("a")
    clock.advance(10)
    manager.start_impression("a", 1)
    clock.advance(3)
    # still visible when the session closes
    session = manager.end_session()

    assert session is not None
    (impression,) = session.impressions
    assert impression.message_id == "a"
    assert impression.display_count == 2
    assert impression.display_duration == 5.0


def test_impression_outside_session_ignored() -> None:
    manager = EmbeddedSessionManager()

    manager.start_impression("a", 1)
    manager.start_session()
    session = manager.end_session()

    assert session is not None
    assert session.impressions == ()


def test_session_payload_uses_epoch_millis() -> None:
    clock = _Clock()
    manager = EmbeddedSessionManager(clock=clock)
    manager.start_session()
    manager.start_impression("a", 9)
    clock.advance(1.5)
    session = manager.end_session()
    assert session is not None

    payload = session.to_payload()

    start_ms = int(datetime(2026, 1, 1, tzinfo=UTC).timestamp() * 1000)
    assert payload["session"] == {"id": session.id, "start": start_ms, "end": start_ms + 1500}
    assert payload["impressions"] == [
        {"messageId": "a", "displayCount": 1, "displayDuration": 1.5, "placementId": 9},
    ]
