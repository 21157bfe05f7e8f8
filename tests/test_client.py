from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

import pytest

from pyembedded.client import EmbeddedClient
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import EmbeddedConfigError, EmbeddedError, EmbeddedTransportError
from pyembedded.manager import EmbeddedManager
from pyembedded.models.message import EmbeddedMessage
from pyembedded.models.session import EmbeddedSession


class _RecordingTransport:
    def __init__(self, response: dict[str, Any] | None = None, *, fail_posts: bool = False) -> None:
        self._response = response or {}
        self._fail_posts = fail_posts
        self.gets: list[tuple[str, list[tuple[str, str]]]] = []
        self.posts: list[tuple[str, dict[str, Any]]] = []

    async def get_json(self, endpoint: str, params: Sequence[tuple[str, str]]) -> dict[str, Any]:
        self.gets.append((endpoint, list(params)))
        return self._response

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> dict[str, Any]:
        self.posts.append((endpoint, dict(body)))
        if self._fail_posts:
            raise EmbeddedTransportError("HTTP 500", status_code=500, endpoint=endpoint)
        return {"code": "Success"}


def _config(**overrides: Any) -> EmbeddedConfig:
    return EmbeddedConfig(api_key="key-123", user_id="user-1", package_name="com.example.app", **overrides)


_RESPONSE = {
    "placements": [
        {
            "placementId": 10,
            "embeddedMessages": [
                {"metadata": {"messageId": "a"}, "elements": {"title": "A"}},
                {"metadata": {"messageId": "b"}, "elements": {"title": "B"}},
            ],
        }
    ]
}


def test_invalid_config_rejected() -> None:
    with pytest.raises(EmbeddedConfigError):
        EmbeddedClient(EmbeddedConfig(api_key="key"))


@pytest.mark.asyncio
async def test_requires_context_manager() -> None:
    client = EmbeddedClient(_config())

    with pytest.raises(EmbeddedError):
        await client.fetch_snapshot([])


@pytest.mark.asyncio
async def test_fetch_snapshot_sends_identity_and_known_ids() -> None:
    transport = _RecordingTransport(_RESPONSE)

    async with EmbeddedClient(_config(), transport=transport) as client:
        placements = await client.get_placements(["x", "y"])

    assert [p.placement_id for p in placements] == [10]
    ((endpoint, params),) = transport.gets
    assert endpoint == "embedded-messaging/messages"
    assert ("userId", "user-1") in params
    assert ("packageName", "com.example.app") in params
    assert [v for k, v in params if k == "currentMessageIds"] == ["x", "y"]


@pytest.mark.asyncio
async def test_manager_with_client_tracks_received_once() -> None:
    transport = _RecordingTransport(_RESPONSE)

    async with EmbeddedClient(_config(), transport=transport) as client:
        manager = EmbeddedManager(client, tracker=client, telemetry=client)
        await manager.sync()
        await manager.sync()

    received = [body["messageId"] for endpoint, body in transport.posts if endpoint.endswith("/received")]
    assert received == ["a", "b"]
    assert transport.posts[0][1]["userId"] == "user-1"
    assert transport.posts[0][1]["deviceInfo"]["appPackageName"] == "com.example.app"


@pytest.mark.asyncio
async def test_session_tracking_posts_session_body() -> None:
    transport = _RecordingTransport()
    session = EmbeddedSession(
        id="s-1",
        start=datetime(2026, 1, 1, tzinfo=UTC),
        end=datetime(2026, 1, 1, 0, 0, 5, tzinfo=UTC),
    )

    async with EmbeddedClient(_config(), transport=transport) as client:
        client.track_embedded_session(session)

    ((endpoint, body),) = transport.posts
    assert endpoint == "embedded-messaging/events/session"
    assert body["session"]["id"] == "s-1"
    assert body["session"]["end"] - body["session"]["start"] == 5000
    assert body["impressions"] == []


@pytest.mark.asyncio
async def test_tracking_failure_is_not_raised() -> None:
    transport = _RecordingTransport(fail_posts=True)
    message = EmbeddedMessage.model_validate({"metadata": {"messageId": "a"}, "elements": {}})

    async with EmbeddedClient(_config(), transport=transport) as client:
        client.track_embedded_received(message)
        await client.flush()

    assert len(transport.posts) == 1
