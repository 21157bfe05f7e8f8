"""Embedded messaging tracking endpoints.

Endpoints:
  - POST embedded-messaging/events/received
  - POST embedded-messaging/events/session
"""

from __future__ import annotations

import logging
from typing import Any

from pyembedded._constants import ENDPOINT_EMBEDDED_RECEIVED, ENDPOINT_EMBEDDED_SESSION
from pyembedded._transport import Transport
from pyembedded.config import EmbeddedConfig
from pyembedded.models.message import EmbeddedMessage
from pyembedded.models.session import EmbeddedSession

_logger = logging.getLogger(__name__)


def _device_info(config: EmbeddedConfig) -> dict[str, Any]:
    info: dict[str, Any] = {
        "platform": config.platform,
        "sdkVersion": config.sdk_version,
    }
    if config.package_name:
        info["appPackageName"] = config.package_name
    return info


def build_received_body(config: EmbeddedConfig, message: EmbeddedMessage) -> dict[str, Any]:
    return {
        **config.identity_params(),
        "messageId": message.message_id,
        "deviceInfo": _device_info(config),
    }


def build_session_body(config: EmbeddedConfig, session: EmbeddedSession) -> dict[str, Any]:
    return {
        **config.identity_params(),
        **session.to_payload(),
        "deviceInfo": _device_info(config),
    }


async def post_received(
    config: EmbeddedConfig,
    transport: Transport,
    message: EmbeddedMessage,
) -> dict[str, Any]:
    """Report that *message* was delivered to this device."""
    response = await transport.post_json(ENDPOINT_EMBEDDED_RECEIVED, build_received_body(config, message))
    _logger.debug("Tracked embedded received message_id=%s", message.message_id)
    return response


async def post_session(
    config: EmbeddedConfig,
    transport: Transport,
    session: EmbeddedSession,
) -> dict[str, Any]:
    """Report a closed engagement session with its impressions."""
    response = await transport.post_json(ENDPOINT_EMBEDDED_SESSION, build_session_body(config, session))
    _logger.debug(
        "Tracked embedded session id=%s duration=%.1fs impressions=%d",
        session.id,
        session.duration,
        len(session.impressions),
    )
    return response
