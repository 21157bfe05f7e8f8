"""Embedded messages endpoint and payload decoding.

Endpoint:
  - GET embedded-messaging/messages  (full placements snapshot)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from pyembedded._constants import (
    ENDPOINT_EMBEDDED_MESSAGES,
    KEY_CURRENT_MESSAGE_IDS,
    KEY_PLACEMENTS,
)
from pyembedded._transport import Transport
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import EmbeddedPayloadError
from pyembedded.models.placement import EmbeddedPlacement

_logger = logging.getLogger(__name__)


def build_messages_params(
    config: EmbeddedConfig,
    known_message_ids: Iterable[str],
) -> list[tuple[str, str]]:
    """Build query parameters for the messages request.

    ``currentMessageIds`` is repeated once per id already seen locally so
    the server can skip re-sending unchanged content.
    """
    params: list[tuple[str, str]] = list(config.identity_params().items())
    params.append(("platform", config.platform))
    params.append(("SDKVersion", config.sdk_version))
    if config.package_name:
        params.append(("packageName", config.package_name))
    params.extend((KEY_CURRENT_MESSAGE_IDS, message_id) for message_id in known_message_ids)
    return params


async def fetch_embedded_messages(
    config: EmbeddedConfig,
    transport: Transport,
    known_message_ids: Iterable[str],
) -> dict[str, Any]:
    """Fetch the raw placements payload.

    Returns
    -------
    dict
        Decoded JSON body, to be passed to :func:`parse_placements`.
    """
    params = build_messages_params(config, known_message_ids)
    data = await transport.get_json(ENDPOINT_EMBEDDED_MESSAGES, params)
    _logger.debug("Got response from embedded messages endpoint")
    return data


def parse_placements(data: Any) -> list[EmbeddedPlacement]:
    """Decode a placements payload into ordered placement models.

    A missing, ``null`` or empty ``placements`` array is a valid payload
    and yields an empty list.

    Raises
    ------
    EmbeddedPayloadError
        When the payload does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise EmbeddedPayloadError(f"Expected a JSON object, got {type(data).__name__}")

    raw_placements = data.get(KEY_PLACEMENTS)
    if raw_placements is None:
        _logger.debug("No placements array in embedded messages response")
        return []
    if not isinstance(raw_placements, list):
        raise EmbeddedPayloadError(f"'{KEY_PLACEMENTS}' must be an array, got {type(raw_placements).__name__}")

    placements: list[EmbeddedPlacement] = []
    for index, raw in enumerate(raw_placements):
        if not isinstance(raw, dict):
            raise EmbeddedPayloadError(f"Placement #{index} is not an object")
        try:
            placements.append(EmbeddedPlacement.model_validate(raw))
        except ValidationError as exc:
            raise EmbeddedPayloadError(f"Placement #{index} is malformed: {exc}") from exc
    return placements
