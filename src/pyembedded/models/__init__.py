"""Data models for embedded messaging payloads."""

from pyembedded.models._base import EmbeddedBaseModel
from pyembedded.models.action import ACTION_TYPE_OPEN_URL, ActionSource, EmbeddedAction
from pyembedded.models.message import (
    EmbeddedMessage,
    EmbeddedMessageAction,
    EmbeddedMessageButton,
    EmbeddedMessageElements,
    EmbeddedMessageMetadata,
    EmbeddedMessageText,
)
from pyembedded.models.placement import EmbeddedPlacement
from pyembedded.models.session import EmbeddedImpression, EmbeddedSession

__all__ = [
    "ACTION_TYPE_OPEN_URL",
    "ActionSource",
    "EmbeddedAction",
    "EmbeddedBaseModel",
    "EmbeddedImpression",
    "EmbeddedMessage",
    "EmbeddedMessageAction",
    "EmbeddedMessageButton",
    "EmbeddedMessageElements",
    "EmbeddedMessageMetadata",
    "EmbeddedMessageText",
    "EmbeddedPlacement",
    "EmbeddedSession",
]
