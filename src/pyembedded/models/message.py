"""Embedded message models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyembedded.models._base import EmbeddedBaseModel


class EmbeddedMessageMetadata(EmbeddedBaseModel):
    """Identifiers attached to every embedded message."""

    message_id: str
    """Stable unique message id."""
    placement_id: int | None = None
    """Placement the server assigned the message to."""
    campaign_id: int | None = None
    is_proof: bool = False
    """Whether this is a proof sent from the campaign editor."""


class EmbeddedMessageAction(EmbeddedBaseModel):
    """Action attached to a button or to the message body."""

    type: str
    data: str | None = None


class EmbeddedMessageButton(EmbeddedBaseModel):
    id: str
    title: str | None = None
    action: EmbeddedMessageAction | None = None


class EmbeddedMessageText(EmbeddedBaseModel):
    id: str
    text: str | None = None
    label: str | None = None


class EmbeddedMessageElements(EmbeddedBaseModel):
    """Structured rendering content of a message."""

    title: str | None = None
    body: str | None = None
    media_url: str | None = None
    media_url_caption: str | None = None
    default_action: EmbeddedMessageAction | None = None
    buttons: tuple[EmbeddedMessageButton, ...] = ()
    text: tuple[EmbeddedMessageText, ...] = ()


class EmbeddedMessage(EmbeddedBaseModel):
    """One embedded content item.

    Two messages compare equal when their ``message_id`` matches,
    regardless of content. A message without ``elements`` is a
    transport-only manifest entry and never enters the local cache.
    """

    metadata: EmbeddedMessageMetadata
    elements: EmbeddedMessageElements | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    """Custom key/value payload, opaque to the library."""

    @property
    def message_id(self) -> str:
        return self.metadata.message_id

    @property
    def has_elements(self) -> bool:
        return self.elements is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmbeddedMessage):
            return NotImplemented
        return self.message_id == other.message_id

    def __hash__(self) -> int:
        return hash(self.message_id)
