"""Placement model."""

from __future__ import annotations

from pydantic import Field

from pyembedded._constants import KEY_EMBEDDED_MESSAGES
from pyembedded.models._base import EmbeddedBaseModel
from pyembedded.models.message import EmbeddedMessage


class EmbeddedPlacement(EmbeddedBaseModel):
    """A slot holding an ordered sequence of embedded messages.

    Message order is the server-provided order and is the order UI
    surfaces render in.
    """

    placement_id: int
    messages: tuple[EmbeddedMessage, ...] = Field(default=(), alias=KEY_EMBEDDED_MESSAGES)

    @property
    def message_ids(self) -> tuple[str, ...]:
        return tuple(message.message_id for message in self.messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmbeddedPlacement):
            return NotImplemented
        return self.placement_id == other.placement_id and self.message_ids == other.message_ids

    def __hash__(self) -> int:
        return hash((self.placement_id, self.message_ids))
