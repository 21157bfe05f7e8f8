"""Pure diffing helpers for placement reconciliation.

Nothing in here touches the cache or fires side effects; the store
combines these results with its own bookkeeping.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from pyembedded.models.message import EmbeddedMessage


class PlacementDiff(BaseModel):
    """Outcome of diffing one placement against its cached list."""

    model_config = ConfigDict(frozen=True)

    messages: tuple[EmbeddedMessage, ...] = ()
    """New ordered list, in snapshot order."""
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class ReconcileResult(BaseModel):
    """Outcome of one reconciliation pass."""

    model_config = ConfigDict(frozen=True)

    changed: bool = False
    added_placement_ids: tuple[int, ...] = ()
    removed_placement_ids: tuple[int, ...] = ()
    added_message_ids: dict[int, tuple[str, ...]] = Field(default_factory=dict)
    removed_message_ids: dict[int, tuple[str, ...]] = Field(default_factory=dict)
    received_message_ids: tuple[str, ...] = ()
    """Ids seen for the first time in this pass."""


def renderable(messages: Iterable[EmbeddedMessage]) -> list[EmbeddedMessage]:
    """Keep messages with structured content, first occurrence of each id."""
    result: list[EmbeddedMessage] = []
    seen: set[str] = set()
    for message in messages:
        if not message.has_elements or message.message_id in seen:
            continue
        seen.add(message.message_id)
        result.append(message)
    return result


def diff_placement(
    previous: Sequence[EmbeddedMessage],
    incoming: Sequence[EmbeddedMessage],
) -> PlacementDiff:
    """Diff a cached placement list against its incoming list.

    *incoming* must already be filtered through :func:`renderable`. The
    returned list follows the incoming order; an id counts as added when
    it was not cached for this placement and as removed when it is no
    longer present.
    """
    previous_ids = [message.message_id for message in previous]
    previous_set = set(previous_ids)
    incoming_set = {message.message_id for message in incoming}

    return PlacementDiff(
        messages=tuple(incoming),
        added=tuple(message.message_id for message in incoming if message.message_id not in previous_set),
        removed=tuple(message_id for message_id in previous_ids if message_id not in incoming_set),
    )
