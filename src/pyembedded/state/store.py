"""In-memory placement cache with snapshot reconciliation.

This is the only component allowed to mutate cached messages.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from pyembedded.models.message import EmbeddedMessage
from pyembedded.models.placement import EmbeddedPlacement
from pyembedded.state.diff import ReconcileResult, diff_placement, renderable

_logger = logging.getLogger(__name__)


class ReceivedTracker(Protocol):
    """Fire-and-forget sink for "message received" tracking."""

    def track_embedded_received(self, message: EmbeddedMessage) -> None:
        ...


class MessageStore:
    """Per-placement message cache.

    Every snapshot replaces the previous state wholesale. The store also
    remembers every message id it has ever cached so the received
    tracking call fires at most once per id, even when a message moves
    between placements or reappears after being removed. That memory
    lasts until :meth:`clear` (explicitly, or through an empty snapshot).
    """

    def __init__(self, tracker: ReceivedTracker | None = None) -> None:
        self._tracker = tracker
        self._messages: dict[int, tuple[EmbeddedMessage, ...]] = {}
        # dict used as an insertion-ordered set
        self._seen_message_ids: dict[str, None] = {}

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def get_messages(self, placement_id: int) -> tuple[EmbeddedMessage, ...] | None:
        return self._messages.get(placement_id)

    def get_placement_ids(self) -> tuple[int, ...]:
        return tuple(self._messages)

    @property
    def seen_message_ids(self) -> tuple[str, ...]:
        return tuple(self._seen_message_ids)

    @property
    def is_empty(self) -> bool:
        return not self._messages

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop all cached placements and the remembered id bookkeeping."""
        self._messages = {}
        self._seen_message_ids = {}

    def reconcile(self, placements: Sequence[EmbeddedPlacement]) -> ReconcileResult:
        """Apply a full snapshot and report what changed.

        Placements missing from the snapshot are dropped. Within a
        placement the cached order becomes the snapshot order. Messages
        without structured content are ignored entirely.
        """
        if not placements:
            if self.is_empty:
                return ReconcileResult(changed=False)
            removed = tuple(self._messages)
            self.clear()
            _logger.debug("Empty snapshot cleared placements=%s", removed)
            return ReconcileResult(changed=True, removed_placement_ids=removed)

        previous_cache = self._messages
        next_cache: dict[int, tuple[EmbeddedMessage, ...]] = {}
        current_ids: list[int] = []
        added_placements: list[int] = []
        added_messages: dict[int, tuple[str, ...]] = {}
        removed_messages: dict[int, tuple[str, ...]] = {}
        received: list[str] = []

        for placement in placements:
            placement_id = placement.placement_id
            if placement_id not in current_ids:
                current_ids.append(placement_id)

            incoming = renderable(placement.messages)
            for message in incoming:
                if message.message_id in self._seen_message_ids:
                    continue
                self._seen_message_ids[message.message_id] = None
                received.append(message.message_id)
                self._track_received(message)

            previous = next_cache.get(placement_id, previous_cache.get(placement_id))
            diff = diff_placement(previous or (), incoming)
            if diff.added:
                added_messages[placement_id] = diff.added
            if diff.removed:
                removed_messages[placement_id] = diff.removed

            if previous is None:
                if not diff.messages:
                    # No entry until the placement has at least one message.
                    continue
                added_placements.append(placement_id)
            next_cache[placement_id] = diff.messages

        removed_placements = tuple(placement_id for placement_id in previous_cache if placement_id not in current_ids)

        self._messages = next_cache

        changed = bool(added_messages or removed_messages or removed_placements)
        result = ReconcileResult(
            changed=changed,
            added_placement_ids=tuple(added_placements),
            removed_placement_ids=removed_placements,
            added_message_ids=added_messages,
            removed_message_ids=removed_messages,
            received_message_ids=tuple(received),
        )
        _logger.debug(
            "Reconciled placements=%s changed=%s received=%d removed_placements=%s",
            tuple(current_ids),
            changed,
            len(received),
            removed_placements,
        )
        return result

    def _track_received(self, message: EmbeddedMessage) -> None:
        if self._tracker is None:
            return
        try:
            self._tracker.track_embedded_received(message)
        except Exception:
            _logger.warning("Received tracking failed for message_id=%s", message.message_id, exc_info=True)
