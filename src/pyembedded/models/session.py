"""Session telemetry models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class EmbeddedImpression(BaseModel):
    """Accumulated display statistics of one message within a session."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    placement_id: int | None = None
    display_count: int = 0
    display_duration: float = 0.0
    """Total seconds the message was on screen."""

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "messageId": self.message_id,
            "displayCount": self.display_count,
            "displayDuration": round(self.display_duration, 3),
        }
        if self.placement_id is not None:
            payload["placementId"] = self.placement_id
        return payload


class EmbeddedSession(BaseModel):
    """A closed engagement session."""

    model_config = ConfigDict(frozen=True)

    id: str
    start: datetime
    end: datetime
    impressions: tuple[EmbeddedImpression, ...] = Field(default=())

    @property
    def duration(self) -> float:
        return (self.end - self.start).total_seconds()

    def to_payload(self) -> dict[str, object]:
        return {
            "session": {
                "id": self.id,
                "start": _epoch_ms(self.start),
                "end": _epoch_ms(self.end),
            },
            "impressions": [impression.to_payload() for impression in self.impressions],
        }
