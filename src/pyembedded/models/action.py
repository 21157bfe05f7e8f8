"""Click action models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

ACTION_TYPE_OPEN_URL = "openUrl"


class ActionSource(StrEnum):
    """Where an action originated from."""

    PUSH = "push"
    APP_LINK = "appLink"
    IN_APP = "inApp"
    EMBEDDED = "embedded"


class EmbeddedAction(BaseModel):
    """An action resolved from a clicked URL.

    ``type`` is either :data:`ACTION_TYPE_OPEN_URL` (``data`` holds the
    URL) or the name of a custom action.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    data: str | None = None

    @classmethod
    def custom_action(cls, name: str) -> EmbeddedAction:
        return cls(type=name)

    @classmethod
    def open_url(cls, url: str) -> EmbeddedAction:
        return cls(type=ACTION_TYPE_OPEN_URL, data=url)

    @property
    def is_open_url(self) -> bool:
        return self.type == ACTION_TYPE_OPEN_URL
