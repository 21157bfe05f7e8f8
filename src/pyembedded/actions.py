"""Click URL resolution."""

from __future__ import annotations

from typing import Any, Protocol

from pyembedded._constants import URL_SCHEME_ACTION, URL_SCHEME_ITBL
from pyembedded.models.action import ActionSource, EmbeddedAction


class ActionRunner(Protocol):
    """Executes resolved actions (custom action handler or URL opener)."""

    def execute_action(self, context: Any, action: EmbeddedAction, source: ActionSource) -> None:
        ...


def resolve_click_action(url: str | None) -> EmbeddedAction | None:
    """Turn a clicked URL into an action.

    ``action://name`` and the legacy ``itbl://name`` both become the
    custom action ``name``; anything else opens the URL. Empty or
    missing URLs resolve to ``None``.
    """
    if not url:
        return None
    if url.startswith(URL_SCHEME_ACTION):
        return EmbeddedAction.custom_action(url.removeprefix(URL_SCHEME_ACTION))
    if url.startswith(URL_SCHEME_ITBL):
        return EmbeddedAction.custom_action(url.removeprefix(URL_SCHEME_ITBL))
    return EmbeddedAction.open_url(url)
