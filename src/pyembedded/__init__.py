"""pyembedded - Async client and sync engine for placement-scoped embedded messages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyembedded")
except PackageNotFoundError:
    __version__ = "0+local"
from pyembedded.actions import ActionRunner, resolve_click_action
from pyembedded.client import EmbeddedClient
from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import (
    EmbeddedApiError,
    EmbeddedConfigError,
    EmbeddedError,
    EmbeddedInvalidApiKeyError,
    EmbeddedMessagingDisabledError,
    EmbeddedPayloadError,
    EmbeddedSubscriptionInactiveError,
    EmbeddedTransportError,
)
from pyembedded.lifecycle import AppStateCallback, AppStateMonitor
from pyembedded.listeners import EmbeddedUpdateHandler, ListenerRegistry
from pyembedded.manager import EmbeddedManager, SnapshotFetcher, SyncState
from pyembedded.models import (
    ActionSource,
    EmbeddedAction,
    EmbeddedImpression,
    EmbeddedMessage,
    EmbeddedMessageElements,
    EmbeddedMessageMetadata,
    EmbeddedPlacement,
    EmbeddedSession,
)
from pyembedded.session import EmbeddedSessionManager, SessionTelemetry
from pyembedded.state.diff import ReconcileResult
from pyembedded.state.store import MessageStore, ReceivedTracker

__all__ = [
    "__version__",
    "ActionRunner",
    "ActionSource",
    "AppStateCallback",
    "AppStateMonitor",
    "EmbeddedAction",
    "EmbeddedApiError",
    "EmbeddedClient",
    "EmbeddedConfig",
    "EmbeddedConfigError",
    "EmbeddedError",
    "EmbeddedImpression",
    "EmbeddedInvalidApiKeyError",
    "EmbeddedManager",
    "EmbeddedMessage",
    "EmbeddedMessageElements",
    "EmbeddedMessageMetadata",
    "EmbeddedMessagingDisabledError",
    "EmbeddedPayloadError",
    "EmbeddedPlacement",
    "EmbeddedSession",
    "EmbeddedSessionManager",
    "EmbeddedSubscriptionInactiveError",
    "EmbeddedTransportError",
    "EmbeddedUpdateHandler",
    "ListenerRegistry",
    "MessageStore",
    "ReceivedTracker",
    "ReconcileResult",
    "SessionTelemetry",
    "SnapshotFetcher",
    "SyncState",
    "resolve_click_action",
]
