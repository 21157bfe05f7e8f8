"""Custom exception hierarchy for pyembedded."""

from __future__ import annotations


class EmbeddedError(Exception):
    """Base exception for all pyembedded errors."""


class EmbeddedConfigError(EmbeddedError):
    """Invalid or missing configuration."""


class EmbeddedTransportError(EmbeddedError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    Treated as transient: the sync cycle is aborted and the cache is
    left untouched.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class EmbeddedApiError(EmbeddedError):
    """The API rejected the request with an application-level error code."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class EmbeddedMessagingDisabledError(EmbeddedApiError):
    """Fatal failure: embedded messaging is unavailable for this project.

    Listeners receive ``on_messaging_disabled`` and callers are expected
    to stop syncing.
    """


class EmbeddedSubscriptionInactiveError(EmbeddedMessagingDisabledError):
    """The project's embedded messaging subscription is inactive."""


class EmbeddedInvalidApiKeyError(EmbeddedMessagingDisabledError):
    """The API key was rejected."""


class EmbeddedPayloadError(EmbeddedError):
    """The placements payload could not be decoded into typed models."""
