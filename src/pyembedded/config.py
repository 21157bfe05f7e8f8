"""Client configuration for pyembedded."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyembedded._constants import BASE_URL, SDK_VERSION
from pyembedded.exceptions import EmbeddedConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class EmbeddedConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        Mobile/JS API key of the project.
    email : str or None
        Email of the current user. Exactly one of ``email`` and
        ``user_id`` must be set.
    user_id : str or None
        User id of the current user.
    auth_token : str or None
        Optional JWT sent as a bearer token for JWT-enabled API keys.
        The token is used as-is; refreshing it is the caller's job.
    base_url : str
        API base URL, with trailing slash.
    platform : str
        Platform name reported to the API.
    sdk_version : str
        SDK version reported to the API.
    package_name : str
        Application package / bundle identifier.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    api_trace_enabled : bool
        Log redacted request parameters and response bodies at DEBUG.
    """

    api_key: str
    email: str | None = None
    user_id: str | None = None
    auth_token: str | None = None
    base_url: str = BASE_URL
    platform: str = "Android"
    sdk_version: str = SDK_VERSION
    package_name: str = ""
    request_timeout: float = 30.0
    api_trace_enabled: bool = False

    def validate(self) -> None:
        """Raise :class:`EmbeddedConfigError` if the config cannot be used."""
        if not self.api_key or not self.api_key.strip():
            raise EmbeddedConfigError("api_key must be non-empty")
        if bool(self.email) == bool(self.user_id):
            raise EmbeddedConfigError("exactly one of email or user_id must be set")
        if self.request_timeout <= 0:
            raise EmbeddedConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def identity_params(self) -> dict[str, str]:
        """User identity fields as sent to the API."""
        if self.email:
            return {"email": self.email}
        if self.user_id:
            return {"userId": self.user_id}
        return {}

    @classmethod
    def from_env(cls, **overrides: Any) -> EmbeddedConfig:
        """Create configuration from environment variables.

        Reads ``EMBEDDED_API_KEY`` and optional ``EMBEDDED_*`` variables.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        EmbeddedConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "EMBEDDED_API_KEY": "api_key",
            "EMBEDDED_EMAIL": "email",
            "EMBEDDED_USER_ID": "user_id",
            "EMBEDDED_AUTH_TOKEN": "auth_token",
            "EMBEDDED_BASE_URL": "base_url",
            "EMBEDDED_PLATFORM": "platform",
            "EMBEDDED_PACKAGE_NAME": "package_name",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("EMBEDDED_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("EMBEDDED_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)
        if "api_key" not in config_kwargs:
            raise EmbeddedConfigError("EMBEDDED_API_KEY is not set")

        return cls(**config_kwargs)
