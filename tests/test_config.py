from __future__ import annotations

import pytest

from pyembedded.config import EmbeddedConfig
from pyembedded.exceptions import EmbeddedConfigError


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMBEDDED_API_KEY", "env-key")
    monkeypatch.setenv("EMBEDDED_EMAIL", "env@example.com")
    monkeypatch.setenv("EMBEDDED_REQUEST_TIMEOUT", "12.5")
    monkeypatch.setenv("EMBEDDED_API_TRACE_ENABLED", "yes")

    config = EmbeddedConfig.from_env()

    assert config.api_key == "env-key"
    assert config.email == "env@example.com"
    assert config.request_timeout == 12.5
    assert config.api_trace_enabled is True
    config.validate()


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMBEDDED_API_KEY", "env-key")
    monkeypatch.setenv("EMBEDDED_REQUEST_TIMEOUT", "12.5")

    config = EmbeddedConfig.from_env(api_key="explicit", user_id="u-1", request_timeout=3.0)

    assert config.api_key == "explicit"
    assert config.request_timeout == 3.0
    assert config.identity_params() == {"userId": "u-1"}


def test_from_env_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EMBEDDED_API_KEY", raising=False)

    with pytest.raises(EmbeddedConfigError):
        EmbeddedConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"api_key": " "},
        {"api_key": "k"},
        {"api_key": "k", "email": "a@b.c", "user_id": "u"},
        {"api_key": "k", "email": "a@b.c", "request_timeout": 0},
    ],
)
def test_validate_rejects(kwargs: dict[str, object]) -> None:
    with pytest.raises(EmbeddedConfigError):
        EmbeddedConfig(**kwargs).validate()  # type: ignore[arg-type]
