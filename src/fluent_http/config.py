"""Centralised, injectable configuration for fluent-http."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import HttpConfigFile
from .types import CredentialsPolicy


class PositiveNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a positive number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive number.")


class BooleanEnvVarError(ValueError):
    """Raised when an environment variable must be a supported boolean."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a boolean value (true/false, 1/0, yes/no, on/off).")


class HeaderEnvVarError(ValueError):
    """Raised when a header list environment variable is malformed."""

    def __init__(self, env_name: str, item: str) -> None:
        super().__init__(f"{env_name} entries must look like 'Name: value', got {item!r}.")


class CredentialsEnvVarError(ValueError):
    """Raised when a credentials policy environment variable is unsupported."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be one of same-origin, include, omit.")


_CREDENTIALS: dict[str, CredentialsPolicy] = {
    "same-origin": "same-origin",
    "include": "include",
    "omit": "omit",
}


def _empty_headers() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class HttpConfig:
    """Immutable configuration for an HttpContext.

    Load from environment with `HttpConfig.from_env()` or construct directly for testing.
    """

    timeout_seconds: float = 30.0
    record_query_params: bool = False
    recording_enabled: bool = True
    default_headers: dict[str, str] = field(default_factory=_empty_headers)
    default_credentials: CredentialsPolicy = "same-origin"

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            HttpConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            timeout_seconds=_parse_positive_float(
                os.getenv("FLUENT_HTTP_TIMEOUT_SECONDS", "30"),
                env_name="FLUENT_HTTP_TIMEOUT_SECONDS",
            ),
            record_query_params=_parse_bool(
                os.getenv("FLUENT_HTTP_RECORD_QUERY_PARAMS", ""),
                env_name="FLUENT_HTTP_RECORD_QUERY_PARAMS",
                default=False,
            ),
            recording_enabled=_parse_bool(
                os.getenv("FLUENT_HTTP_RECORDING_ENABLED", ""),
                env_name="FLUENT_HTTP_RECORDING_ENABLED",
                default=True,
            ),
            default_headers=_parse_headers(
                os.getenv("FLUENT_HTTP_DEFAULT_HEADERS", ""),
                env_name="FLUENT_HTTP_DEFAULT_HEADERS",
            ),
            default_credentials=_parse_credentials(
                os.getenv("FLUENT_HTTP_DEFAULT_CREDENTIALS", ""),
                env_name="FLUENT_HTTP_DEFAULT_CREDENTIALS",
            ),
        )

    def with_file_overrides(self, file_config: HttpConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            timeout_seconds=self.timeout_seconds
            if file_config.timeout_seconds is None
            else file_config.timeout_seconds,
            record_query_params=self.record_query_params
            if file_config.record_query_params is None
            else file_config.record_query_params,
            recording_enabled=self.recording_enabled
            if file_config.recording_enabled is None
            else file_config.recording_enabled,
            default_headers=self.default_headers
            if file_config.default_headers is None
            else {**self.default_headers, **file_config.default_headers},
            default_credentials=self.default_credentials
            if file_config.default_credentials is None
            else file_config.default_credentials,
        )


def _parse_positive_float(value: str, *, env_name: str) -> float:
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise PositiveNumberEnvVarError(env_name) from exc
    if parsed <= 0:
        raise PositiveNumberEnvVarError(env_name)
    return parsed


def _parse_bool(value: str, *, env_name: str, default: bool) -> bool:
    text = value.strip().lower()
    if not text:
        return default
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off"}:
        return False
    raise BooleanEnvVarError(env_name)


def _parse_headers(value: str, *, env_name: str) -> dict[str, str]:
    """Parse `Name: value; Name: value` into a header dict."""
    headers: dict[str, str] = {}
    for item in value.split(";"):
        if not item.strip():
            continue
        name, sep, header_value = item.partition(":")
        if not sep or not name.strip():
            raise HeaderEnvVarError(env_name, item.strip())
        headers[name.strip()] = header_value.strip()
    return headers


def _parse_credentials(value: str, *, env_name: str) -> CredentialsPolicy:
    text = value.strip().lower()
    if not text:
        return "same-origin"
    policy = _CREDENTIALS.get(text)
    if policy is None:
        raise CredentialsEnvVarError(env_name)
    return policy
