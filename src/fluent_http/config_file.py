"""Typed parsing and validation for fluent-http config files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem
from .types import CredentialsPolicy

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class HttpConfigFile:
    """Validated config values loaded from a TOML file."""

    timeout_seconds: float | None = None
    record_query_params: bool | None = None
    recording_enabled: bool | None = None
    default_headers: dict[str, str] | None = None
    default_credentials: CredentialsPolicy | None = None


class _HttpSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout_seconds: float | None = None
    record_query_params: bool | None = None
    recording_enabled: bool | None = None
    default_headers: dict[str, str] | None = None
    default_credentials: Literal["same-origin", "include", "omit"] | None = None

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value <= 0:
            raise ValueError
        return value

    @field_validator("default_headers")
    @classmethod
    def _validate_headers(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is None:
            return None
        if any(not name.strip() for name in value):
            raise ValueError
        return {name.strip(): header.strip() for name, header in value.items()}


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    http: _HttpSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_http_config_file(*, path: Path, fs: FileSystem) -> HttpConfigFile:
    """Load and validate a fluent-http TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.http
    return HttpConfigFile(
        timeout_seconds=section.timeout_seconds,
        record_query_params=section.record_query_params,
        recording_enabled=section.recording_enabled,
        default_headers=section.default_headers,
        default_credentials=section.default_credentials,
    )
