"""Custom exceptions for fluent-http.

Matching and parameter parsing never raise; these exceptions cover transport,
handler, fixture and configuration failures.
"""

from __future__ import annotations


class FluentHttpError(Exception):
    """Base exception for all fluent-http errors."""

    pass


class TransportError(FluentHttpError):
    """Raised when the real transport fails to produce a response."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {reason}")


class TransportUnavailableError(FluentHttpError):
    """Raised when a request is neither mocked nor sendable.

    This happens in pure test contexts that have no real transport configured.
    """

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        super().__init__(
            f"No mock handled {method} {url} and no transport is configured.\n"
            "Register a mock for it or configure a transport on the HttpContext."
        )


class MalformedResponseMarkerError(FluentHttpError):
    """Raised when a mock handler returns something that is not a valid result."""

    def __init__(self, method: str, url: str, detail: str) -> None:
        self.method = method
        self.url = url
        super().__init__(f"Mock handler for {method} {url} returned a malformed response: {detail}")


class UnsupportedMethodError(FluentHttpError, ValueError):
    """Raised when a method outside GET/POST/PUT/DELETE is used."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported HTTP method: {method!r} (expected GET, POST, PUT or DELETE).")


class FixtureValidationError(FluentHttpError):
    """Raised when a traffic fixture or refresh map has the wrong shape."""

    def __init__(self, kind: str, detail: str) -> None:
        super().__init__(f"Invalid {kind}: {detail}")


class ConfigFileNotFoundError(FluentHttpError):
    """Raised when a config file path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(FluentHttpError):
    """Raised when a config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file could not be parsed: {path} ({detail})")


class ConfigFileValidationError(FluentHttpError):
    """Raised when a config file has invalid values."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file is invalid: {path} ({detail})")
