"""URL parameter parsing and pattern matching for mock lookup.

Parsing is permissive: a parameter that cannot be percent-decoded or
JSON-decoded falls back to its string form and never raises.
"""

from __future__ import annotations

import json
from urllib.parse import unquote


def strip_query(url: str) -> str:
    """Return `url` without its query string."""
    return url.split("?")[0]


def _reject_constant(name: str) -> object:
    # NaN and Infinity are not JSON literals; keep them as strings.
    raise ValueError(name)


def parse_param(value: str) -> object:
    """Percent-decode `value`, then parse it as JSON when possible.

    Numbers, booleans, null, objects and arrays come back typed. Anything else,
    including ISO-8601 dates, stays a string.
    """
    try:
        param = unquote(value, errors="strict")
    except UnicodeDecodeError:
        param = value
    try:
        return json.loads(param, parse_constant=_reject_constant)
    except ValueError:
        return param


def get_query_params(url: str) -> dict[str, object]:
    """Parse the query string of `url` into a dict of typed values."""
    parts = url.split("?")
    query = parts[1] if len(parts) > 1 else ""
    params: dict[str, object] = {}
    for pair in query.split("&") if query else []:
        pieces = pair.split("=")
        key = pieces[0]
        if not key:
            continue
        value = pieces[1] if len(pieces) > 1 else ""
        try:
            decoded_key = unquote(key, errors="strict")
        except UnicodeDecodeError:
            decoded_key = key
        params[decoded_key] = parse_param(value)
    return params


def is_pattern(url: str) -> bool:
    """Return True when any path segment of `url` is a `:name` capture."""
    return any(segment.startswith(":") for segment in strip_query(url).split("/"))


def _same_value(expected: object, actual: object) -> bool:
    # 1 == True in Python; a pattern asking for `1` must not match `true`.
    if isinstance(expected, bool) or isinstance(actual, bool):
        return type(expected) is type(actual) and expected == actual
    if isinstance(expected, int | float) and isinstance(actual, int | float):
        return expected == actual
    return type(expected) is type(actual) and expected == actual


def match_pattern(
    pattern: str, url: str, query_params: dict[str, object]
) -> dict[str, object] | None:
    """Match `url` against a `:name` pattern.

    Args:
        pattern: Registered URL, possibly with `:name` segments and a query string.
        url: Incoming request URL.
        query_params: Parsed query params of `url`.

    Returns:
        The captured path params when the pattern matches, otherwise None.
    """
    pattern_parts = strip_query(pattern).split("/")
    url_parts = strip_query(url).split("/")
    if len(pattern_parts) != len(url_parts):
        return None

    for name, expected in get_query_params(pattern).items():
        if name not in query_params or not _same_value(expected, query_params[name]):
            return None

    captured: dict[str, object] = {}
    for pattern_part, url_part in zip(pattern_parts, url_parts, strict=True):
        if pattern_part.startswith(":"):
            captured[pattern_part[1:]] = parse_param(url_part)
        elif pattern_part != url_part:
            return None
    return captured
