"""Mock registry, matcher and dispatch interceptor."""

from .interceptor import DispatchInterceptor
from .matching import get_query_params, match_pattern, parse_param
from .registry import MockRegistry
from .resolution import RECORDED_PLACEHOLDER, mock_response, resolve_marker

__all__ = [
    "RECORDED_PLACEHOLDER",
    "DispatchInterceptor",
    "MockRegistry",
    "get_query_params",
    "match_pattern",
    "mock_response",
    "parse_param",
    "resolve_marker",
]
