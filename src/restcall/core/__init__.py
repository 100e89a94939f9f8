r"""Core building blocks of the request engine.

This package contains the configuration objects and the stateless
helpers used to build one request attempt: URL resolution, header
merging, redirect policy, and bounded body capture.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RESPONSE_SIZE",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "CapturedBody",
    "EngineConfig",
    "RedirectPolicy",
    "RequestParams",
    "build_request_url",
    "parse_headers",
    "read_limited_body",
    "read_limited_body_async",
    "resolve_headers",
    "validate_retry_params",
    "validate_timeout",
]

from restcall.core.body import CapturedBody, read_limited_body, read_limited_body_async
from restcall.core.config import (
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    EngineConfig,
    RequestParams,
)
from restcall.core.headers import parse_headers, resolve_headers
from restcall.core.redirects import RedirectPolicy
from restcall.core.url import build_request_url
from restcall.core.validation import validate_retry_params, validate_timeout
