r"""restcall - HTTP request-execution engine.

This package turns one request description (method, URL, headers,
body, query parameters, per-call options) into one completed response,
with bounded body capture and bounded transparent retries. Built on top
of httpx, it shares one connection pool across calls and never lets a
call reconfigure it.

Key Features:
    - Relative URLs resolved against a configured base URL
    - Default headers with case-insensitive per-call overrides
    - Per-call timeout and redirect policy
    - Response bodies capped at a configurable size, with truncation
      reported instead of failing the call
    - Fixed-delay retries on network errors and 5xx responses
    - Synchronous and asyncio engines with lifecycle callbacks

Example:
    ```pycon
    >>> from restcall import EngineConfig, RequestEngine, RequestParams
    >>> config = EngineConfig(base_url="https://api.example.com", retry_count=2)
    >>> with RequestEngine(config) as engine:  # doctest: +SKIP
    ...     response = engine.execute(
    ...         RequestParams(method="GET", url="/users", query_params={"page": "2"})
    ...     )
    ...     print(response.status_code, response.truncated)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRequestEngine",
    "BodyReadError",
    "EngineConfig",
    "NetworkError",
    "RequestCancelledError",
    "RequestConstructionError",
    "RequestEngine",
    "RequestEngineError",
    "RequestParams",
    "Response",
    "UrlParseError",
    "__version__",
    "format_response",
    "parse_headers",
]

from importlib.metadata import PackageNotFoundError, version

from restcall.core.config import EngineConfig, RequestParams
from restcall.core.headers import parse_headers
from restcall.engine import RequestEngine
from restcall.engine_async import AsyncRequestEngine
from restcall.exceptions import (
    BodyReadError,
    NetworkError,
    RequestCancelledError,
    RequestConstructionError,
    RequestEngineError,
    UrlParseError,
)
from restcall.formatting import format_response
from restcall.response import Response

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
