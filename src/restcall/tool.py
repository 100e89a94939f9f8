r"""Request tool layer on top of the request engine.

``HttpRequestTool`` is the entry point used by agents and other callers
that provide loosely typed input (strings and mappings). It validates
the input, runs one call on the engine and renders the result as text.
Failures are reported in the result, never raised.
"""

from __future__ import annotations

__all__ = [
    "SENSITIVE_HEADER_NAMES",
    "VALID_METHODS",
    "AsyncHttpRequestTool",
    "HttpRequestTool",
    "ToolResult",
    "build_params",
    "build_tool_description",
    "censor_header_value",
]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from restcall.core.config import RequestParams
from restcall.exceptions import RequestEngineError
from restcall.formatting import format_response
from restcall.utils.duration import parse_duration

if TYPE_CHECKING:
    from collections.abc import Mapping

    from restcall.core.config import EngineConfig
    from restcall.engine import RequestEngine
    from restcall.engine_async import AsyncRequestEngine

logger: logging.Logger = logging.getLogger(__name__)

VALID_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"})

# Lowercase header names whose values are hidden in the tool description
SENSITIVE_HEADER_NAMES = frozenset(
    {"authorization", "proxy-authorization", "x-api-key", "x-auth-token"}
)


@dataclass(frozen=True)
class ToolResult:
    """Text result of a tool invocation."""

    output: str
    is_error: bool = False


def censor_header_value(name: str, value: str) -> str:
    """Return ``***`` for sensitive headers, else ``value``.

    Example:
        ```pycon
        >>> from restcall.tool import censor_header_value
        >>> censor_header_value("Authorization", "Bearer abc")
        '***'
        >>> censor_header_value("Accept", "application/json")
        'application/json'

        ```
    """
    if name.lower() in SENSITIVE_HEADER_NAMES:
        return "***"
    return value


def build_tool_description(config: EngineConfig) -> str:
    """Build the human readable description of the request tool.

    The description mentions the base URL and the default headers, with
    credentials censored.
    """
    description = (
        "Make HTTP requests. Use instead of curl for reliable cross-platform HTTP calls. "
        "Supports all methods, headers, body, query params, redirects, and timeout."
    )
    if config.base_url:
        description += f" Base URL: {config.base_url}, use relative paths like /api/endpoint."
    if config.default_headers:
        parts = [
            f"{name}: {censor_header_value(name, config.default_headers[name])}"
            for name in sorted(config.default_headers)
        ]
        description += f" Default headers: {', '.join(parts)}."
    return description


class HttpRequestTool:
    r"""Validate loosely typed input and run one HTTP call.

    Args:
        engine: The engine that executes the calls.

    Example:
        ```pycon
        >>> import httpx
        >>> from restcall import EngineConfig, RequestEngine
        >>> from restcall.tool import HttpRequestTool
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(204))
        >>> engine = RequestEngine(EngineConfig(), client=httpx.Client(transport=transport))
        >>> tool = HttpRequestTool(engine)
        >>> tool.execute(method="get", url="https://example.com").output.splitlines()[0][:12]
        'HTTP 204 No '
        >>> tool.execute(method="FETCH", url="https://example.com")
        ToolResult(output='unsupported method: FETCH', is_error=True)

        ```
    """

    name = "http_request"
    parameters: dict[str, dict[str, Any]] = {
        "method": {
            "type": "string",
            "description": "HTTP method: GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS",
        },
        "url": {
            "type": "string",
            "description": "Full URL or relative path (if base_url configured)",
        },
        "headers": {"type": "object", "description": "Request headers as key-value pairs"},
        "body": {"type": "string", "description": "Request body (typically JSON)"},
        "query_params": {
            "type": "object",
            "description": "Query parameters as key-value pairs",
        },
        "timeout": {"type": "string", "description": "Per-request timeout (e.g. 10s, 500ms)"},
        "follow_redirects": {
            "type": "boolean",
            "description": "Follow HTTP redirects (default: true)",
        },
        "include_response_headers": {
            "type": "boolean",
            "description": "Include response headers in output (default: false)",
        },
    }

    def __init__(self, engine: RequestEngine) -> None:
        self._engine = engine
        self.description = build_tool_description(engine.config)

    def execute(self, **kwargs: Any) -> ToolResult:
        params = build_params(**kwargs)
        if isinstance(params, ToolResult):
            return params
        try:
            response = self._engine.execute(params)
        except RequestEngineError as exc:
            logger.debug(f"http_request tool call failed: {exc!r}")
            return ToolResult(output=f"Request failed: {exc}", is_error=True)
        return ToolResult(output=format_response(response, params.should_include_headers()))


class AsyncHttpRequestTool:
    """Asynchronous version of ``HttpRequestTool``."""

    name = HttpRequestTool.name
    parameters = HttpRequestTool.parameters

    def __init__(self, engine: AsyncRequestEngine) -> None:
        self._engine = engine
        self.description = build_tool_description(engine.config)

    async def execute(self, **kwargs: Any) -> ToolResult:
        params = build_params(**kwargs)
        if isinstance(params, ToolResult):
            return params
        try:
            response = await self._engine.execute(params)
        except RequestEngineError as exc:
            logger.debug(f"http_request tool call failed: {exc!r}")
            return ToolResult(output=f"Request failed: {exc}", is_error=True)
        return ToolResult(output=format_response(response, params.should_include_headers()))


def build_params(
    method: str = "",
    url: str = "",
    headers: Mapping[str, str] | None = None,
    body: str = "",
    query_params: Mapping[str, str] | None = None,
    timeout: str = "",
    follow_redirects: bool | None = None,
    include_response_headers: bool | None = None,
) -> RequestParams | ToolResult:
    """Validate tool input and build the call parameters.

    Returns:
        The call parameters, or an error ``ToolResult`` describing the
        first invalid field.
    """
    if not method:
        return ToolResult(output="method is required", is_error=True)
    upper_method = method.upper()
    if upper_method not in VALID_METHODS:
        return ToolResult(output=f"unsupported method: {method}", is_error=True)
    if not url:
        return ToolResult(output="url is required", is_error=True)

    seconds = None
    if timeout:
        try:
            seconds = parse_duration(timeout)
        except ValueError as exc:
            return ToolResult(output=f"invalid timeout: {exc}", is_error=True)

    return RequestParams(
        method=upper_method,
        url=url,
        headers=headers,
        body=body or None,
        query_params=query_params,
        timeout=seconds,
        follow_redirects=follow_redirects,
        include_headers=include_response_headers,
    )
