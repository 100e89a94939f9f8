r"""Command line interface running one HTTP call.

Example:

```
restcall --base-url https://api.example.com --retry 2 GET /users -q page=2
```
"""

from __future__ import annotations

__all__ = ["build_parser", "main"]

import argparse
import sys

from restcall.core.config import (
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    EngineConfig,
)
from restcall.core.headers import parse_headers
from restcall.engine import RequestEngine
from restcall.tool import HttpRequestTool
from restcall.utils.duration import parse_duration
from restcall.utils.structured_logging import configure_logging


def _duration(text: str) -> float:
    try:
        return parse_duration(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _query_param(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        msg = f"invalid query parameter {text!r}, expected key=value"
        raise argparse.ArgumentTypeError(msg)
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restcall",
        description="Run one HTTP request with bounded body capture and retries",
    )
    parser.add_argument("method", help="HTTP method: GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS")
    parser.add_argument("url", help="Full URL or relative path (if --base-url is set)")

    engine = parser.add_argument_group("engine")
    engine.add_argument("--base-url", default="", help="Base URL prepended to relative URLs")
    engine.add_argument(
        "--default-header",
        action="append",
        default=[],
        metavar="HEADER",
        help='Default header (repeatable, format: "Key: Value")',
    )
    engine.add_argument(
        "--timeout",
        type=_duration,
        default=DEFAULT_TIMEOUT,
        help="Request timeout, e.g. 30s or 500ms (default: 30s)",
    )
    engine.add_argument(
        "--max-response-size",
        type=int,
        default=DEFAULT_MAX_RESPONSE_SIZE,
        help=f"Maximum response body size in bytes (default: {DEFAULT_MAX_RESPONSE_SIZE})",
    )
    engine.add_argument("--proxy", default="", help="HTTP/HTTPS proxy URL")
    engine.add_argument(
        "--retry",
        type=int,
        default=DEFAULT_RETRY_COUNT,
        help="Number of retries for failed requests (default: 0)",
    )
    engine.add_argument(
        "--retry-delay",
        type=_duration,
        default=DEFAULT_RETRY_DELAY,
        help="Delay between retries (default: 1s)",
    )
    engine.add_argument(
        "--insecure", action="store_true", help="Skip TLS certificate verification"
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument("--log-enabled", action="store_true", help="Enable logging")
    logs.add_argument("--log-file", default=None, help="Log file path (stderr if omitted)")
    logs.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warn", "error"],
        help="Log level (default: info)",
    )
    logs.add_argument("--log-json", action="store_true", help="Write logs as JSON lines")

    call = parser.add_argument_group("request")
    call.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        help='Request header (repeatable, format: "Key: Value")',
    )
    call.add_argument("-d", "--data", dest="body", default="", help="Request body")
    call.add_argument(
        "-q",
        "--query",
        dest="query_params",
        type=_query_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)",
    )
    call.add_argument(
        "--no-follow-redirects",
        dest="follow_redirects",
        action="store_false",
        default=None,
        help="Return 3xx responses instead of following them",
    )
    call.add_argument(
        "--include-headers",
        action="store_true",
        default=None,
        help="Show response headers",
    )
    call.add_argument(
        "--request-timeout",
        default="",
        help="Timeout of this call, e.g. 10s (default: --timeout)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_enabled:
        configure_logging(args.log_level, json_format=args.log_json, log_file=args.log_file)

    try:
        config = EngineConfig(
            base_url=args.base_url,
            default_headers=parse_headers(args.default_header),
            timeout=args.timeout,
            max_response_size=args.max_response_size,
            proxy_url=args.proxy,
            retry_count=args.retry,
            retry_delay=args.retry_delay,
            insecure_tls=args.insecure,
        )
    except ValueError as exc:
        parser.error(str(exc))

    with RequestEngine(config) as engine:
        result = HttpRequestTool(engine).execute(
            method=args.method,
            url=args.url,
            headers=parse_headers(args.headers),
            body=args.body,
            query_params=dict(args.query_params),
            timeout=args.request_timeout,
            follow_redirects=args.follow_redirects,
            include_response_headers=args.include_headers,
        )

    if result.is_error:
        print(result.output, file=sys.stderr)
        return 1
    print(result.output)
    return 0
