r"""Request URL resolution against an optional base URL."""

from __future__ import annotations

__all__ = ["build_request_url", "merge_query_params"]

import logging
from typing import TYPE_CHECKING

import httpx

from restcall.exceptions import UrlParseError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


def build_request_url(
    base_url: str,
    url: str,
    query_params: Mapping[str, str] | None = None,
    *,
    method: str = "",
) -> str:
    """Resolve the URL of a call.

    A URL starting with ``/`` is appended to ``base_url`` (with its
    trailing slashes removed) when a base URL is configured. Any other
    URL, including an absolute one, is used verbatim. Query parameters
    are then set on the URL, see ``merge_query_params``.

    Args:
        base_url: The configured base URL, possibly empty.
        url: The URL supplied with the call.
        query_params: Optional query parameters to set on the URL.
        method: The HTTP method, only used in error messages.

    Returns:
        The resolved request URL.

    Raises:
        UrlParseError: If the resolved URL cannot be parsed.

    Example:
        ```pycon
        >>> from restcall.core.url import build_request_url
        >>> build_request_url("https://api.example.com/", "/users")
        'https://api.example.com/users'
        >>> build_request_url("https://api.example.com", "https://other.example.com/x")
        'https://other.example.com/x'
        >>> build_request_url("", "https://api.example.com/users?page=1", {"page": "2", "a": "b"})
        'https://api.example.com/users?a=b&page=2'

        ```
    """
    request_url = url
    if url.startswith("/") and base_url:
        request_url = base_url.rstrip("/") + url

    try:
        parsed = httpx.URL(request_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlParseError(
            method=method,
            url=request_url,
            message=f"parsing URL {request_url}: {exc}",
            cause=exc,
        ) from exc

    if not query_params:
        return request_url
    resolved = str(parsed.copy_with(params=merge_query_params(parsed.params, query_params)))
    logger.debug(f"Resolved {request_url} with query parameters to {resolved}")
    return resolved


def merge_query_params(
    existing: httpx.QueryParams, overrides: Mapping[str, str]
) -> list[tuple[str, str]]:
    """Set ``overrides`` on top of ``existing`` query parameters.

    Each override replaces every value of the same name. The result is
    sorted by parameter name; repeated values of one name keep their
    relative order.

    Example:
        ```pycon
        >>> import httpx
        >>> from restcall.core.url import merge_query_params
        >>> merge_query_params(httpx.QueryParams("b=1&a=1&a=2&c=3"), {"c": "4"})
        [('a', '1'), ('a', '2'), ('b', '1'), ('c', '4')]

        ```
    """
    merged: dict[str, list[str]] = {}
    for key, value in existing.multi_items():
        merged.setdefault(key, []).append(value)
    for key, value in overrides.items():
        merged[key] = [value]
    return [(key, value) for key in sorted(merged) for value in merged[key]]
