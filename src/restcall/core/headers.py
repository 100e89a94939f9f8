r"""Header merging and parsing helpers."""

from __future__ import annotations

__all__ = ["parse_headers", "resolve_headers"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def resolve_headers(
    default_headers: Mapping[str, str], headers: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Return the outgoing header set of one attempt.

    Per-call headers overwrite default headers of the same name. Names
    are compared case-insensitively, as HTTP does, and the per-call
    spelling of a colliding name is kept. Neither input is modified.

    Example:
        ```pycon
        >>> from restcall.core.headers import resolve_headers
        >>> resolve_headers({"Accept": "text/plain", "X-Env": "dev"}, {"accept": "application/json"})
        {'X-Env': 'dev', 'accept': 'application/json'}

        ```
    """
    resolved = dict(default_headers)
    for name, value in (headers or {}).items():
        for existing in [key for key in resolved if key.lower() == name.lower()]:
            del resolved[existing]
        resolved[name] = value
    return resolved


def parse_headers(raw: Iterable[str]) -> dict[str, str]:
    """Parse ``"Name: Value"`` strings into a mapping.

    Each entry is split on the first ``": "`` so values may contain
    colons. Entries without a separator or with an empty name are
    ignored. A later entry overwrites an earlier one with the same name.

    Example:
        ```pycon
        >>> from restcall.core.headers import parse_headers
        >>> parse_headers(["Authorization: Bearer abc", "X-Url: http://x:80", "broken"])
        {'Authorization': 'Bearer abc', 'X-Url': 'http://x:80'}

        ```
    """
    headers: dict[str, str] = {}
    for entry in raw:
        name, sep, value = entry.partition(": ")
        if sep and name:
            headers[name] = value
    return headers
