r"""Plain-text rendering of a ``Response``.

The output starts with a status line, optionally followed by the
response headers, then a blank line and the captured body:

```
HTTP 200 OK (123ms)
Content-Type: application/json

{"id": 1}
```
"""

from __future__ import annotations

__all__ = ["NOISE_HEADERS", "canonical_header_name", "format_duration", "format_response"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from restcall.response import Response

# Canonical names of headers hidden from the formatted output
NOISE_HEADERS = frozenset(
    {
        "Date",
        "Server",
        "Connection",
        "Keep-Alive",
        "Transfer-Encoding",
        "Accept-Ranges",
        "Vary",
        "Etag",
        "Cache-Control",
        "Pragma",
        "Expires",
        "Age",
        "Via",
        "X-Cache",
    }
)


def canonical_header_name(name: str) -> str:
    """Return the canonical form of a header name.

    Example:
        ```pycon
        >>> from restcall.formatting import canonical_header_name
        >>> canonical_header_name("content-type")
        'Content-Type'
        >>> canonical_header_name("ETAG")
        'Etag'

        ```
    """
    return "-".join(part.capitalize() for part in name.split("-"))


def format_duration(duration: float) -> str:
    """Format a duration in seconds as ``123ms`` below one second,
    ``1.5s`` otherwise.

    Example:
        ```pycon
        >>> from restcall.formatting import format_duration
        >>> format_duration(0.1234)
        '123ms'
        >>> format_duration(1.54)
        '1.5s'

        ```
    """
    if duration < 1.0:
        return f"{int(duration * 1000)}ms"
    return f"{duration:.1f}s"


def format_response(response: Response, include_headers: bool = False) -> str:
    """Render a response as text.

    Args:
        response: The response to render.
        include_headers: Whether to list the response headers. Noise
            headers are left out; the rest are sorted by name, one
            line per value.

    Returns:
        The formatted response. A truncation notice is appended when
        the body was cut at the size cap.
    """
    lines = [
        f"HTTP {response.status_code} {response.status_text} "
        f"({format_duration(response.duration)})"
    ]

    if include_headers and response.headers:
        items = [(canonical_header_name(key), value) for key, value in response.headers.multi_items()]
        lines.append("")
        lines.extend(
            f"{name}: {value}"
            for name, value in sorted(items, key=lambda item: item[0])
            if name not in NOISE_HEADERS
        )

    lines.append("")
    lines.append(response.text if response.body else "(empty body)")

    if response.truncated:
        shown = len(response.body)
        if response.original_size > 0:
            lines.append(f"[truncated, showing {shown} of {response.original_size} bytes]")
        else:
            lines.append(f"[truncated, showing first {shown} bytes]")

    return "\n".join(lines)
