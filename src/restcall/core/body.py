r"""Bounded capture of response bodies.

At most ``limit + 1`` bytes are buffered: the extra byte is enough to
tell a body of exactly ``limit`` bytes from a longer one, without ever
reading an unbounded, server-controlled amount of data.
"""

from __future__ import annotations

__all__ = [
    "CapturedBody",
    "parse_content_length",
    "read_limited_body",
    "read_limited_body_async",
]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Callable, Iterable

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedBody:
    """The captured part of a response body.

    Attributes:
        content: The captured bytes, never longer than the limit.
        truncated: ``True`` if the source had more bytes than the limit.
        original_size: Best-effort total size of the body.
    """

    content: bytes
    truncated: bool
    original_size: int


def parse_content_length(value: str | None) -> int | None:
    """Return the declared body length, or ``None`` if absent or invalid.

    Example:
        ```pycon
        >>> from restcall.core.body import parse_content_length
        >>> parse_content_length("200")
        200
        >>> parse_content_length(None) is None
        True
        >>> parse_content_length("abc") is None
        True

        ```
    """
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError:
        return None
    return length if length >= 0 else None


def _finish(buffer: bytearray, limit: int, content_length: int | None) -> CapturedBody:
    read = len(buffer)
    if read <= limit:
        return CapturedBody(content=bytes(buffer), truncated=False, original_size=read)

    # A declared length below what was actually read describes the encoded
    # transfer, not the decoded body.
    original_size = content_length if content_length and content_length >= read else read
    logger.debug(f"Response body truncated to {limit} bytes (original size: {original_size})")
    return CapturedBody(content=bytes(buffer[:limit]), truncated=True, original_size=original_size)


def read_limited_body(
    chunks: Iterable[bytes],
    limit: int,
    content_length: int | None = None,
    *,
    check: Callable[[], None] | None = None,
) -> CapturedBody:
    """Read at most ``limit + 1`` bytes from ``chunks``.

    Args:
        chunks: The body byte stream, e.g. ``response.iter_bytes()``.
        limit: The byte ceiling of the captured content. Must be > 0.
        content_length: The declared length of the body, if known.
        check: Optional callable invoked before each chunk is
            consumed; it may raise to abort the read (deadline or
            cancellation).

    Returns:
        The captured body. When more than ``limit`` bytes were
        available, ``truncated`` is set and ``original_size`` is the
        declared length if it covers the bytes read, else
        ``limit + 1``.

    Example:
        ```pycon
        >>> from restcall.core.body import read_limited_body
        >>> body = read_limited_body([b"hello ", b"world"], limit=5)
        >>> body.content, body.truncated, body.original_size
        (b'hello', True, 6)
        >>> read_limited_body([b"hi"], limit=5)
        CapturedBody(content=b'hi', truncated=False, original_size=2)

        ```
    """
    buffer = bytearray()
    for chunk in chunks:
        if check is not None:
            check()
        buffer.extend(chunk[: limit + 1 - len(buffer)])
        if len(buffer) > limit:
            break
    return _finish(buffer, limit, content_length)


async def read_limited_body_async(
    chunks: AsyncIterable[bytes],
    limit: int,
    content_length: int | None = None,
) -> CapturedBody:
    """Asynchronous version of ``read_limited_body``.

    Args:
        chunks: The body byte stream, e.g. ``response.aiter_bytes()``.
        limit: The byte ceiling of the captured content. Must be > 0.
        content_length: The declared length of the body, if known.

    Returns:
        The captured body.
    """
    buffer = bytearray()
    async for chunk in chunks:
        buffer.extend(chunk[: limit + 1 - len(buffer)])
        if len(buffer) > limit:
            break
    return _finish(buffer, limit, content_length)
