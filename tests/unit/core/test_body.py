from __future__ import annotations

from unittest.mock import Mock

import pytest

from restcall.core.body import (
    CapturedBody,
    parse_content_length,
    read_limited_body,
    read_limited_body_async,
)

##########################################
#     Tests for parse_content_length     #
##########################################


@pytest.mark.parametrize(
    ("value", "expected"),
    [("200", 200), (" 42 ", 42), ("0", 0), (None, None), ("", None), ("abc", None), ("-1", None)],
)
def test_parse_content_length(value: str | None, expected: int | None) -> None:
    assert parse_content_length(value) == expected


#######################################
#     Tests for read_limited_body     #
#######################################


def test_read_limited_body_under_limit() -> None:
    assert read_limited_body([b"hello"], limit=100) == CapturedBody(
        content=b"hello", truncated=False, original_size=5
    )


def test_read_limited_body_exactly_limit() -> None:
    """Test that a body of exactly ``limit`` bytes is not truncated."""
    assert read_limited_body([b"x" * 60, b"x" * 40], limit=100) == CapturedBody(
        content=b"x" * 100, truncated=False, original_size=100
    )


def test_read_limited_body_empty() -> None:
    assert read_limited_body([], limit=100) == CapturedBody(
        content=b"", truncated=False, original_size=0
    )


def test_read_limited_body_truncated_with_content_length() -> None:
    body = read_limited_body([b"a" * 200], limit=100, content_length=200)
    assert body == CapturedBody(content=b"a" * 100, truncated=True, original_size=200)


def test_read_limited_body_truncated_without_content_length() -> None:
    """Test that ``limit + 1`` is reported when the length is unknown."""
    body = read_limited_body([b"a" * 200], limit=100)
    assert body.content == b"a" * 100
    assert body.truncated
    assert body.original_size == 101


def test_read_limited_body_truncated_content_length_below_read_count() -> None:
    body = read_limited_body([b"a" * 200], limit=100, content_length=50)
    assert body.truncated
    assert body.original_size == 101


def test_read_limited_body_stops_after_limit() -> None:
    """Test that chunks past the limit are never consumed."""
    consumed = []

    def chunks():
        for chunk in (b"a" * 60, b"b" * 60, b"c" * 60):
            consumed.append(chunk)
            yield chunk

    body = read_limited_body(chunks(), limit=100)

    assert len(consumed) == 2
    assert body.content == b"a" * 60 + b"b" * 40
    assert body.original_size == 101


def test_read_limited_body_oversized_chunk() -> None:
    """Test that a single chunk far above the limit is not buffered
    whole."""
    body = read_limited_body([b"x" * 5_000_000], limit=100)
    assert body == CapturedBody(content=b"x" * 100, truncated=True, original_size=101)


def test_read_limited_body_calls_check_before_each_chunk() -> None:
    check = Mock()
    read_limited_body([b"a", b"b", b"c"], limit=100, check=check)
    assert check.call_count == 3


def test_read_limited_body_check_can_abort() -> None:
    check = Mock(side_effect=[None, RuntimeError("deadline exceeded")])
    with pytest.raises(RuntimeError, match=r"deadline exceeded"):
        read_limited_body([b"a", b"b"], limit=100, check=check)


#############################################
#     Tests for read_limited_body_async     #
#############################################


async def _achunks(*chunks: bytes):
    for chunk in chunks:
        yield chunk


@pytest.mark.asyncio
async def test_read_limited_body_async_under_limit() -> None:
    body = await read_limited_body_async(_achunks(b"hello ", b"world"), limit=100)
    assert body == CapturedBody(content=b"hello world", truncated=False, original_size=11)


@pytest.mark.asyncio
async def test_read_limited_body_async_truncated() -> None:
    body = await read_limited_body_async(_achunks(b"a" * 200), limit=100, content_length=200)
    assert body == CapturedBody(content=b"a" * 100, truncated=True, original_size=200)


@pytest.mark.asyncio
async def test_read_limited_body_async_oversized_chunk() -> None:
    body = await read_limited_body_async(_achunks(b"x" * 5_000_000, b"y" * 10), limit=100)
    assert body == CapturedBody(content=b"x" * 100, truncated=True, original_size=101)
