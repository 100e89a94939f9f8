r"""Exception taxonomy for the request-execution engine.

Every error carries the HTTP method and the request URL that produced
it, plus the underlying transport exception (if any) as ``cause``.
Only terminal failures reach the caller: attempt-level failures are
consumed by the retry controller as retry signals.
"""

from __future__ import annotations

__all__ = [
    "BodyReadError",
    "NetworkError",
    "RequestCancelledError",
    "RequestConstructionError",
    "RequestEngineError",
    "UrlParseError",
]


class RequestEngineError(Exception):
    r"""Base class of all errors raised by the request engine.

    Args:
        method: The HTTP method of the failed call.
        url: The request URL (resolved when available, else as supplied).
        message: Human readable description of the failure.
        cause: The underlying exception, if any.
        attempts: Number of attempts performed before giving up.

    Example:
        ```pycon
        >>> from restcall.exceptions import NetworkError
        >>> err = NetworkError(method="GET", url="https://example.com", message="boom")
        >>> err.method
        'GET'
        >>> str(err)
        'boom'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: Exception | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.cause = cause
        self.attempts = attempts

    def __repr__(self) -> str:
        return (
            f"{type(self).__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"message={self.message!r}, attempts={self.attempts})"
        )


class UrlParseError(RequestEngineError):
    r"""Raised when the request URL or its query string cannot be parsed.

    Raised before any network I/O and never retried.
    """


class RequestConstructionError(RequestEngineError):
    r"""Raised when the transport rejects the method/URL pairing.

    Never retried.
    """


class NetworkError(RequestEngineError):
    r"""Raised when a round trip cannot complete (DNS, connect, TLS,
    timeout, ...).

    It is retried while attempts remain. ``timed_out`` is ``True`` when
    the attempt ran out of time.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: Exception | None = None,
        attempts: int = 0,
        timed_out: bool = False,
    ) -> None:
        super().__init__(method=method, url=url, message=message, cause=cause, attempts=attempts)
        self.timed_out = timed_out


class BodyReadError(RequestEngineError):
    r"""Raised when a received response body cannot be drained.

    The status line and headers were received but the stream broke
    before the bounded body was captured. It is retried like a
    ``NetworkError`` while attempts remain.
    """


class RequestCancelledError(RequestEngineError):
    r"""Raised when the caller aborts a call through its cancellation
    event."""
