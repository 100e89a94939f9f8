r"""Callback types for observing the retry lifecycle.

Three hooks are available on the engines:

- on_request: called before each attempt
- on_retry: called before each inter-retry wait
- on_finish: called once with the terminal outcome of the call

Example:
    ```pycon
    >>> from restcall import EngineConfig, RequestEngine
    >>> from restcall.callbacks import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retry {info.attempt} in {info.wait_time}s")
    ...
    >>> engine = RequestEngine(EngineConfig(retry_count=2), on_retry=log_retry)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["FinishInfo", "RequestInfo", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from restcall.response import Response


@dataclass
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The resolved request URL.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number (1-indexed). First attempt is 1.
        max_attempts: Total number of attempts allowed (retry_count + 1).
    """

    url: str
    method: str
    attempt: int
    max_attempts: int


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The resolved request URL.
        method: The HTTP method.
        attempt: The number of the upcoming attempt (1-indexed). The
            first retry is attempt 2.
        max_attempts: Total number of attempts allowed.
        wait_time: The delay in seconds before the upcoming attempt.
        error: The error that triggered the retry (if any).
        status_code: The 5xx status code that triggered the retry (if any).
    """

    url: str
    method: str
    attempt: int
    max_attempts: int
    wait_time: float
    error: Exception | None = None
    status_code: int | None = None


@dataclass
class FinishInfo:
    """Information passed to on_finish callback.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        url: The resolved request URL.
        method: The HTTP method.
        attempts: The number of attempts performed.
        total_time: Wall-clock time of the whole call in seconds.
        response: The response returned to the caller.
        error: The error raised to the caller.
    """

    url: str
    method: str
    attempts: int
    total_time: float
    response: Response | None = None
    error: Exception | None = None
