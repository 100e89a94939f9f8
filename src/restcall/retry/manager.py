r"""Callback manager for the retry lifecycle of one call."""

from __future__ import annotations

__all__ = ["CallbackManager"]

from typing import TYPE_CHECKING

from restcall.callbacks import FinishInfo, RequestInfo, RetryInfo

if TYPE_CHECKING:
    from collections.abc import Callable

    from restcall.response import Response


class CallbackManager:
    """Invokes user-defined callbacks for one call.

    The manager is bound to the method and URL of the call so the retry
    controller only has to report attempt indices.

    Args:
        method: The HTTP method of the call.
        url: The resolved request URL.
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry wait.
        on_finish: Optional callback invoked with the terminal outcome.
    """

    def __init__(
        self,
        method: str,
        url: str,
        *,
        on_request: Callable[[RequestInfo], None] | None = None,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_finish: Callable[[FinishInfo], None] | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self._on_request = on_request
        self._on_retry = on_retry
        self._on_finish = on_finish

    def on_request(self, attempt: int, max_attempts: int) -> None:
        """Invoke on_request callback.

        Args:
            attempt: The attempt index (0-indexed). The callback receives
                it 1-indexed.
            max_attempts: Total number of attempts allowed.
        """
        if self._on_request is not None:
            self._on_request(
                RequestInfo(
                    url=self.url, method=self.method, attempt=attempt + 1, max_attempts=max_attempts
                )
            )

    def on_retry(
        self,
        attempt: int,
        max_attempts: int,
        wait_time: float,
        error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            attempt: The index of the upcoming attempt (0-indexed).
            max_attempts: Total number of attempts allowed.
            wait_time: The delay before the upcoming attempt.
            error: Error that triggered the retry (if any).
            status_code: Status code that triggered the retry (if any).
        """
        if self._on_retry is not None:
            self._on_retry(
                RetryInfo(
                    url=self.url,
                    method=self.method,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    wait_time=wait_time,
                    error=error,
                    status_code=status_code,
                )
            )

    def on_finish(
        self,
        attempts: int,
        total_time: float,
        response: Response | None = None,
        error: Exception | None = None,
    ) -> None:
        if self._on_finish is not None:
            self._on_finish(
                FinishInfo(
                    url=self.url,
                    method=self.method,
                    attempts=attempts,
                    total_time=total_time,
                    response=response,
                    error=error,
                )
            )
