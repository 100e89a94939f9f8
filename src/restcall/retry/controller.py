r"""Retry controller implemented as an explicit state machine.

States are ``ATTEMPTING`` (with the current attempt index),
``SUCCEEDED`` and ``FAILED_FINAL``. Each finished attempt is fed to
``RetryController.record`` which performs one transition and returns
what the driver must do next:

- ``RETRY``: wait ``retry_delay`` then run the next attempt
- ``RETURN``: return ``last_response`` to the caller
- ``RAISE``: raise ``error`` to the caller

Transitions, for attempt ``n`` out of ``retry_count + 1``:

- network error, body read error: retry if ``n < retry_count``, else
  fail
- 5xx response: remember it and retry if ``n < retry_count``, else
  return it as-is
- 4xx response, any other status: return it immediately
- any other error: fail immediately
"""

from __future__ import annotations

__all__ = ["RetryController", "RetryDecision", "RetryState"]

import asyncio
import enum
import logging
import time
from typing import TYPE_CHECKING

from restcall.backoff import ConstantBackoff
from restcall.core.validation import validate_retry_params
from restcall.exceptions import RequestCancelledError, RequestEngineError
from restcall.retry.decider import AttemptOutcome, OutcomeKind, RetryDecider

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from restcall.response import Response
    from restcall.retry.manager import CallbackManager

logger: logging.Logger = logging.getLogger(__name__)


class RetryState(enum.Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_FINAL = "failed_final"


class RetryDecision(enum.Enum):
    RETRY = "retry"
    RETURN = "return"
    RAISE = "raise"


class RetryController:
    """Drives the attempts of one call.

    A controller holds the state of a single call; create one per call
    (or call ``reset``).

    Args:
        retry_count: Number of retries after the first attempt. Must be >= 0.
        retry_delay: Fixed wait in seconds between attempts. Must be >= 0.
        decider: Optional outcome classifier.

    Example:
        ```pycon
        >>> from restcall.response import Response
        >>> from restcall.retry import AttemptOutcome, RetryController
        >>> controller = RetryController(retry_count=1, retry_delay=0.0)
        >>> controller.record(AttemptOutcome.of_response(Response(status_code=500)))
        <RetryDecision.RETRY: 'retry'>
        >>> controller.attempt
        1
        >>> controller.record(AttemptOutcome.of_response(Response(status_code=500)))
        <RetryDecision.RETURN: 'return'>
        >>> controller.state
        <RetryState.SUCCEEDED: 'succeeded'>
        >>> controller.result().status_code
        500

        ```
    """

    def __init__(
        self,
        retry_count: int = 0,
        retry_delay: float = 0.0,
        *,
        decider: RetryDecider | None = None,
    ) -> None:
        validate_retry_params(retry_count=retry_count, retry_delay=retry_delay)
        self.retry_count = retry_count
        self.backoff = ConstantBackoff(retry_delay)
        self.decider: RetryDecider = decider or RetryDecider()
        self.reset()

    def __repr__(self) -> str:
        return (
            f"{type(self).__qualname__}(state={self.state.value}, attempt={self.attempt}, "
            f"max_attempts={self.max_attempts})"
        )

    def reset(self) -> None:
        """Go back to ``ATTEMPTING`` the first attempt."""
        self.state = RetryState.ATTEMPTING
        self.attempt = 0
        self.last_response: Response | None = None
        self.error: Exception | None = None
        self.last_kind: OutcomeKind | None = None

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1

    @property
    def is_last_attempt(self) -> bool:
        return self.attempt >= self.retry_count

    def next_delay(self) -> float:
        """Return the wait before the next attempt."""
        return self.backoff.calculate(max(self.attempt - 1, 0))

    def record(self, outcome: AttemptOutcome) -> RetryDecision:
        """Feed the outcome of the current attempt and transition.

        Args:
            outcome: The response or error of the current attempt.

        Returns:
            What the driver must do next.

        Raises:
            RuntimeError: If the controller already reached a final state.
        """
        if self.state is not RetryState.ATTEMPTING:
            msg = f"cannot record an outcome in state {self.state.value}"
            raise RuntimeError(msg)

        kind = self.decider.classify(outcome)
        self.last_kind = kind
        if kind is OutcomeKind.SERVER_ERROR:
            self.last_response = outcome.response
            if self.is_last_attempt:
                return self._finish(RetryState.SUCCEEDED)
            return self._advance()
        if kind in (OutcomeKind.SUCCESS, OutcomeKind.CLIENT_ERROR):
            self.last_response = outcome.response
            return self._finish(RetryState.SUCCEEDED)

        self.error = outcome.error
        if self.decider.is_retryable(kind) and not self.is_last_attempt:
            return self._advance()
        return self._finish(RetryState.FAILED_FINAL)

    def result(self) -> Response:
        """Return the terminal response, or raise the terminal error.

        Raises:
            RuntimeError: If the controller is still attempting.
        """
        if self.state is RetryState.SUCCEEDED and self.last_response is not None:
            return self.last_response
        if self.state is RetryState.FAILED_FINAL and self.error is not None:
            raise self.error
        msg = f"no result available in state {self.state.value}"
        raise RuntimeError(msg)

    def run(
        self,
        attempt_func: Callable[[], Response],
        *,
        method: str = "",
        url: str = "",
        sleep_func: Callable[[float], None] | None = None,
        callbacks: CallbackManager | None = None,
    ) -> Response:
        """Run attempts until a final state is reached.

        Args:
            attempt_func: Performs one attempt. It returns a response or
                raises a ``RequestEngineError``; any other exception
                propagates untouched.
            method: The HTTP method, used for logging.
            url: The request URL, used for logging.
            sleep_func: Waits between attempts (default: ``time.sleep``);
                it may raise to abort the call.
            callbacks: Optional lifecycle callbacks.

        Returns:
            The terminal response.

        Raises:
            RequestEngineError: The terminal error.
        """
        sleep = sleep_func or time.sleep
        while True:
            if callbacks is not None:
                callbacks.on_request(self.attempt, self.max_attempts)
            try:
                outcome = AttemptOutcome.of_response(attempt_func())
            except RequestCancelledError as exc:
                exc.attempts = self.attempt
                raise
            except RequestEngineError as exc:
                outcome = AttemptOutcome.of_error(exc)

            decision = self._step(outcome, method, url, callbacks)
            if decision is RetryDecision.RETRY:
                sleep(self.next_delay())
                continue
            return self._conclude()

    async def run_async(
        self,
        attempt_func: Callable[[], Awaitable[Response]],
        *,
        method: str = "",
        url: str = "",
        sleep_func: Callable[[float], Awaitable[None]] | None = None,
        callbacks: CallbackManager | None = None,
    ) -> Response:
        """Asynchronous version of ``run``.

        Task cancellation propagates through attempts and waits; it is
        never treated as a retry signal.
        """
        sleep = sleep_func or asyncio.sleep
        while True:
            if callbacks is not None:
                callbacks.on_request(self.attempt, self.max_attempts)
            try:
                outcome = AttemptOutcome.of_response(await attempt_func())
            except RequestEngineError as exc:
                outcome = AttemptOutcome.of_error(exc)

            decision = self._step(outcome, method, url, callbacks)
            if decision is RetryDecision.RETRY:
                await sleep(self.next_delay())
                continue
            return self._conclude()

    def _step(
        self,
        outcome: AttemptOutcome,
        method: str,
        url: str,
        callbacks: CallbackManager | None,
    ) -> RetryDecision:
        decision = self.record(outcome)
        if decision is RetryDecision.RETRY:
            status_code = outcome.response.status_code if outcome.response is not None else None
            logger.debug(
                f"{method} request to {url} will retry ({self.last_kind.value}), "
                f"attempt {self.attempt + 1}/{self.max_attempts}"
            )
            if callbacks is not None:
                callbacks.on_retry(
                    self.attempt,
                    self.max_attempts,
                    self.next_delay(),
                    error=outcome.error,
                    status_code=status_code,
                )
        return decision

    def _conclude(self) -> Response:
        if self.state is RetryState.FAILED_FINAL and isinstance(self.error, RequestEngineError):
            self.error.attempts = self.attempt + 1
        return self.result()

    def _advance(self) -> RetryDecision:
        self.attempt += 1
        return RetryDecision.RETRY

    def _finish(self, state: RetryState) -> RetryDecision:
        self.state = state
        if state is RetryState.SUCCEEDED:
            return RetryDecision.RETURN
        return RetryDecision.RAISE
