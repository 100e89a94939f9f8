r"""Classification of attempt outcomes.

This module provides the ``RetryDecider`` that maps the outcome of one
attempt (a response or an error) to an ``OutcomeKind``. The retry
controller decides what to do next from the kind alone.
"""

from __future__ import annotations

__all__ = ["AttemptOutcome", "OutcomeKind", "RetryDecider"]

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from restcall.exceptions import BodyReadError, NetworkError

if TYPE_CHECKING:
    from restcall.response import Response


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    BODY_READ_ERROR = "body_read_error"
    FATAL = "fatal"


@dataclass(frozen=True)
class AttemptOutcome:
    """The result of one attempt: either a response or an error.

    Example:
        ```pycon
        >>> from restcall.response import Response
        >>> from restcall.retry.decider import AttemptOutcome
        >>> outcome = AttemptOutcome.of_response(Response(status_code=200))
        >>> outcome.response.status_code
        200
        >>> outcome.error is None
        True

        ```
    """

    response: Response | None = None
    error: Exception | None = None

    @classmethod
    def of_response(cls, response: Response) -> AttemptOutcome:
        return cls(response=response)

    @classmethod
    def of_error(cls, error: Exception) -> AttemptOutcome:
        return cls(error=error)


class RetryDecider:
    """Classifies attempt outcomes.

    - ``NetworkError`` is a network error.
    - ``BodyReadError`` is a body read error. Like a network error it
      may be retried: the exchange broke before a usable response
      was captured.
    - Any other error is fatal.
    - A response is a server error or a client error as reported by
      ``Response.is_server_error`` and ``Response.is_client_error``,
      and a success otherwise (including status >= 600).

    Example:
        ```pycon
        >>> from restcall.response import Response
        >>> from restcall.retry.decider import AttemptOutcome, RetryDecider
        >>> decider = RetryDecider()
        >>> decider.classify(AttemptOutcome.of_response(Response(status_code=503)))
        <OutcomeKind.SERVER_ERROR: 'server_error'>
        >>> decider.classify(AttemptOutcome.of_response(Response(status_code=404)))
        <OutcomeKind.CLIENT_ERROR: 'client_error'>

        ```
    """

    def classify(self, outcome: AttemptOutcome) -> OutcomeKind:
        if outcome.error is not None:
            return self.classify_error(outcome.error)
        if outcome.response is None:
            msg = "an attempt outcome needs a response or an error"
            raise ValueError(msg)
        return self.classify_response(outcome.response)

    def classify_error(self, error: Exception) -> OutcomeKind:
        if isinstance(error, NetworkError):
            return OutcomeKind.NETWORK_ERROR
        if isinstance(error, BodyReadError):
            return OutcomeKind.BODY_READ_ERROR
        return OutcomeKind.FATAL

    def classify_response(self, response: Response) -> OutcomeKind:
        if response.is_server_error:
            return OutcomeKind.SERVER_ERROR
        if response.is_client_error:
            return OutcomeKind.CLIENT_ERROR
        return OutcomeKind.SUCCESS

    def is_retryable(self, kind: OutcomeKind) -> bool:
        """Return ``True`` if another attempt may follow an outcome of
        this kind."""
        return kind in (
            OutcomeKind.NETWORK_ERROR,
            OutcomeKind.BODY_READ_ERROR,
            OutcomeKind.SERVER_ERROR,
        )
