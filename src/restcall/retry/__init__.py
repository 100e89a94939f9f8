r"""Retry state machine and its collaborators.

Public API:
    - RetryController: state machine driving the attempts of one call
    - RetryDecider: classification of attempt outcomes
    - CallbackManager: lifecycle callback invocations
"""

from __future__ import annotations

__all__ = [
    "AttemptOutcome",
    "CallbackManager",
    "OutcomeKind",
    "RetryController",
    "RetryDecider",
    "RetryDecision",
    "RetryState",
]

from restcall.retry.controller import RetryController, RetryDecision, RetryState
from restcall.retry.decider import AttemptOutcome, OutcomeKind, RetryDecider
from restcall.retry.manager import CallbackManager
