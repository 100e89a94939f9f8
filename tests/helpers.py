r"""Shared test helpers for engine and attempt tests.

Transport handlers plug into ``httpx.MockTransport`` so requests run
through the real ``httpx`` client machinery without any network I/O.
"""

from __future__ import annotations

__all__ = ["TEST_URL", "sequence_handler"]

from unittest.mock import Mock

import httpx

TEST_URL = "https://api.example.com/data"


def sequence_handler(*outcomes: httpx.Response | Exception) -> Mock:
    """Create a transport handler returning (or raising) ``outcomes``
    in order, one per request.

    The returned mock records every ``httpx.Request`` it received.
    """
    remaining = iter(outcomes)

    def handle(request: httpx.Request) -> httpx.Response:
        outcome = next(remaining)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return Mock(side_effect=handle)
