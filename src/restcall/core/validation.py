r"""Parameter validation utilities for the request engine.

This module provides validation functions for engine and per-call
parameters to ensure they meet the required constraints before any
request is issued.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout value.

    Args:
        timeout: Maximum seconds allowed for one attempt. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from restcall.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(retry_count: int, retry_delay: float) -> None:
    """Validate retry parameters.

    Args:
        retry_count: Number of retries after the first attempt.
            Must be >= 0. A value of 0 means only the initial attempt.
        retry_delay: Fixed wait in seconds between attempts. Must be >= 0.

    Raises:
        ValueError: If retry_count or retry_delay is negative.

    Example:
        ```pycon
        >>> from restcall.core.validation import validate_retry_params
        >>> validate_retry_params(retry_count=3, retry_delay=1.0)
        >>> validate_retry_params(retry_count=-1, retry_delay=1.0)  # doctest: +SKIP

        ```
    """
    if retry_count < 0:
        msg = f"retry_count must be >= 0, got {retry_count}"
        raise ValueError(msg)
    if retry_delay < 0:
        msg = f"retry_delay must be >= 0, got {retry_delay}"
        raise ValueError(msg)
