r"""Utility functions used around the request engine: retry waits,
duration parsing and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "interruptible_sleep",
    "log_structured",
    "parse_duration",
    "set_correlation_id",
]

from restcall.utils.duration import parse_duration
from restcall.utils.sleep import interruptible_sleep
from restcall.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
