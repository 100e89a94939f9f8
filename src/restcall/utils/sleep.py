r"""Waits between retry attempts."""

from __future__ import annotations

__all__ = ["interruptible_sleep"]

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import threading

logger: logging.Logger = logging.getLogger(__name__)


def interruptible_sleep(delay: float, cancel_event: threading.Event | None = None) -> bool:
    """Wait ``delay`` seconds unless ``cancel_event`` gets set.

    Args:
        delay: The wait in seconds.
        cancel_event: Optional event ending the wait early.

    Returns:
        ``True`` if the wait was interrupted by the event (or the event
        was already set), ``False`` otherwise.

    Example:
        ```pycon
        >>> import threading
        >>> from restcall.utils.sleep import interruptible_sleep
        >>> interruptible_sleep(0.0)
        False
        >>> event = threading.Event()
        >>> event.set()
        >>> interruptible_sleep(10.0, event)
        True

        ```
    """
    logger.debug(f"Waiting {delay:.2f}s before retry")
    if cancel_event is None:
        time.sleep(delay)
        return False
    return cancel_event.wait(delay)
