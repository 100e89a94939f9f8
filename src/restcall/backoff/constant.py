r"""Fixed delay between retry attempts."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]


class ConstantBackoff:
    """Constant/fixed backoff strategy.

    Returns the same delay before every retry, regardless of the attempt
    index. No jitter is added.

    Args:
        delay: The fixed delay in seconds (default: 1.0).

    Example:
        ```pycon
        >>> from restcall.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=2.5)
        >>> backoff.calculate(0)
        2.5
        >>> backoff.calculate(10)
        2.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self.delay = delay

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        """Return the delay before the attempt after ``attempt``."""
        return self.delay
