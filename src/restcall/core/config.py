r"""Configuration dataclasses and defaults for the request engine.

``EngineConfig`` holds the connection-level settings supplied once when
the engine is built. ``RequestParams`` holds the settings of a single
call. Per-call values never modify the engine configuration.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RESPONSE_SIZE",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "EngineConfig",
    "RequestParams",
]

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from restcall.core.validation import validate_retry_params, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Mapping

# Default per-attempt timeout in seconds
DEFAULT_TIMEOUT = 30.0

# Byte ceiling for a captured response body (50 KiB)
DEFAULT_MAX_RESPONSE_SIZE = 51200

# Total attempts = retry_count + 1 (initial attempt)
DEFAULT_RETRY_COUNT = 0

# Fixed wait in seconds between two attempts
DEFAULT_RETRY_DELAY = 1.0


def _frozen_headers(headers: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(headers or {}))


@dataclass(frozen=True)
class EngineConfig:
    """Connection-level configuration of a request engine.

    The configuration is immutable. Default headers are copied at
    construction time, so mutating the mapping passed in afterwards
    has no effect on the engine.

    Args:
        base_url: Prefix for relative request URLs (those starting
            with ``/``). Empty means no base URL.
        default_headers: Headers applied to every request unless the
            call overrides them.
        timeout: Default per-attempt deadline in seconds. Must be > 0.
        max_response_size: Byte cap for a captured body. Values <= 0
            are replaced by ``DEFAULT_MAX_RESPONSE_SIZE``.
        proxy_url: Outbound proxy for all requests. Empty means none.
        retry_count: Number of retries after the first attempt.
            Must be >= 0.
        retry_delay: Fixed wait in seconds between attempts.
            Must be >= 0.
        insecure_tls: Disable TLS certificate verification.

    Example:
        ```pycon
        >>> from restcall.core.config import EngineConfig
        >>> config = EngineConfig(base_url="https://api.example.com", max_response_size=0)
        >>> config.max_response_size
        51200
        >>> config.retry_count
        0

        ```
    """

    base_url: str = ""
    default_headers: Mapping[str, str] = field(default_factory=_frozen_headers)
    timeout: float = DEFAULT_TIMEOUT
    max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE
    proxy_url: str = ""
    retry_count: int = DEFAULT_RETRY_COUNT
    retry_delay: float = DEFAULT_RETRY_DELAY
    insecure_tls: bool = False

    def __post_init__(self) -> None:
        validate_timeout(self.timeout)
        validate_retry_params(retry_count=self.retry_count, retry_delay=self.retry_delay)

        if self.max_response_size <= 0:
            object.__setattr__(self, "max_response_size", DEFAULT_MAX_RESPONSE_SIZE)
        object.__setattr__(self, "default_headers", _frozen_headers(self.default_headers))


@dataclass(frozen=True)
class RequestParams:
    """Parameters of a single call.

    The caller is responsible for passing an uppercase, known method
    and a non-empty URL; the engine does not validate them again.

    Args:
        method: Uppercase HTTP verb.
        url: Absolute URL, or a path starting with ``/`` when the
            engine has a base URL.
        headers: Per-call header overrides.
        body: Raw request body. ``None`` or empty means no body.
        query_params: Parameters set on the URL query string,
            overwriting same-named ones already present.
        timeout: Per-call timeout override in seconds. ``None`` or
            ``0`` means the engine default.
        follow_redirects: Whether to follow 3xx responses. ``None``
            means the default (follow).
        include_headers: Whether the formatter should show response
            headers. ``None`` means the default (hide). Not used by
            the engine itself.
    """

    method: str
    url: str
    headers: Mapping[str, str] | None = None
    body: str | None = None
    query_params: Mapping[str, str] | None = None
    timeout: float | None = None
    follow_redirects: bool | None = None
    include_headers: bool | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            msg = f"timeout must be >= 0, got {self.timeout}"
            raise ValueError(msg)

    def effective_timeout(self, default: float) -> float:
        """Return the per-call timeout, or ``default`` when unset or zero.

        Example:
            ```pycon
            >>> from restcall.core.config import RequestParams
            >>> RequestParams(method="GET", url="/x").effective_timeout(30.0)
            30.0
            >>> RequestParams(method="GET", url="/x", timeout=2.5).effective_timeout(30.0)
            2.5

            ```
        """
        return self.timeout if self.timeout else default

    def should_follow_redirects(self) -> bool:
        return True if self.follow_redirects is None else self.follow_redirects

    def should_include_headers(self) -> bool:
        return False if self.include_headers is None else self.include_headers
