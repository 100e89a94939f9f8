r"""Synchronous request engine.

This module provides the ``RequestEngine``, which turns one
``RequestParams`` into one completed ``Response`` with bounded body
capture and a bounded number of transparent retries. The underlying
``httpx.Client`` (and its connection pool) is shared by every call and
never reconfigured by a call.
"""

from __future__ import annotations

__all__ = ["RequestEngine", "create_client"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from restcall.attempt import AttemptRunner
from restcall.core.config import EngineConfig
from restcall.core.url import build_request_url
from restcall.exceptions import NetworkError, RequestCancelledError, RequestEngineError
from restcall.retry import CallbackManager, RetryController
from restcall.utils.sleep import interruptible_sleep
from restcall.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from restcall.callbacks import FinishInfo, RequestInfo, RetryInfo
    from restcall.core.config import RequestParams
    from restcall.response import Response

logger: logging.Logger = logging.getLogger(__name__)


def create_client(config: EngineConfig) -> httpx.Client:
    """Create the shared ``httpx.Client`` described by ``config``.

    The proxy and the TLS verification policy are connection-level
    settings and are applied here once.
    """
    return httpx.Client(
        proxy=config.proxy_url or None,
        verify=not config.insecure_tls,
        timeout=config.timeout,
    )


class RequestEngine:
    r"""Executes single logical HTTP requests.

    Two usage patterns are supported, as for any resource-owning
    client:

    - Without ``client``: the engine creates its own ``httpx.Client``
      from the configuration (proxy, TLS policy) and closes it in
      ``close`` or when leaving the ``with`` block.
    - With ``client``: the engine uses it as-is and never closes it.
      Proxy and TLS settings of ``config`` are then ignored.

    The engine is meant for one call at a time; calls are serialized by
    the caller. The redirect policy is passed per request, so even
    overlapping calls do not interfere with each other.

    Args:
        config: The connection-level configuration.
        client: Optional ``httpx.Client`` to send requests with.
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry wait.
        on_finish: Optional callback invoked with the terminal outcome.

    Example:
        ```pycon
        >>> from restcall import EngineConfig, RequestEngine, RequestParams
        >>> config = EngineConfig(base_url="https://api.example.com", retry_count=2)
        >>> with RequestEngine(config) as engine:  # doctest: +SKIP
        ...     response = engine.execute(RequestParams(method="GET", url="/users"))
        ...

        ```
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        client: httpx.Client | None = None,
        on_request: Callable[[RequestInfo], None] | None = None,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_finish: Callable[[FinishInfo], None] | None = None,
    ) -> None:
        self._config: EngineConfig = config or EngineConfig()
        self._owns_client = client is None
        self._client: httpx.Client = client or create_client(self._config)
        self._runner = AttemptRunner(self._client, self._config)
        self._on_request = on_request
        self._on_retry = on_retry
        self._on_finish = on_finish

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(config={self._config!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def close(self) -> None:
        """Close the underlying client if this engine created it."""
        if self._owns_client:
            self._client.close()

    def execute(
        self,
        params: RequestParams,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Response:
        """Execute one call.

        Args:
            params: The call parameters.
            cancel_event: Optional event aborting the whole call when
                set: it is checked before each attempt, while reading
                the body, and interrupts the wait between attempts.

        Returns:
            The terminal response. 4xx and 5xx responses are returned,
            not raised.

        Raises:
            UrlParseError: If the URL cannot be parsed (no I/O performed).
            RequestConstructionError: If the request cannot be built.
            NetworkError: If the last attempt failed to get a response.
            BodyReadError: If the body of the last attempt could not be
                drained.
            RequestCancelledError: If ``cancel_event`` was set.
        """
        method = params.method
        callbacks = CallbackManager(
            method,
            params.url,
            on_request=self._on_request,
            on_retry=self._on_retry,
            on_finish=self._on_finish,
        )
        controller = RetryController(self._config.retry_count, self._config.retry_delay)
        start = time.monotonic()
        try:
            url = build_request_url(
                self._config.base_url, params.url, params.query_params, method=method
            )
            callbacks.url = url

            def wait(delay: float) -> None:
                if interruptible_sleep(delay, cancel_event):
                    raise RequestCancelledError(
                        method=method,
                        url=url,
                        message=f"{method} request to {url} was cancelled",
                        attempts=controller.attempt,
                    )

            response = controller.run(
                lambda: self._runner.run(params, url, cancel_event=cancel_event),
                method=method,
                url=url,
                sleep_func=wait,
                callbacks=callbacks,
            )
        except RequestEngineError as exc:
            total_time = time.monotonic() - start
            log_structured(
                logger,
                logging.DEBUG,
                f"{method} request to {callbacks.url} failed: {exc}",
                method=method,
                url=callbacks.url,
                attempts=exc.attempts,
                error=type(exc).__name__,
                timed_out=isinstance(exc, NetworkError) and exc.timed_out,
                duration_ms=round(total_time * 1000),
            )
            callbacks.on_finish(exc.attempts, total_time, error=exc)
            raise

        total_time = time.monotonic() - start
        log_structured(
            logger,
            logging.DEBUG,
            f"{method} request to {url} finished with status {response.status_code}",
            method=method,
            url=url,
            attempts=controller.attempt + 1,
            status_code=response.status_code,
            duration_ms=round(total_time * 1000),
            truncated=response.truncated,
        )
        callbacks.on_finish(controller.attempt + 1, total_time, response=response)
        return response
