r"""Asynchronous request engine.

This module provides the ``AsyncRequestEngine``, the asyncio
counterpart of ``RequestEngine``. Calls may be dispatched concurrently
on one engine: the shared ``httpx.AsyncClient`` is never reconfigured
by a call, and each call gets its own retry controller.
"""

from __future__ import annotations

__all__ = ["AsyncRequestEngine", "create_async_client"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from restcall.attempt import AsyncAttemptRunner
from restcall.core.config import EngineConfig
from restcall.core.url import build_request_url
from restcall.exceptions import NetworkError, RequestEngineError
from restcall.retry import CallbackManager, RetryController
from restcall.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from restcall.callbacks import FinishInfo, RequestInfo, RetryInfo
    from restcall.core.config import RequestParams
    from restcall.response import Response

logger: logging.Logger = logging.getLogger(__name__)


def create_async_client(config: EngineConfig) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient`` described by ``config``."""
    return httpx.AsyncClient(
        proxy=config.proxy_url or None,
        verify=not config.insecure_tls,
        timeout=config.timeout,
    )


class AsyncRequestEngine:
    r"""Executes single logical HTTP requests with asyncio.

    Cancelling the task awaiting ``execute`` aborts the whole call,
    including the wait between attempts.

    Args:
        config: The connection-level configuration.
        client: Optional ``httpx.AsyncClient`` to send requests with.
            When given, it is used as-is and never closed by the engine.
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry wait.
        on_finish: Optional callback invoked with the terminal outcome.

    Example:
        ```pycon
        >>> import asyncio
        >>> from restcall import AsyncRequestEngine, EngineConfig, RequestParams
        >>> async def main():
        ...     async with AsyncRequestEngine(EngineConfig(retry_count=1)) as engine:
        ...         return await engine.execute(
        ...             RequestParams(method="GET", url="https://api.example.com/data")
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        on_request: Callable[[RequestInfo], None] | None = None,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_finish: Callable[[FinishInfo], None] | None = None,
    ) -> None:
        self._config: EngineConfig = config or EngineConfig()
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or create_async_client(self._config)
        self._runner = AsyncAttemptRunner(self._client, self._config)
        self._on_request = on_request
        self._on_retry = on_retry
        self._on_finish = on_finish

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(config={self._config!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> EngineConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the underlying client if this engine created it."""
        if self._owns_client:
            await self._client.aclose()

    async def execute(self, params: RequestParams) -> Response:
        """Execute one call.

        Args:
            params: The call parameters.

        Returns:
            The terminal response. 4xx and 5xx responses are returned,
            not raised.

        Raises:
            UrlParseError: If the URL cannot be parsed (no I/O performed).
            RequestConstructionError: If the request cannot be built.
            NetworkError: If the last attempt failed to get a response.
            BodyReadError: If the body of the last attempt could not be
                drained.
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
            response = await controller.run_async(
                lambda: self._runner.run(params, url),
                method=method,
                url=url,
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
