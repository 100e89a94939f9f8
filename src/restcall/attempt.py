r"""Single request/response round trips.

An attempt builds the outgoing request (resolved URL, merged headers,
optional body), sends it with the per-call redirect policy under a
deadline scoped to this attempt, and captures at most
``max_response_size`` bytes of the body.

Transport failures before a response is received become
``NetworkError``. Failures while draining the body of a received
response become ``BodyReadError``. Both are retried while attempts
remain.
"""

from __future__ import annotations

__all__ = ["AsyncAttemptRunner", "AttemptRunner", "build_request", "make_response"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from restcall.core.body import (
    parse_content_length,
    read_limited_body,
    read_limited_body_async,
)
from restcall.core.headers import resolve_headers
from restcall.core.redirects import RedirectPolicy
from restcall.exceptions import (
    BodyReadError,
    NetworkError,
    RequestCancelledError,
    RequestConstructionError,
)
from restcall.response import Response

if TYPE_CHECKING:
    import threading

    from restcall.core.body import CapturedBody
    from restcall.core.config import EngineConfig, RequestParams

logger: logging.Logger = logging.getLogger(__name__)

_STREAM_ERRORS = (httpx.HTTPError, httpx.StreamError)


def build_request(
    client: httpx.Client | httpx.AsyncClient,
    config: EngineConfig,
    params: RequestParams,
    url: str,
    timeout: float,
) -> httpx.Request:
    """Build the outgoing request of one attempt.

    Args:
        client: The client the request will be sent with.
        config: The engine configuration (default headers).
        params: The call parameters (method, headers, body).
        url: The resolved request URL.
        timeout: The timeout of every I/O operation of the attempt.

    Returns:
        The request, ready to send.

    Raises:
        RequestConstructionError: If the transport rejects the
            method/URL pairing or the headers.
    """
    try:
        return client.build_request(
            params.method,
            url,
            headers=resolve_headers(config.default_headers, params.headers),
            content=params.body.encode("utf-8") if params.body else None,
            timeout=httpx.Timeout(timeout),
        )
    except (httpx.InvalidURL, ValueError, TypeError) as exc:
        raise RequestConstructionError(
            method=params.method,
            url=url,
            message=f"creating request {params.method} {url}: {exc}",
            cause=exc,
        ) from exc


def make_response(response: httpx.Response, body: CapturedBody, duration: float) -> Response:
    """Convert a received response and its captured body."""
    return Response(
        status_code=response.status_code,
        status_text=httpx.codes.get_reason_phrase(response.status_code),
        headers=response.headers,
        body=body.content,
        duration=duration,
        truncated=body.truncated,
        original_size=body.original_size,
        url=str(response.url),
    )


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _send_error(exc: httpx.HTTPError, method: str, url: str) -> Exception:
    if isinstance(exc, (httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        return RequestConstructionError(
            method=method, url=url, message=f"creating request {method} {url}: {exc}", cause=exc
        )
    return NetworkError(
        method=method,
        url=url,
        message=f"executing {method} {url}: {_describe(exc)}",
        cause=exc,
        timed_out=isinstance(exc, httpx.TimeoutException),
    )


def _body_error(exc: Exception, method: str, url: str) -> BodyReadError:
    return BodyReadError(
        method=method,
        url=url,
        message=f"reading response body of {method} {url}: {_describe(exc)}",
        cause=exc,
    )


class AttemptRunner:
    """Performs exactly one synchronous round trip.

    The per-attempt deadline is enforced as an ``httpx.Timeout`` on
    every I/O operation, plus a wall-clock check once the headers are
    received and between body chunks.

    Args:
        client: The shared client. It is never reconfigured.
        config: The engine configuration.

    Example:
        ```pycon
        >>> import httpx
        >>> from restcall.attempt import AttemptRunner
        >>> from restcall.core import EngineConfig, RequestParams
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        >>> runner = AttemptRunner(httpx.Client(transport=transport), EngineConfig())
        >>> response = runner.run(RequestParams(method="GET", url="https://example.com"), "https://example.com")
        >>> response.status_code, response.body
        (200, b'ok')

        ```
    """

    def __init__(self, client: httpx.Client, config: EngineConfig) -> None:
        self._client = client
        self._config = config

    def run(
        self,
        params: RequestParams,
        url: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Response:
        """Run one attempt.

        Args:
            params: The call parameters.
            url: The resolved request URL.
            cancel_event: Optional event aborting the call when set.

        Returns:
            The received response with its bounded body.

        Raises:
            RequestConstructionError: If the request cannot be built.
            NetworkError: If no response could be received.
            BodyReadError: If the response body cannot be drained.
            RequestCancelledError: If ``cancel_event`` is set.
        """
        method = params.method
        timeout = params.effective_timeout(self._config.timeout)
        request = build_request(self._client, self._config, params, url, timeout)
        policy = RedirectPolicy.for_call(params)

        def check() -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise RequestCancelledError(
                    method=method, url=url, message=f"{method} request to {url} was cancelled"
                )
            if time.monotonic() > deadline:
                raise BodyReadError(
                    method=method,
                    url=url,
                    message=f"reading response body of {method} {url}: deadline of {timeout}s exceeded",
                )

        start = time.monotonic()
        deadline = start + timeout
        check()
        try:
            response = self._client.send(request, stream=True, **policy.send_options())
        except httpx.HTTPError as exc:
            logger.debug(
                f"{method} request to {url} failed after {time.monotonic() - start:.3f}s: "
                f"{type(exc).__name__}"
            )
            raise _send_error(exc, method, url) from exc

        if time.monotonic() > deadline:
            response.close()
            raise NetworkError(
                method=method,
                url=url,
                message=f"executing {method} {url}: deadline of {timeout}s exceeded",
                timed_out=True,
            )

        try:
            captured = read_limited_body(
                response.iter_bytes(),
                self._config.max_response_size,
                parse_content_length(response.headers.get("content-length")),
                check=check,
            )
        except _STREAM_ERRORS as exc:
            raise _body_error(exc, method, url) from exc
        finally:
            response.close()

        duration = time.monotonic() - start
        logger.debug(f"{method} request to {url} returned {response.status_code} in {duration:.3f}s")
        return make_response(response, captured, duration)


class AsyncAttemptRunner:
    """Performs exactly one asynchronous round trip.

    The per-attempt deadline is a wall-clock limit covering both the
    send and the body read. Task cancellation is never caught.

    Args:
        client: The shared client. It is never reconfigured, so calls
            may run concurrently.
        config: The engine configuration.
    """

    def __init__(self, client: httpx.AsyncClient, config: EngineConfig) -> None:
        self._client = client
        self._config = config

    async def run(self, params: RequestParams, url: str) -> Response:
        """Run one attempt.

        Args:
            params: The call parameters.
            url: The resolved request URL.

        Returns:
            The received response with its bounded body.

        Raises:
            RequestConstructionError: If the request cannot be built.
            NetworkError: If no response could be received in time.
            BodyReadError: If the response body cannot be drained in time.
        """
        method = params.method
        timeout = params.effective_timeout(self._config.timeout)
        request = build_request(self._client, self._config, params, url, timeout)
        policy = RedirectPolicy.for_call(params)

        response: httpx.Response | None = None
        start = time.monotonic()
        try:
            async with asyncio.timeout(timeout):
                try:
                    response = await self._client.send(
                        request, stream=True, **policy.send_options()
                    )
                except httpx.HTTPError as exc:
                    raise _send_error(exc, method, url) from exc

                try:
                    captured = await read_limited_body_async(
                        response.aiter_bytes(),
                        self._config.max_response_size,
                        parse_content_length(response.headers.get("content-length")),
                    )
                except _STREAM_ERRORS as exc:
                    raise _body_error(exc, method, url) from exc
        except TimeoutError as exc:
            logger.debug(f"{method} request to {url} exceeded its deadline of {timeout}s")
            if response is None:
                raise NetworkError(
                    method=method,
                    url=url,
                    message=f"executing {method} {url}: deadline of {timeout}s exceeded",
                    cause=exc,
                    timed_out=True,
                ) from exc
            raise _body_error(exc, method, url) from exc
        finally:
            if response is not None:
                await response.aclose()

        duration = time.monotonic() - start
        logger.debug(f"{method} request to {url} returned {response.status_code} in {duration:.3f}s")
        return make_response(response, captured, duration)
