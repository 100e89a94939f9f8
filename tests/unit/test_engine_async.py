r"""End-to-end tests of the asynchronous request engine."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import Mock, call

import httpx
import pytest
import pytest_asyncio

from restcall import (
    AsyncRequestEngine,
    EngineConfig,
    NetworkError,
    RequestParams,
    UrlParseError,
)
from restcall.engine_async import create_async_client
from tests.helpers import TEST_URL, sequence_handler

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable


@pytest_asyncio.fixture
async def make_async_client() -> AsyncGenerator[Callable[..., httpx.AsyncClient], None]:
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        await client.aclose()


def get(url: str = TEST_URL, **kwargs) -> RequestParams:
    return RequestParams(method="GET", url=url, **kwargs)


#########################################
#     Tests for create_async_client     #
#########################################


@pytest.mark.asyncio
async def test_create_async_client() -> None:
    async with create_async_client(EngineConfig(timeout=5.0)) as client:
        assert isinstance(client, httpx.AsyncClient)
        assert client.timeout == httpx.Timeout(5.0)


########################################
#     Tests for AsyncRequestEngine     #
########################################


@pytest.mark.asyncio
async def test_async_request_engine_closes_owned_client() -> None:
    async with AsyncRequestEngine() as engine:
        pass
    assert engine._client.is_closed


@pytest.mark.asyncio
async def test_async_request_engine_does_not_close_injected_client(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    client = make_async_client(sequence_handler())
    async with AsyncRequestEngine(client=client):
        pass
    assert not client.is_closed


@pytest.mark.asyncio
async def test_async_request_engine_success(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    handler = sequence_handler(httpx.Response(200, text="ok"))
    engine = AsyncRequestEngine(
        EngineConfig(base_url="https://api.example.com"), client=make_async_client(handler)
    )

    response = await engine.execute(get("/data", query_params={"page": "2"}))

    assert response.status_code == 200
    assert response.body == b"ok"
    assert str(handler.call_args.args[0].url) == "https://api.example.com/data?page=2"


@pytest.mark.asyncio
async def test_async_request_engine_truncation(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    handler = sequence_handler(httpx.Response(200, content=b"x" * 200))
    engine = AsyncRequestEngine(
        EngineConfig(max_response_size=100), client=make_async_client(handler)
    )

    response = await engine.execute(get())

    assert response.body == b"x" * 100
    assert response.truncated
    assert response.original_size == 200


@pytest.mark.asyncio
async def test_async_request_engine_retry_after_network_error(
    make_async_client: Callable[..., httpx.AsyncClient], mock_asleep: Mock
) -> None:
    handler = sequence_handler(httpx.ConnectError("connection refused"), httpx.Response(200))
    on_finish = Mock()
    engine = AsyncRequestEngine(
        EngineConfig(retry_count=3, retry_delay=0.5),
        client=make_async_client(handler),
        on_finish=on_finish,
    )

    response = await engine.execute(get())

    assert response.status_code == 200
    assert handler.call_count == 2
    mock_asleep.assert_called_once_with(0.5)
    assert on_finish.call_args.args[0].attempts == 2


@pytest.mark.asyncio
async def test_async_request_engine_retry_after_body_read_error(
    make_async_client: Callable[..., httpx.AsyncClient], mock_asleep: Mock
) -> None:
    class AsyncBrokenStream(httpx.AsyncByteStream):
        async def __aiter__(self):
            yield b"partial"
            msg = "connection reset mid-body"
            raise httpx.ReadError(msg)

    handler = sequence_handler(
        httpx.Response(200, stream=AsyncBrokenStream()), httpx.Response(200, text="ok")
    )
    engine = AsyncRequestEngine(EngineConfig(retry_count=1), client=make_async_client(handler))

    response = await engine.execute(get())

    assert response.status_code == 200
    assert response.body == b"ok"
    assert handler.call_count == 2
    mock_asleep.assert_called_once_with(1.0)


@pytest.mark.asyncio
async def test_async_request_engine_client_error_not_retried(
    make_async_client: Callable[..., httpx.AsyncClient], mock_asleep: Mock
) -> None:
    handler = sequence_handler(httpx.Response(404))
    engine = AsyncRequestEngine(EngineConfig(retry_count=3), client=make_async_client(handler))

    assert (await engine.execute(get())).status_code == 404
    assert handler.call_count == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_request_engine_server_error_every_attempt(
    make_async_client: Callable[..., httpx.AsyncClient], mock_asleep: Mock
) -> None:
    handler = sequence_handler(*[httpx.Response(503) for _ in range(3)])
    engine = AsyncRequestEngine(
        EngineConfig(retry_count=2, retry_delay=0.25), client=make_async_client(handler)
    )

    assert (await engine.execute(get())).status_code == 503
    assert handler.call_count == 3
    assert mock_asleep.call_args_list == [call(0.25), call(0.25)]


@pytest.mark.asyncio
async def test_async_request_engine_network_error_every_attempt(
    make_async_client: Callable[..., httpx.AsyncClient], mock_asleep: Mock
) -> None:
    handler = sequence_handler(*[httpx.ConnectError("connection refused") for _ in range(2)])
    engine = AsyncRequestEngine(EngineConfig(retry_count=1), client=make_async_client(handler))

    with pytest.raises(NetworkError) as exc_info:
        await engine.execute(get())

    assert exc_info.value.attempts == 2
    assert mock_asleep.call_count == 1


@pytest.mark.asyncio
async def test_async_request_engine_invalid_url(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    handler = sequence_handler()
    engine = AsyncRequestEngine(client=make_async_client(handler))

    with pytest.raises(UrlParseError):
        await engine.execute(get("https://api.example.com/\x00"))
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_async_request_engine_deadline(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200)

    engine = AsyncRequestEngine(client=make_async_client(slow))

    with pytest.raises(NetworkError) as exc_info:
        await engine.execute(get(timeout=0.05))

    assert exc_info.value.timed_out
    assert exc_info.value.attempts == 1


@pytest.mark.asyncio
async def test_async_request_engine_concurrent_redirect_policies(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    """Test that concurrent calls each apply their own redirect policy."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "https://api.example.com/end"})
        return httpx.Response(200)

    engine = AsyncRequestEngine(
        EngineConfig(base_url="https://api.example.com"), client=make_async_client(handler)
    )

    responses = await asyncio.gather(
        *[engine.execute(get("/start", follow_redirects=i % 2 == 0)) for i in range(6)]
    )

    assert [r.status_code for r in responses] == [200, 302, 200, 302, 200, 302]


@pytest.mark.asyncio
async def test_async_request_engine_cancelled_during_retry_wait(
    make_async_client: Callable[..., httpx.AsyncClient],
) -> None:
    handler = sequence_handler(httpx.ConnectError("connection refused"), httpx.Response(200))
    on_finish = Mock()
    engine = AsyncRequestEngine(
        EngineConfig(retry_count=2, retry_delay=60.0),
        client=make_async_client(handler),
        on_finish=on_finish,
    )

    task = asyncio.create_task(engine.execute(get()))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert handler.call_count == 1
    on_finish.assert_not_called()
