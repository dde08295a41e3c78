import asyncio
import logging
import pytest

from textrelay.core.errors import ConnectionClosedError, ConnectionFailedError
from textrelay.core.models.message import Chunk, ConnectionInfo, StreamClosed, StreamError
from textrelay.core.transport.stream import Streamer


@pytest.fixture
def connection():
    return ConnectionInfo(id=7, peer=("127.0.0.1", 4242))


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_returns_next_chunk(transport, connection):
    queue = asyncio.Queue()
    streamer = Streamer(transport, connection, queue)

    chunk = Chunk(b"pong")
    await queue.put(chunk)

    assert await streamer.receive() == chunk


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_end_of_stream_is_sticky(transport, connection):
    queue = asyncio.Queue()
    streamer = Streamer(transport, connection, queue)

    await queue.put(None)
    await queue.put(Chunk(b"never delivered"))

    assert await streamer.receive() is None
    assert await streamer.receive() is None
    assert queue.qsize() == 1


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_raises_connection_failed(transport, connection):
    queue = asyncio.Queue()
    streamer = Streamer(transport, connection, queue)
    error = ConnectionResetError("reset")

    await queue.put(StreamError(error))

    with pytest.raises(ConnectionFailedError) as info:
        await streamer.receive()
    assert info.value.__cause__ is error

    with pytest.raises(ConnectionFailedError):
        await streamer.receive()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_run_app_closes_transport_on_normal_exit(transport, connection):
    seen = []

    async def app(conn, receive):
        seen.append(conn)

    streamer = Streamer(transport, connection, asyncio.Queue())

    await streamer.run_app(app)

    assert seen == [connection]
    assert transport.is_closing()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_run_app_closes_transport_on_exception(transport, connection, caplog):
    async def app(conn, receive):
        raise RuntimeError("boom")

    streamer = Streamer(transport, connection, asyncio.Queue())

    with caplog.at_level(logging.ERROR, logger="core.transport.stream"):
        await streamer.run_app(app)

    assert transport.is_closing()
    assert "Exception in Application" in caplog.text
    assert "#7" in caplog.text


@pytest.mark.ut
@pytest.mark.asyncio
async def test_run_app_propagates_cancellation(transport, connection):
    async def app(conn, receive):
        await receive()

    streamer = Streamer(transport, connection, asyncio.Queue())
    task = asyncio.create_task(streamer.run_app(app))
    await asyncio.sleep(0)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert transport.is_closing()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_raises_connection_closed_by_server(transport, connection):
    queue = asyncio.Queue()
    streamer = Streamer(transport, connection, queue)

    await queue.put(StreamClosed("server shutdown"))

    with pytest.raises(ConnectionClosedError):
        await streamer.receive()
    with pytest.raises(ConnectionClosedError):
        await streamer.receive()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_run_app_server_close_is_not_an_error(transport, connection, caplog):
    async def app(conn, receive):
        await receive()

    queue = asyncio.Queue()
    await queue.put(StreamClosed("server shutdown"))
    streamer = Streamer(transport, connection, queue)

    with caplog.at_level(logging.DEBUG, logger="core.transport.stream"):
        await streamer.run_app(app)

    assert transport.is_closing()
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert "closed by server" in caplog.text
