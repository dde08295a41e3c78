import pytest

from tests.fake.fake_sink import FakeReceiveChunk
from textrelay.core.errors import ConnectionClosedError, ConnectionFailedError
from textrelay.core.models.message import Chunk, ConnectionInfo
from textrelay.core.reader import ChunkReader


@pytest.fixture
def connection():
    return ConnectionInfo(id=1)


@pytest.mark.ut
@pytest.mark.asyncio
async def test_announces_chunks_in_order_then_disconnect(sink, connection):
    receive = FakeReceiveChunk([Chunk(b"a1"), Chunk(b"a2"), None])

    await ChunkReader(sink)(connection, receive)

    assert [(a.kind, a.data) for a in sink.announcements] == [
        ("chunk", b"a1"),
        ("chunk", b"a2"),
        ("disconnect", b""),
    ]
    assert all(a.connection == connection for a in sink.announcements)


@pytest.mark.ut
@pytest.mark.asyncio
async def test_announced_content_is_exactly_the_chunk(sink, connection):
    data = bytes(range(256)) * 4
    receive = FakeReceiveChunk([Chunk(data), None])

    await ChunkReader(sink)(connection, receive)

    assert sink.chunks[0].data == data


@pytest.mark.ut
@pytest.mark.asyncio
async def test_zero_length_chunk_is_not_announced(sink, connection):
    receive = FakeReceiveChunk([Chunk(b""), Chunk(b"x"), Chunk(b""), None])

    await ChunkReader(sink)(connection, receive)

    assert [a.data for a in sink.chunks] == [b"x"]
    assert len(sink.disconnects) == 1


@pytest.mark.ut
@pytest.mark.asyncio
async def test_stops_reading_at_first_end_of_stream(sink, connection):
    receive = FakeReceiveChunk([Chunk(b"hi"), None, None, Chunk(b"late")])

    await ChunkReader(sink)(connection, receive)

    assert receive.calls == 2
    assert len(sink.disconnects) == 1
    assert [a.data for a in sink.chunks] == [b"hi"]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_connection_failure_propagates_without_disconnect(sink, connection):
    receive = FakeReceiveChunk([Chunk(b"hi"), ConnectionFailedError("reset")])

    with pytest.raises(ConnectionFailedError):
        await ChunkReader(sink)(connection, receive)

    assert [a.data for a in sink.chunks] == [b"hi"]
    assert sink.disconnects == []


@pytest.mark.ut
@pytest.mark.asyncio
async def test_server_close_stops_without_disconnect(sink, connection):
    receive = FakeReceiveChunk([Chunk(b"hi"), ConnectionClosedError("server shutdown")])

    await ChunkReader(sink)(connection, receive)

    assert [a.data for a in sink.chunks] == [b"hi"]
    assert sink.disconnects == []
