from dataclasses import dataclass
from typing import Callable, Awaitable


@dataclass(frozen=True)
class ConnectionInfo:
    """
    Identity of one accepted connection, passed along with every announcement.
    """
    id: int
    """
    Opaque identifier, unique for the lifetime of the server process.
    """

    peer: tuple[str, int] | None = None
    """
    Remote address, when the transport exposes one.
    """

    def __str__(self) -> str:
        if self.peer is None:
            return f"#{self.id}"
        return "#%d %s:%d" % (self.id, *self.peer)


@dataclass(frozen=True)
class Chunk:
    """
    A byte sequence produced by the connection's decoder.

    In raw framing a Chunk is whatever one transport read delivered (capped at
    the configured chunk size); it carries no relationship to what the sender
    considered a message.
    """
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StreamError:
    """
    Queue item signalling that the transport failed. The Streamer turns it
    into a ConnectionFailedError for the reader.
    """
    error: BaseException


@dataclass(frozen=True)
class StreamClosed:
    """
    Queue item signalling that the server closed the connection on its own
    initiative. The Streamer turns it into a ConnectionClosedError.
    """
    reason: str


StreamEvent = Chunk | StreamError | StreamClosed | None
"""
Item carried by the per-connection queue. None is the end-of-stream sentinel.
"""


ReceiveChunk = Callable[[], Awaitable[Chunk | None]]
"""
Coroutine provided to the application for receiving the next chunk.
It suspends until a chunk is available and returns None on end-of-stream.
"""
