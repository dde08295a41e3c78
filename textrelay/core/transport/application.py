from typing import Protocol

from textrelay.core.models.message import ConnectionInfo, ReceiveChunk


class Application(Protocol):
    """
    This interface defines the per‑connection handler executed by the Streamer.

    An Application is an asynchronous callable that receives the identity of
    the connection and a `receive` function, which waits for and returns the
    next Chunk, or None once the peer closed its sending side. The Application
    implements the business logic for a single TCP connection by repeatedly
    calling `receive()` until end-of-stream.

    `receive()` raises ConnectionFailedError when the transport failed and
    ConnectionClosedError when the server closed the connection itself; the
    Application may let either propagate.

    The Application runs until it returns or raises an exception. When it exits,
    the underlying connection is closed by the Streamer.

    The Application does not handle framing or transport-level concerns. These
    responsibilities belong to the Protocol and the Streamer.
    """
    async def __call__(self, connection: ConnectionInfo, receive: ReceiveChunk) -> None:
        ...
