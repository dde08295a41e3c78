import asyncio
import logging

from textrelay.core.errors import FrameError
from textrelay.core.models.config import ServerConfig
from textrelay.core.models.message import Chunk, ConnectionInfo, StreamClosed, StreamError
from textrelay.core.models.state import ServerState
from textrelay.core.ports.framing import FrameDecoder
from textrelay.core.transport.addr import get_remote_addr
from textrelay.core.transport.stream import Streamer


class Protocol(asyncio.Protocol):
    """
    Implements the connection lifecycle and inbound decoding for a single TCP
    client. It receives raw bytes from the transport, passes them through the
    connection's FrameDecoder, and forwards every decoded payload as a Chunk to
    the Streamer instance associated with the connection.

    When a connection is established, Protocol assigns it an opaque id,
    registers itself in the server's connection registry, and starts the
    Streamer task responsible for running the reader application. If the
    registry is already at the configured concurrency limit, the transport is
    closed straight away and no task is started.

    If the decoder buffers more than the configured maximum, or rejects the
    stream as malformed, the connection is closed immediately and the reader
    sees it as a failed connection. Other connections are never affected.

    The end of the stream is signalled to the Streamer exactly once: None when
    the peer closed its side cleanly (EOF or connection lost without error),
    a StreamError when the connection was lost with an exception, a
    StreamClosed when `shutdown()` closed it from the server side.

    Protocol does not interpret chunk contents or run application logic.
    These responsibilities belong to the Streamer and the Application.
    """
    def __init__(
        self,
        config: ServerConfig,
        server_state: ServerState,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._transport: asyncio.Transport = None   # type: ignore[assignment]
        self._streamer: Streamer | None = None
        self._connection: ConnectionInfo | None = None

        self._config = config
        self._app = config.app
        self._loop = loop or asyncio.get_event_loop()
        self._state = server_state
        self._decoder: FrameDecoder = config.decoder_factory()
        self._ended = False
        self._logger = logging.getLogger("core.transport.protocol")

    @property
    def connection(self) -> ConnectionInfo | None:
        return self._connection

    def connection_made(self, transport: asyncio.Transport) -> None:
        self._transport = transport
        self._connection = ConnectionInfo(
            id=self._state.next_id(),
            peer=get_remote_addr(transport),
        )

        if len(self._state.connections) >= self._config.limit_concurrency:
            self._logger.warning(
                f"{self._connection} - Concurrency limit of "
                f"{self._config.limit_concurrency} reached, closing connection"
            )
            self._ended = True
            self._transport.close()
            return

        self._state.connections[self._connection.id] = self
        self._streamer = Streamer(
            transport=self._transport,
            connection=self._connection,
            queue=asyncio.Queue(),
        )
        task = self._loop.create_task(self._streamer.run_app(self._app))
        task.add_done_callback(self._state.tasks.discard)
        self._state.tasks.add(task)

        self._logger.debug(f"{self._connection} - Connection made")

    def connection_lost(self, exc: Exception | None) -> None:
        if self._connection is not None:
            self._state.connections.pop(self._connection.id, None)
        self._logger.debug(f"{self._connection} - Connection lost.")

        if exc is None:
            self._transport.close()
            self._end(None)
        else:
            self._end(StreamError(exc))

    def eof_received(self) -> bool | None:
        self._logger.debug(f"{self._connection} - EOF received")
        self._end(None)
        # Returning a falsy value lets the transport close itself.
        return None

    def data_received(self, data: bytes) -> None:
        if self._ended:
            return

        try:
            payloads = self._decoder.feed(data)
        except FrameError as exc:
            self._logger.warning(f"{self._connection} - {exc}, closing connection")
            self._abort(exc)
            return

        for payload in payloads:
            self._streamer.queue.put_nowait(Chunk(payload))

        if self._decoder.pending > self._config.max_buffer_size:
            self._logger.warning(f"{self._connection} - Buffer overflow, closing connection")
            self._abort(FrameError("Buffer overflow"))

    def shutdown(self) -> None:
        self._end(StreamClosed("server shutdown"))
        self._transport.close()

    def _abort(self, exc: FrameError) -> None:
        self._end(StreamError(exc))
        self._transport.close()

    def _end(self, event: StreamError | StreamClosed | None) -> None:
        if self._ended:
            return

        self._ended = True
        if self._streamer is not None:
            self._streamer.queue.put_nowait(event)
