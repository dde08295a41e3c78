import logging

from textrelay.core.errors import ConnectionClosedError
from textrelay.core.models.message import ConnectionInfo, ReceiveChunk
from textrelay.core.ports.sink import Sink
from textrelay.core.transport.application import Application


class ChunkReader(Application):
    """
    Reader loop run once per accepted connection.

    Every non-empty chunk is announced to the sink in arrival order. The
    loop stops on the first end-of-stream, after announcing the disconnect
    exactly once. When the server itself closes the connection (shutdown),
    the loop stops without a disconnect announcement since the peer is
    still there. A ConnectionFailedError raised by `receive()` is left to
    propagate: the connection is then closed by the Streamer without a
    disconnect announcement.
    """
    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._logger = logging.getLogger("core.reader")

    async def __call__(self, connection: ConnectionInfo, receive: ReceiveChunk) -> None:
        count = 0

        try:
            while (chunk := await receive()) is not None:
                if not chunk.data:
                    continue

                count += 1
                self._logger.debug(f"{connection} - Chunk of {len(chunk)} byte(s)")
                self._sink.chunk(connection, chunk.data)
        except ConnectionClosedError:
            self._logger.debug(f"{connection} - Closed by server after {count} chunk(s)")
            return

        self._sink.disconnect(connection)
        self._logger.debug(f"{connection} - Stream ended after {count} chunk(s)")
