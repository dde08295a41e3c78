import asyncio
import logging

from textrelay.core.errors import ConnectionClosedError, ConnectionFailedError
from textrelay.core.models.message import Chunk, ConnectionInfo, StreamClosed, StreamError, StreamEvent
from textrelay.core.transport.application import Application


class Streamer:
    """
    Manages the inbound flow of chunks for a single TCP connection.

    It receives Chunk objects from the Protocol through an internal queue
    and exposes them to the Application via the asynchronous `receive()` method.
    The queue also carries the end of the stream: None for a clean end-of-stream,
    a StreamError when the transport failed, a StreamClosed when the server
    closed the connection itself. Once any of them has been observed,
    every further `receive()` reports the same outcome without touching the
    queue again.

    The `run_app()` method executes the Application for the lifetime of the
    connection. When the Application returns or raises an exception, the Streamer
    closes the transport. An exception is logged and never leaves the
    connection's task, so one failing connection does not affect the others.

    Streamer does not decode frames or interpret chunk contents. These tasks are
    handled by the Protocol and the Application.
    """
    def __init__(
        self,
        transport: asyncio.BaseTransport,
        connection: ConnectionInfo,
        queue: asyncio.Queue[StreamEvent],
    ) -> None:
        self.queue = queue
        self.connection = connection
        self._transport = transport
        self._final: StreamError | StreamClosed | None = None
        self._ended = False
        self._logger = logging.getLogger("core.transport.stream")

    async def receive(self) -> Chunk | None:
        if not self._ended:
            event = await self.queue.get()
            if isinstance(event, Chunk):
                return event

            self._ended = True
            self._final = event

        if isinstance(self._final, StreamClosed):
            raise ConnectionClosedError(
                f"Connection {self.connection} closed by server: {self._final.reason}"
            )

        if self._final is not None:
            raise ConnectionFailedError(
                f"Connection {self.connection} failed: {self._final.error}"
            ) from self._final.error

        return None

    async def run_app(self, app: Application) -> None:
        try:
            await app(self.connection, self.receive)
        except asyncio.CancelledError:
            self._logger.debug(f"{self.connection} - Reader cancelled")
            raise
        except ConnectionClosedError as exc:
            self._logger.debug(f"{self.connection} - {exc}")
        except Exception as exc:
            self._logger.error(f"{self.connection} - Exception in Application", exc_info=exc)
        finally:
            self._transport.close()
