import asyncio
import logging

from textrelay.core.models.config import ServerConfig
from textrelay.core.models.state import ServerState
from textrelay.core.transport.protocol import Protocol


class RelayServer:
    """
    Listener/Dispatcher of the relay.

    `start()` binds the listening socket through `loop.create_server` and
    returns; from then on the event loop accepts connections for as long as
    the server is open. Each accepted connection gets its own Protocol, which
    starts the connection's reader task itself, so accepting a new client never
    waits on the ones already connected. The Protocols share one ServerState:
    the registry of open connections keyed by connection id, and the set of
    running reader tasks.

    There is no per-connection logic here. What a connection does with its
    bytes is decided by the ServerConfig: the decoder factory cuts the stream
    into chunks and the application consumes them.

    `shutdown()` stops listening, closes every registered connection from the
    server side (their readers end without a disconnect announcement) and
    gives the readers `timeout_graceful_shutdown` seconds to return. Readers
    still running after that are cancelled.
    """
    def __init__(
        self,
        config: ServerConfig,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config
        self._loop = loop or asyncio.get_event_loop()
        self.state = ServerState()
        self._logger = logging.getLogger("core.transport.server")

        self._server: asyncio.AbstractServer | None = None

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def address(self) -> tuple[str, int] | None:
        """Address of the first listening socket, once started."""
        if self._server is None or not self._server.sockets:
            return None

        host, port = self._server.sockets[0].getsockname()[:2]
        return host, port

    def create_protocol(self) -> asyncio.Protocol:
        return Protocol(
            config=self._config,
            server_state=self.state,
            loop=self._loop,
        )

    async def start(self) -> None:
        """
        Bind the listening socket and start accepting connections.

        Raises OSError when the address cannot be bound.
        """
        config = self._config

        self._server = await self._loop.create_server(
            self.create_protocol,
            host=config.host,
            port=config.port,
            backlog=config.backlog,
        )

        host, port = self.address  # type: ignore[misc]
        self._logger.info(f"Listening on {host}:{port}")

    async def shutdown(self) -> None:
        if self._server:
            self._server.close()

        connections = list(self.state.connections.values())
        if connections:
            self._logger.info(f"Closing {len(connections)} open connection(s).")
        for connection in connections:
            connection.shutdown()

        readers = set(self.state.tasks)
        timeout = self._config.timeout_graceful_shutdown
        if readers:
            _, pending = await asyncio.wait(readers, timeout=timeout)
            if pending:
                self._logger.error(
                    f"{len(pending)} reader(s) still running {timeout}s after shutdown, cancelling"
                )
                for task in pending:
                    task.cancel("Reader cancelled on server shutdown")
                await asyncio.gather(*pending, return_exceptions=True)
                return

        if self._server:
            # Returns once every transport accepted by this server is closed.
            await self._server.wait_closed()
