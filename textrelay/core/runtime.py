import asyncio
import logging

from textrelay.core.models.config import ServerConfig
from textrelay.core.transport.server import RelayServer


class RelayRuntime:
    """
    Owns the event loop of the server process and drives the RelayServer
    from start to graceful shutdown.
    """
    def __init__(self, server_config: ServerConfig) -> None:
        self._config = server_config
        self._loop = self._create_event_loop()
        self._server = RelayServer(config=self._config, loop=self._loop)
        self._logger = logging.getLogger("textrelay.runtime")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def server(self) -> RelayServer:
        return self._server

    async def start(self, stop_event: asyncio.Event) -> None:
        await self._server.start()
        await stop_event.wait()

        self._logger.info("Shutting down relay server.")
        await self._server.shutdown()

    @staticmethod
    def _create_event_loop() -> asyncio.AbstractEventLoop:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        return loop
