import asyncio
import os
from typing import Callable

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, YamlConfigSettingsSource

from textrelay.bootstrap.config.settings import TextRelayConfig
from textrelay.core.framing.codec import ChunkDecoder
from textrelay.core.models.config import ServerConfig
from textrelay.core.ports.framing import DecoderFactory
from textrelay.core.reader import ChunkReader
from textrelay.core.transport.server import RelayServer


class FakeTextRelayConfig(TextRelayConfig):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)
        if yaml_file := os.environ.get("TEST_TEXTRELAYCONFIG"):
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),)
        return sources


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout=timeout)


async def start_server(
    sink,
    decoder_factory: DecoderFactory = ChunkDecoder,
    **kwargs,
) -> tuple[RelayServer, int]:
    config = ServerConfig(
        app=ChunkReader(sink),
        decoder_factory=decoder_factory,
        host="127.0.0.1",
        port=0,
        backlog=10,
        timeout_graceful_shutdown=1.0,
        **kwargs,
    )
    server = RelayServer(config=config, loop=asyncio.get_running_loop())
    await server.start()

    _, port = server.address  # type: ignore[misc]
    return server, port
