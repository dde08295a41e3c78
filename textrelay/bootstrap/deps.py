import json
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from textrelay.bootstrap.config.loader import get_cli_args
from textrelay.bootstrap.config.settings import TextRelayConfig
from textrelay.core.framing.codec import get_codec
from textrelay.core.models.config import ServerConfig
from textrelay.core.reader import ChunkReader
from textrelay.core.runtime import RelayRuntime
from textrelay.infra.console_sink import ConsoleSink


@lru_cache
def get_runtime() -> RelayRuntime:
    return RelayRuntime(server_config=build_server_config(get_config()))


@lru_cache
def get_reader() -> ChunkReader:
    return ChunkReader(sink=ConsoleSink())


@lru_cache
def get_config() -> TextRelayConfig:
    try:
        return TextRelayConfig(**get_cli_overrides())
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        raise SystemExit(format_validation_error(ex))


def get_cli_overrides() -> dict[str, Any]:
    cli = get_cli_args()
    server = {
        key: value
        for key, value in (("host", cli.host), ("port", cli.port))
        if value is not None
    }
    overrides: dict[str, Any] = {}
    if server:
        overrides["server"] = server
    if cli.framing is not None:
        overrides["framing"] = {"mode": cli.framing}
    return overrides


def build_server_config(config: TextRelayConfig) -> ServerConfig:
    server = config.server
    framing = config.framing
    decoder_factory, _ = get_codec(
        framing.mode,
        chunk_size=framing.chunk_size,
        max_frame_size=framing.max_frame_size,
    )

    return ServerConfig(
        app=get_reader(),
        decoder_factory=decoder_factory,
        host=server.host,
        port=server.port,
        backlog=server.backlog,
        limit_concurrency=server.limit_concurrency,
        max_buffer_size=server.max_buffer_size,
        timeout_graceful_shutdown=server.timeout_graceful_shutdown,
    )


def format_validation_error(ex: ValidationError) -> str:
    msg = ["Configuration validation failed:"]
    errs = json.loads(ex.json())
    for err in errs:
        msg.append(f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}")
    return "\n".join(msg)
