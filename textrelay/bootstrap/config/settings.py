from typing import Annotated

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from textrelay.bootstrap.config.loader import get_configfile
from textrelay.core.framing.codec import FramingMode, DEFAULT_CHUNK_SIZE, DEFAULT_MAX_FRAME_SIZE


class ServerSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Bind address. The default listens on every interface.",
            default="0.0.0.0"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port to listen on. 0 lets the OS pick a free port.",
            default=8088,
            ge=0,
            le=65535,
        )
    ]

    backlog: Annotated[
        int,
        Field(
            description="Maximum number of pending TCP connections.",
            default=128,
            gt=0,
        )
    ]

    limit_concurrency: Annotated[
        int,
        Field(
            description=(
                "Maximum number of connections served at the same time.\n"
                "Connections beyond this limit are closed as soon as they are accepted."
            ),
            default=1024,
            gt=0,
        )
    ]

    max_buffer_size: Annotated[
        int,
        Field(
            description="Maximum number of undecoded bytes kept per connection.",
            default=4 * 1024 * 1024,
            gt=0,
        )
    ]

    timeout_graceful_shutdown: Annotated[
        float,
        Field(
            description="Maximum time allowed for graceful shutdown.",
            default=5.0,
            ge=0,
        )
    ]


class FramingSettings(BaseModel):
    mode: Annotated[
        FramingMode,
        Field(
            description=(
                "How inbound bytes are cut into messages.\n"
                "'raw' announces every transport read as it comes, so a message may be\n"
                "split or merged with its neighbours. 'line' and 'length' buffer partial\n"
                "reads until a full frame is available."
            ),
            default=FramingMode.raw
        )
    ]

    chunk_size: Annotated[
        int,
        Field(
            description="Maximum size of one chunk in raw framing.",
            default=DEFAULT_CHUNK_SIZE,
            gt=0,
        )
    ]

    max_frame_size: Annotated[
        int,
        Field(
            description="Maximum size of one frame in line and length framing.",
            default=DEFAULT_MAX_FRAME_SIZE,
            gt=0,
        )
    ]


class TextRelayConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TEXTRELAY_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    server: Annotated[
        ServerSettings,
        Field(
            description=(
                "Listener configuration.\n"
                "Controls where the server accepts connections and the runtime limits\n"
                "applied to them."
            ),
            default_factory=ServerSettings
        )
    ]

    framing: Annotated[
        FramingSettings,
        Field(
            description="Decoding of the inbound byte stream.",
            default_factory=FramingSettings
        )
    ]

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
        if (yaml_file := get_configfile()) is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),)
        return sources
