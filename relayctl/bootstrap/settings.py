from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from textrelay.core.framing.codec import FramingMode


class RelayCtlSettings(BaseSettings):
    """
    Client settings. Every field can be set through a RELAYCTL_* environment
    variable; command line flags take precedence.
    """
    model_config = SettingsConfigDict(
        env_prefix="RELAYCTL_",
        extra="ignore"
    )

    server: Annotated[
        str,
        Field(
            description="Address of the textrelay server, as host:port.",
            default="localhost:8088"
        )
    ]

    framing: Annotated[
        FramingMode,
        Field(
            description="Framing used to encode each line. Must match the server's.",
            default=FramingMode.raw
        )
    ]

    prompt: Annotated[
        str,
        Field(
            description="Prompt printed before reading each line.",
            default=""
        )
    ]

    connect_timeout: Annotated[
        float | None,
        Field(
            description="Seconds to wait for the connection to be established.",
            default=None
        )
    ]
