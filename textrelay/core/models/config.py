from dataclasses import dataclass

from textrelay.core.ports.framing import DecoderFactory
from textrelay.core.transport.application import Application


@dataclass
class ServerConfig:
    """
    Static configuration for a RelayServer.

    This structure defines all parameters required to start a server:
    networking, framing, resource limits, and graceful shutdown behavior.
    """
    app: Application
    """
    The per-connection coroutine with the signature:
        async def app(connection, receive)
    It consumes the chunks received on one connection.
    """

    decoder_factory: DecoderFactory
    """
    Builds the FrameDecoder of each accepted connection.
    """

    host: str
    """
    IP address or hostname on which the server listens.
    """

    port: int
    """
    TCP port to bind. If set to 0, the OS selects an available port.
    """

    backlog: int = 128
    """
    Maximum number of pending TCP connections waiting for accept().
    """

    limit_concurrency: int = 1024
    """
    Maximum number of concurrent active connections allowed. Connections
    made beyond this limit are closed immediately.
    """

    max_buffer_size: int = 4 * 1024 * 1024  # 4MB
    """
    Maximum number of undecoded bytes kept for one connection.
    Protects against a peer that never completes a frame.
    """

    timeout_graceful_shutdown: float = 5.0
    """
    Maximum time (in seconds) allowed for graceful shutdown:
    - active connections must close
    - reader tasks registered in ServerState.tasks must complete
    After this timeout, remaining tasks are cancelled.
    """
