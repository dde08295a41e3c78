import socket

from textrelay.core.ports.framing import FrameEncoder


class RelayClient:
    """
    Synchronous TCP client for a textrelay server.

    Every call to `send()` encodes one payload with the configured
    FrameEncoder and hands the result to the socket in a single `sendall`.
    With raw framing the bytes go out untouched, so the server may see them
    split or merged with neighbouring sends.

    This client is minimal and blocking. It never reads from the server.
    """
    def __init__(self, host: str, port: int, encoder: FrameEncoder, timeout: float | None = None) -> None:
        self._host = host
        self._port = port
        self._encoder = encoder
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        if self._sock is not None:
            return

        self._sock = socket.create_connection((self._host, self._port), timeout=self._timeout)

    def close(self) -> None:
        if self._sock:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def send(self, payload: bytes) -> None:
        if not self._sock:
            self.connect()

        frame = self._encoder.encode(payload)
        self._sock.sendall(frame)  # type: ignore[union-attr]

    def __enter__(self) -> "RelayClient":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
