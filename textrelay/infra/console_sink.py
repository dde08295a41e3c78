import sys
import threading
from typing import TextIO

from textrelay.core.models.message import ConnectionInfo
from textrelay.core.ports.sink import Sink


class ConsoleSink(Sink):
    """
    Sink printing one line per announcement on a text stream (stdout by
    default).

    Each announcement is rendered completely before being handed to the
    stream in a single write, under a lock, so lines coming from different
    connections never tear. Chunk bytes are decoded as UTF-8 on a best-effort
    basis: undecodable bytes are shown as replacement characters.
    """
    CHUNK_FORMAT = "Message: {text}\n"
    DISCONNECT_LINE = "client disconnect...\n"

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so that a replaced sys.stdout is honoured.
        return self._stream or sys.stdout

    def chunk(self, connection: ConnectionInfo, data: bytes) -> None:
        text = data.decode("utf-8", errors="replace")
        self._write(self.CHUNK_FORMAT.format(text=text))

    def disconnect(self, connection: ConnectionInfo) -> None:
        self._write(self.DISCONNECT_LINE)

    def _write(self, line: str) -> None:
        with self._lock:
            stream = self.stream
            stream.write(line)
            stream.flush()
