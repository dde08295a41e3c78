from typing import Protocol

from textrelay.core.models.message import ConnectionInfo


class Sink(Protocol):
    """
    Destination of the reader loops' announcements.

    Every reader loop of the server shares one Sink, so implementations must
    treat each call as one atomic announcement: two concurrent calls may be
    ordered arbitrarily but must never interleave their output.
    """

    def chunk(self, connection: ConnectionInfo, data: bytes) -> None:
        """Announce one chunk received on `connection`."""

    def disconnect(self, connection: ConnectionInfo) -> None:
        """Announce that `connection` reached end-of-stream."""
