from typing import Protocol, Callable


class FrameDecoder(Protocol):
    """
    Stateful decoder turning an inbound byte stream into payloads.

    One decoder instance belongs to exactly one connection. Bytes that do not
    yet form a complete payload are kept until the next `feed()`.
    """

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet returned as a payload."""

    def feed(self, data: bytes) -> list[bytes]:
        """Consume `data` and return every payload it completes, in order."""


class FrameEncoder(Protocol):
    """
    Stateless encoder producing the bytes a client writes for one payload.
    """

    def encode(self, payload: bytes) -> bytes:
        """Wrap `payload` so that the matching decoder yields it back intact."""


DecoderFactory = Callable[[], FrameDecoder]
