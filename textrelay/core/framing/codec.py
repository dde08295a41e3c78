import struct
from enum import StrEnum

from textrelay.core.errors import FrameTooLargeError
from textrelay.core.ports.framing import FrameDecoder, FrameEncoder, DecoderFactory

DEFAULT_CHUNK_SIZE = 1024
DEFAULT_MAX_FRAME_SIZE = 1 * 1024 * 1024  # 1MB


class FramingMode(StrEnum):
    raw = "raw"
    line = "line"
    length = "length"


class ChunkDecoder(FrameDecoder):
    """
    Pass-through decoder: every transport read becomes one or more chunks of
    at most `chunk_size` bytes.

    Nothing is ever buffered, so a line written by a client may arrive split
    across chunks, and several writes may arrive merged into one chunk.
    """
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._chunk_size = chunk_size

    @property
    def pending(self) -> int:
        return 0

    def feed(self, data: bytes) -> list[bytes]:
        size = self._chunk_size
        return [
            bytes(data[i:i + size])
            for i in range(0, len(data), size)
        ]


class LineDecoder(FrameDecoder):
    """
    Newline-delimited decoder. A trailing carriage return is stripped from
    each line; the delimiter itself is never part of the payload.
    """
    DELIMITER: bytes = b"\n"

    def __init__(self, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self._max_frame_size = max_frame_size
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        payloads = []

        while (index := self._buffer.find(self.DELIMITER)) != -1:
            line = bytes(self._buffer[:index])
            del self._buffer[:index + 1]
            if line.endswith(b"\r"):
                line = line[:-1]
            payloads.append(line)

        if len(self._buffer) > self._max_frame_size:
            raise FrameTooLargeError(len(self._buffer), self._max_frame_size)

        return payloads


class LengthPrefixDecoder(FrameDecoder):
    """
    Decoder for frames made of a 4-byte big-endian length prefix followed by
    the payload.
    """
    HEADER_SIZE: int = 4

    def __init__(self, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self._max_frame_size = max_frame_size
        self._buffer = bytearray()
        self._expected_length: int | None = None

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        payloads = []

        while True:
            if self._expected_length is None:
                if len(self._buffer) < self.HEADER_SIZE:
                    return payloads

                # "!I" = uint32 big-endian (network order)
                length = struct.unpack("!I", self._buffer[:self.HEADER_SIZE])[0]
                if length > self._max_frame_size:
                    raise FrameTooLargeError(length, self._max_frame_size)

                self._expected_length = length
                del self._buffer[:self.HEADER_SIZE]

            if len(self._buffer) < self._expected_length:
                return payloads

            payloads.append(bytes(self._buffer[:self._expected_length]))
            del self._buffer[:self._expected_length]
            self._expected_length = None


class RawEncoder(FrameEncoder):
    def encode(self, payload: bytes) -> bytes:
        return payload


class LineEncoder(FrameEncoder):
    def encode(self, payload: bytes) -> bytes:
        if LineDecoder.DELIMITER in payload:
            raise ValueError("Payload must not contain a newline in line framing")
        return payload + LineDecoder.DELIMITER


class LengthPrefixEncoder(FrameEncoder):
    def encode(self, payload: bytes) -> bytes:
        return struct.pack("!I", len(payload)) + payload


def get_codec(
    mode: FramingMode | str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
) -> tuple[DecoderFactory, FrameEncoder]:
    """
    Return the decoder factory and the encoder matching a framing mode.

    The factory is called once per accepted connection because decoders keep
    per-connection state.
    """
    match FramingMode(mode):
        case FramingMode.raw:
            return lambda: ChunkDecoder(chunk_size), RawEncoder()
        case FramingMode.line:
            return lambda: LineDecoder(max_frame_size), LineEncoder()
        case FramingMode.length:
            return lambda: LengthPrefixDecoder(max_frame_size), LengthPrefixEncoder()
