class RelayError(Exception):
    """Base class for every error raised by textrelay."""


class ConnectionFailedError(RelayError):
    """
    Raised to the reader of a single connection when its transport failed
    with something other than a clean end-of-stream.

    The error is scoped to that connection: the dispatcher and the other
    connections keep running.
    """


class FrameError(RelayError):
    """Raised by a FrameDecoder when the inbound byte stream is malformed."""


class FrameTooLargeError(FrameError):
    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Frame of {length} bytes exceeds limit of {limit} bytes")
        self.length = length
        self.limit = limit


class ConnectionClosedError(RelayError):
    """
    Raised to the reader of a connection that the server closed itself,
    typically during shutdown. The peer did not end the stream.
    """
