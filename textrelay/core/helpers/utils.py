import asyncio
import contextlib
import logging
import sys
import signal
import threading
from types import FrameType
from typing import Generator

SHUTDOWN_SIGNALS = (
    signal.SIGINT,
    signal.SIGTERM,
)

if sys.platform == "win32":
    SHUTDOWN_SIGNALS += (signal.SIGBREAK,)

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s"


@contextlib.contextmanager
def setup_signal_handler(
    loop: asyncio.AbstractEventLoop,
) -> Generator[asyncio.Event, None, None]:
    """
    Yield an event set on SIGINT/SIGTERM. The event is set through
    `loop.call_soon_threadsafe` so that a loop blocked in its selector with
    nothing else to do is woken up.
    """
    stop_event = asyncio.Event()

    if threading.current_thread() is not threading.main_thread():
        yield stop_event
        return

    captured_signals: list[signal.Signals | int] = []

    def handle(sig: int, frame: FrameType | None) -> None:
        captured_signals.append(sig)
        loop.call_soon_threadsafe(stop_event.set)

    # Install temporary handlers
    original_handlers = {
        sig: signal.signal(sig, handle)
        for sig in SHUTDOWN_SIGNALS
    }

    try:
        yield stop_event
    finally:
        # Restore original handlers
        for sig, old in original_handlers.items():
            signal.signal(sig, old)

        # Now replay signals with the real handler
        for sig in reversed(captured_signals):
            if original_handlers[sig] is not handle:
                signal.raise_signal(sig)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def parse_address(address: str, default_port: int) -> tuple[str, int]:
    """
    Split "host:port" into its parts. Either side may be omitted:
    ":8088" binds every interface, "localhost" uses `default_port`.
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, default_port

    # Bracketed IPv6 literal, e.g. "[::1]:8088"
    host = host.strip("[]")
    if not port:
        return host, default_port

    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"Invalid port in address '{address}'") from None
