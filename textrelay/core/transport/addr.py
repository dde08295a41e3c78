import asyncio
import socket


def _as_addr(value: object) -> tuple[str, int] | None:
    if isinstance(value, (tuple, list)) and len(value) >= 2:
        return str(value[0]), int(value[1])
    return None


def get_remote_addr(transport: asyncio.BaseTransport) -> tuple[str, int] | None:
    sock: socket.socket | None = transport.get_extra_info("socket")
    if sock is not None:
        try:
            info = sock.getpeername()
        except OSError:
            # The peer may already be gone by the time we ask.
            return None
        return _as_addr(info)

    return _as_addr(transport.get_extra_info("peername"))


def get_local_addr(transport: asyncio.BaseTransport) -> tuple[str, int] | None:
    sock: socket.socket | None = transport.get_extra_info("socket")
    if sock is not None:
        try:
            info = sock.getsockname()
        except OSError:
            return None
        return _as_addr(info)

    return _as_addr(transport.get_extra_info("sockname"))
