import io
import threading
import pytest

from textrelay.core.models.message import ConnectionInfo
from textrelay.infra.console_sink import ConsoleSink


@pytest.fixture
def connection():
    return ConnectionInfo(id=3, peer=("127.0.0.1", 5555))


@pytest.mark.ut
def test_chunk_line_format(connection):
    stream = io.StringIO()

    ConsoleSink(stream).chunk(connection, b"hello")

    assert stream.getvalue() == "Message: hello\n"


@pytest.mark.ut
def test_disconnect_line_format(connection):
    stream = io.StringIO()

    ConsoleSink(stream).disconnect(connection)

    assert stream.getvalue() == "client disconnect...\n"


@pytest.mark.ut
def test_undecodable_bytes_are_replaced(connection):
    stream = io.StringIO()

    ConsoleSink(stream).chunk(connection, b"caf\xc3")

    assert stream.getvalue() == "Message: caf�\n"


@pytest.mark.ut
def test_defaults_to_current_stdout(connection, capsys):
    ConsoleSink().chunk(connection, b"hi")

    assert capsys.readouterr().out == "Message: hi\n"


class SlowStream(io.StringIO):
    """Yields the GIL between characters to provoke interleaving."""

    def write(self, s: str) -> int:
        for ch in s:
            super().write(ch)
            threading.Event().wait(0)
        return len(s)


@pytest.mark.ut
def test_concurrent_announcements_do_not_tear(connection):
    stream = SlowStream()
    sink = ConsoleSink(stream)

    def announce(tag: str):
        for _ in range(20):
            sink.chunk(connection, tag.encode() * 10)

    threads = [threading.Thread(target=announce, args=(tag,)) for tag in "abcd"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 80
    for line in lines:
        payload = line.removeprefix("Message: ")
        assert len(set(payload)) == 1
        assert len(payload) == 10
