import logging
import sys
from typing import TextIO

from relayctl.core.client import RelayClient


class LineSender:
    """
    Reads operator input one line at a time and sends each line, with its
    trailing whitespace removed, as one message.

    The loop ends when the input is exhausted or cannot be read: the reason
    is printed and `run()` returns normally. Errors raised while sending are
    not handled here and end the client.
    """
    def __init__(
        self,
        client: RelayClient,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        prompt: str = "",
        encoding: str = "utf-8",
    ) -> None:
        self._client = client
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._prompt = prompt
        self._encoding = encoding
        self._logger = logging.getLogger("relayctl.sender")

    def run(self) -> int:
        """Send lines until the end of input and return how many were sent."""
        sent = 0

        while True:
            if self._prompt:
                self._stdout.write(self._prompt)
                self._stdout.flush()

            try:
                line = self._read_line()
            except (EOFError, OSError, ValueError) as ex:
                print(ex, file=self._stdout)
                break

            self.send_line(line)
            sent += 1

        self._logger.debug(f"Input closed after {sent} line(s)")
        return sent

    def send_line(self, line: str) -> None:
        payload = line.rstrip().encode(self._encoding)
        self._client.send(payload)
        self._logger.debug(f"Sent {len(payload)} byte(s) to {self._client.address}")

    def _read_line(self) -> str:
        line = self._stdin.readline()
        if not line:
            raise EOFError("EOF")
        return line
