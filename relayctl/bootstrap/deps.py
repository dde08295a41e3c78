import argparse
from functools import lru_cache

from pydantic import ValidationError

from relayctl.bootstrap.settings import RelayCtlSettings
from relayctl.core.client import RelayClient
from textrelay.bootstrap.deps import format_validation_error
from textrelay.core.framing.codec import FramingMode, get_codec
from textrelay.core.helpers.utils import parse_address

DEFAULT_PORT = 8088


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relayctl",
        description=(
            "Send lines of text to a textrelay server.\n\n"
            "Without a command, every line read from standard input is sent as one "
            "message\nuntil the input ends."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("--server", help="Server address as host:port (default: localhost:8088)")
    parser.add_argument(
        "--framing",
        choices=[mode.value for mode in FramingMode],
        help="Framing used to encode each line (default: raw)"
    )
    parser.add_argument("--prompt", help="Prompt printed before reading each line")
    parser.add_argument(
        "-l", "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: WARNING)"
    )

    sub = parser.add_subparsers(dest="command")
    send = sub.add_parser("send", help="Send each argument as one message and exit")
    send.add_argument("messages", nargs="+")

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


@lru_cache
def get_settings() -> RelayCtlSettings:
    args = get_cli_args()
    overrides = {
        key: value
        for key, value in (
            ("server", args.server),
            ("framing", args.framing),
            ("prompt", args.prompt),
        )
        if value is not None
    }

    try:
        return RelayCtlSettings(**overrides)
    except ValidationError as ex:
        raise SystemExit(format_validation_error(ex))


def build_client(settings: RelayCtlSettings) -> RelayClient:
    try:
        host, port = parse_address(settings.server, DEFAULT_PORT)
    except ValueError as ex:
        raise SystemExit(f"[relayctl] {ex}")

    _, encoder = get_codec(settings.framing)
    return RelayClient(host or "localhost", port, encoder, timeout=settings.connect_timeout)
