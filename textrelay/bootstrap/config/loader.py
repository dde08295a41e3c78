import argparse
import os
from functools import lru_cache
from pathlib import Path

from textrelay.core.framing.codec import FramingMode

DEFAULT_CONFIG_NAME = "textrelay.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textrelay",
        description=(
            "Start a textrelay server.\n\n"
            "textrelay accepts any number of concurrent TCP connections and "
            "prints every chunk it\nreceives on each of them."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a textrelay configuration file (YAML)"
    )

    parser.add_argument(
        "--host",
        type=str,
        help="Address to listen on (default: all interfaces)"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        help="TCP port to listen on (default: 8088)"
    )

    parser.add_argument(
        "--framing",
        type=str,
        choices=[mode.value for mode in FramingMode],
        help=(
            "How inbound bytes are cut into messages.\n"
            "raw    → one chunk per transport read, at most chunk_size bytes (default).\n"
            "line   → one message per newline-terminated line.\n"
            "length → 4-byte big-endian length prefix, then the payload."
        ),
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity for the server.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → connection open/close, useful for tracing.\n"
            "INFO     → standard operational logs (default).\n"
            "WARNING  → only warnings and errors.\n"
            "ERROR    → only errors.\n"
            "CRITICAL → only critical failures.\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def resolve_configfile(cli_path: str | None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv("TEXTRELAYCONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIG_NAME
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the TEXTRELAYCONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIG_NAME}' file in the current working directory."
        )

    return file


@lru_cache
def get_configfile() -> Path | None:
    return resolve_configfile(get_cli_args().config)
