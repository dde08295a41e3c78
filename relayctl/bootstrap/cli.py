from relayctl.bootstrap.deps import get_cli_args, get_settings, build_client
from relayctl.core.sender import LineSender
from textrelay.core.helpers.utils import setup_logging


def main():
    args = get_cli_args()
    setup_logging(args.log_level)

    settings = get_settings()
    client = build_client(settings)

    try:
        client.connect()
    except OSError as ex:
        raise SystemExit(f"[relayctl] Unable to connect to {client.address}: {ex}")

    try:
        if args.command == "send":
            sender = LineSender(client)
            for message in args.messages:
                sender.send_line(message)
        else:
            LineSender(client, prompt=settings.prompt).run()
    except KeyboardInterrupt:
        print()
    except OSError as ex:
        raise SystemExit(f"[relayctl] Connection to {client.address} failed: {ex}")
    except ValueError as ex:
        raise SystemExit(f"[relayctl] Cannot send message: {ex}")
    finally:
        client.close()


if __name__ == "__main__":
    main()
