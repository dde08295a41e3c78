from textrelay.bootstrap.config.loader import get_cli_args
from textrelay.bootstrap.deps import get_runtime
from textrelay.core.helpers.utils import setup_signal_handler, setup_logging


def main():
    cli = get_cli_args()
    setup_logging(cli.log_level)

    runtime = get_runtime()
    loop = runtime.loop
    config = runtime.server.config

    try:
        with setup_signal_handler(loop) as stop_event:
            loop.run_until_complete(runtime.start(stop_event))
    except OSError as ex:
        raise SystemExit(
            f"[server] Unable to listen on {config.host}:{config.port}: {ex}"
        )
    except KeyboardInterrupt:
        pass
    finally:
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.run_until_complete(loop.shutdown_default_executor())
        finally:
            loop.close()


if __name__ == "__main__":
    main()
