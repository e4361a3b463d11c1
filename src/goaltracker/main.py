"""Application entry point for the goal tracker web server."""

from goaltracker.app import App
from goaltracker.config import Config
from goaltracker.logging import setup_logging
from goaltracker.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
