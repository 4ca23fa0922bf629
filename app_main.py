"""Application entry point for the Quizzer desktop client."""

from __future__ import annotations

import argparse
import sys

from PySide6.QtWidgets import QApplication

from quizzer.client.api_client import QuizApiClient
from quizzer.core.client_session import ClientSession
from quizzer.core.settings import get_settings
from quizzer.server.api_server import start_api_server
from quizzer.ui.main_window import MainWindow
from quizzer.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quizzer desktop client")
    parser.add_argument(
        "--remote",
        action="store_true",
        help="use the server at API_BASE_URL instead of starting a local one",
    )
    args, _qt_args = parser.parse_known_args(argv)
    return args


def main() -> None:
    """Initialize logging, optionally start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting Quizzer…")
    args = _parse_args(sys.argv[1:])
    settings = get_settings()

    if not args.remote:
        start_api_server(settings)
        logger.info("Local API server listening on %s:%s", settings.host, settings.port)

    client_session = ClientSession.load(settings.session_file, api_base_url=settings.api_base_url)
    api = QuizApiClient(client_session)

    app = QApplication(sys.argv)
    window = MainWindow(client_session, api, session_file=settings.session_file)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
