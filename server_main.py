"""Run the Quizzer API server on its own, without the desktop client."""

from __future__ import annotations

import uvicorn

from quizzer.core.settings import get_settings
from quizzer.server.api_server import build_default_app
from quizzer.utils.logging_config import configure_logging


def main() -> None:
    logger = configure_logging()
    settings = get_settings()
    logger.info("Serving Quizzer API on %s:%s", settings.host, settings.port)
    uvicorn.run(build_default_app(settings), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
