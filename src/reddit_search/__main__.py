"""Entry point for the search API server."""

import contextlib
import locale
import sys

import structlog
import uvicorn

from reddit_search.app import create_app
from reddit_search.config import Settings
from reddit_search.logging import configure_logging

logger = structlog.get_logger()


def configure_locale() -> None:
    """Adopt the environment's date/time locale for result timestamps.

    Python starts in the C locale, so without this ``%c`` ignores LANG and
    LC_TIME. An unknown locale keeps the C rendering.
    """
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.warning("locale_unavailable", error=str(e))


def main() -> None:
    """Entry point for python -m reddit_search."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)
    configure_locale()

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )

    logger.info("server_starting", host=settings.host, port=settings.port)
    with contextlib.suppress(KeyboardInterrupt):
        uvicorn.Server(config).run()

    sys.exit(0)


if __name__ == "__main__":
    main()
