"""
ReelSearch — command-line entry point.

    python -m reelsearch          # or the installed ``reelsearch`` script

Host, port, log level and auto-reload come from Settings (APP_HOST,
APP_PORT, LOG_LEVEL, APP_RELOAD).
"""

import uvicorn

from reelsearch.config import settings

APP_PATH = "reelsearch.main:app"


def main() -> None:
    uvicorn.run(
        APP_PATH,
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
        reload=settings.app_reload,
    )


if __name__ == "__main__":
    main()
