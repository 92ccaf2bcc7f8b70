"""
Run bb-service with uvicorn: `python -m bb_service`
"""

import uvicorn

from .app import create_app
from .config import Settings
from .logging_config import configure_logging


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.json_logs)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
