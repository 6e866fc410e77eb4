"""
Logging Setup

Configures the root logger for the server process. Modules log through
logging.getLogger(__name__); uvicorn's own loggers propagate to the same
stdout handler.

Format:
    2025-01-01 12:00:00,000 INFO shortlink.services.url_service: Created short code 004217
"""

import logging.config


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": level.upper(),
                "handlers": ["stdout"],
            },
        }
    )
