import logging
import os
from logging.config import dictConfig
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
TELEMETRY_LOG_FORMAT = "%(asctime)s TELEMETRY %(message)s"


def configure_logging(level: Optional[str] = None) -> str:
    """Set up planner logging and return the root level in effect.

    ``PLANNER_LOG_LEVEL`` sets the root level unless ``level`` is passed.
    Telemetry lines get their own handler and level
    (``PLANNER_TELEMETRY_LOG_LEVEL``, defaulting to the root level).
    """
    root_level = (level or os.getenv("PLANNER_LOG_LEVEL", "INFO")).upper()
    telemetry_level = os.getenv("PLANNER_TELEMETRY_LOG_LEVEL", root_level).upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": DEFAULT_LOG_FORMAT},
                "telemetry": {"format": TELEMETRY_LOG_FORMAT},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
                "telemetry": {
                    "class": "logging.StreamHandler",
                    "formatter": "telemetry",
                },
            },
            "loggers": {
                "planner.telemetry": {
                    "handlers": ["telemetry"],
                    "level": telemetry_level,
                    "propagate": False,
                },
            },
            "root": {
                "handlers": ["default"],
                "level": root_level,
            },
        }
    )

    if os.getenv("PLANNER_DEBUG_HTTP", "0") == "1":
        logging.getLogger("httpx").setLevel(logging.DEBUG)
    return root_level
