"""Logging setup: stdlib logging stamped with the current request id."""

import logging
import logging.config
from contextvars import ContextVar

from storefront.core.config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(level: str | None = None) -> None:
    """Install the console handler for the ``storefront`` logger tree."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_id": {"()": RequestIdFilter}},
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["request_id"],
                },
            },
            "loggers": {
                "storefront": {
                    "handlers": ["console"],
                    "level": (level or settings.LOG_LEVEL).upper(),
                    "propagate": False,
                },
            },
        }
    )
