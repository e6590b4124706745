"""Process-wide logging setup."""

from __future__ import annotations

import json
import logging
import logging.config


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


_configured = False


def configure_logging(settings=None) -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    if settings is None:
        from careerhub.core.config import get_settings

        settings = get_settings()

    log_level = (getattr(settings, "log_level", "INFO") or "INFO").upper()
    formatter_name = "json" if getattr(settings, "log_json", False) else "standard"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                },
                "json": {
                    "()": "careerhub.core.logging.JsonFormatter",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": formatter_name,
                },
            },
            "loggers": {
                "careerhub": {
                    "handlers": ["console"],
                    "level": log_level,
                    "propagate": False,
                },
                # pymongo heartbeat chatter is noisy below WARNING
                "pymongo": {"level": "WARNING"},
            },
        }
    )
    _configured = True
