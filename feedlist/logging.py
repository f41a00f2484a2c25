"""Logging configuration for Feed List Organizer."""

import json
import logging
import sys

from feedlist.config import get_settings

# Attributes passed through ``extra=`` by the repository and coordinator
CONTEXT_FIELDS = ("feed_ids", "error_kind")


class JsonFormatter(logging.Formatter):
    """JSON formatter for production logging.

    Failed mutations log the affected feed ids and the error kind; those are
    emitted as top-level keys so they can be filtered on.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                base[field] = value
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


def setup_logging() -> None:
    """Configure the root logger from settings.

    Production logs are JSON on stdout, development logs are plain text.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)

    if settings.env == "prod":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    # Per-statement engine logging drowns out feed events
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
