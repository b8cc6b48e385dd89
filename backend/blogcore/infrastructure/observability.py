"""Structured Logging — one JSON object per line for blog events.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Post context passed through `extra=` (post_id, slug, backend, count,
      error_code, path) becomes top-level keys; absent keys are omitted
    - setup_logging owns a single root handler: calling it again replaces
      that handler instead of stacking a second one

Design Decisions:
    - LOG_FORMAT=text switches to a one-line human format for local runs
"""

import logging
import json
from datetime import datetime, timezone

CONTEXT_FIELDS = ("post_id", "slug", "backend", "count", "error_code", "path")
_HANDLER_NAME = "blogcore"


class JSONFormatter(logging.Formatter):
    """Render a record and its post context as a JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
