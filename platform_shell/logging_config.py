"""
Logging setup for the platform shell.

setup_logging() runs once when the API app is imported. Modules log through
children of the "shell" logger:
    logger = logging.getLogger("shell.<area>")

Request context (campaign, route, upstream Sales Engine path) travels on the
record via `extra=` and is rendered by both formatters:
- "text": one line per record, context appended as key=value pairs
- "json": one JSON object per line for log shipping
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from platform_shell import config

SERVICE_NAME = "platform-shell"

# Context keys lifted off the record when a caller sets them via `extra=`
CONTEXT_FIELDS = ("campaign_id", "route", "upstream", "status_code", "duration_ms")


def _context(record: logging.LogRecord) -> dict:
    """Context fields present on the record. Empty strings mean "not applicable"."""
    ctx = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is not None and value != "":
            ctx[key] = value
    return ctx


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_context(record))

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Readable single-line format with campaign/route context tacked on the end."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        ctx = _context(record)
        if ctx:
            line += " | " + " ".join(f"{k}={v}" for k, v in ctx.items())
        return line


_FORMATTERS = {"text": TextFormatter, "json": JSONFormatter}

_initialized = False


def setup_logging(level: str = None, fmt: str = None, log_file: str = None):
    """Install the shell's handlers on the root logger.

    Defaults come from LOG_LEVEL, LOG_FORMAT and LOG_FILE in config. Only the
    first call has any effect.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = (level or config.LOG_LEVEL).upper()
    fmt = fmt or config.LOG_FORMAT
    log_file = log_file or config.LOG_FILE

    formatter = _FORMATTERS.get(fmt, TextFormatter)()
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # Quiet uvicorn per-request access lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger("shell").info("Logging configured: level=%s, format=%s%s",
                                    level, fmt, f", file={log_file}" if log_file else "")
