"""Logging setup for the Flask app.

Log level comes from the settings module (LOG_LEVEL), DEBUG by default in
development.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime


class ReadableFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%H:%M:%S")
        base = f"{ts} {record.levelname:<8} {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(app, *, level: str = "INFO") -> None:
    # Package logger, whatever prefix the package was imported under.
    root = logging.getLogger(__name__.rsplit(".common", 1)[0])
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(getattr(h, "_parade_system", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ReadableFormatter())
        handler._parade_system = True
        root.addHandler(handler)

    # Flask's own logger follows the same level.
    app.logger.setLevel(root.level)
