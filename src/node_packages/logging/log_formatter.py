"""
Log formatters for JSON-lines and colored console output.
"""

import json
import logging
from datetime import datetime
from typing import Dict, Any

# Passed through `extra=` by the scanners; promoted to top-level keys
SCAN_CONTEXT_FIELDS = ('manager', 'path')

_RECORD_ATTRIBUTES = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter writing one object per log record.

    Scan context (`manager`, `path`) appears at the top level so log lines
    can be filtered per package manager; any other `extra` fields are
    nested under "extra".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }

        extra = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key.startswith('_'):
                continue
            if key in SCAN_CONTEXT_FIELDS:
                entry[key] = value
            else:
                extra[key] = value
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name by severity."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)

        # Format a copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)
