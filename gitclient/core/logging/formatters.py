# gitclient/core/logging/formatters.py

"""
Log formatters for the git client.

``StructuredFormatter`` is the human readable console format;
``JSONFormatter`` emits one JSON object per record for log shippers.
"""

from datetime import datetime
import json
import logging


class StructuredFormatter(logging.Formatter):
    """Structured formatter for consistent log output."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        """Initialize the structured formatter.

        Args:
            fmt: Log format string.
            datefmt: Date format string.
        """
        if fmt is None:
            fmt = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
        super().__init__(fmt, datefmt)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_exception: bool = True):
        """Initialize the JSON formatter.

        Args:
            include_exception: Whether to include exception information.
        """
        super().__init__()
        self.include_exception = include_exception

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON formatted log message.
        """
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.thread,
        }

        if self.include_exception and record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str, ensure_ascii=False)


def create_formatter(formatter_type: str = "structured") -> logging.Formatter:
    """Create a formatter by name (``structured`` or ``json``)."""
    if formatter_type == "json":
        return JSONFormatter()
    if formatter_type == "structured":
        return StructuredFormatter()
    raise ValueError(f"Unknown formatter type: {formatter_type}")
