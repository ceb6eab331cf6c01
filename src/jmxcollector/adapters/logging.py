"""Python logging handler adapter for jmxcollector.

This adapter bridges Python's standard library logging module to the
LogStoragePort, so collection errors logged by the collector can be read
back through a log storage (and served over HTTP by the ASGI adapter).
"""

import logging
import traceback

from jmxcollector.core.models import LogEntry
from jmxcollector.core.ports import LogStoragePort

LOGGER_NAMESPACE = "jmxcollector"

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno"]


def get_logger(name: str) -> logging.Logger:
    """Return a standard library logger under the jmxcollector namespace.

    Args:
        name: Module name, usually ``__name__``.
    """
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


class LogStorageHandler(logging.Handler):
    """Logging handler that writes log records to a LogStoragePort.

    Example:
        ```python
        from jmxcollector import InMemoryLogStorage, LogStorageHandler

        storage = InMemoryLogStorage()
        logging.getLogger("jmxcollector").addHandler(LogStorageHandler(storage))
        ```
    """

    def __init__(
        self,
        storage: LogStoragePort,
        include_attrs: list[str] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a log storage backend.

        Args:
            storage: Storage adapter implementing LogStoragePort.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno"].
            level: Minimum level handled (default: all levels).
        """
        super().__init__(level)
        self._storage = storage
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the storage backend.

        Args:
            record: The log record to emit.
        """
        try:
            self._storage.write(self._to_entry(record))
        except Exception:
            self.handleError(record)

    def _to_entry(self, record: logging.LogRecord) -> LogEntry:
        # Map of attribute names to their values from LogRecord
        attr_mapping: dict[str, str | int | float | bool] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }

        attributes: dict[str, str | int | float | bool] = {
            key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping
        }

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                attributes[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                attributes["exc_type"] = exc_type.__name__
            if exc_value is not None:
                attributes["exc_message"] = str(exc_value)
            if exc_tb is not None:
                attributes["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        return LogEntry(
            timestamp=record.created,
            level=record.levelname,
            message=record.getMessage(),
            attributes=attributes,
        )
