"""In-memory storage adapters for extracted metrics and logs."""

from collections import deque
from collections.abc import Iterable

from jmxcollector.core.models import ExtractedMetric, LogEntry


class InMemoryMetricsStorage:
    """In-memory implementation of MetricsStoragePort.

    Stores extracted metrics in order of writing. When max_size is given the
    oldest metrics are evicted once the buffer is full, keeping memory use
    predictable for long-running collectors.

    Args:
        max_size: Maximum number of metrics to keep (default: unbounded).
    """

    def __init__(self, max_size: int | None = None) -> None:
        self._metrics: deque[ExtractedMetric] = deque(maxlen=max_size)

    def write(self, metric: ExtractedMetric) -> None:
        """Write an extracted metric to storage."""
        self._metrics.append(metric)

    def scrape(self) -> Iterable[ExtractedMetric]:
        """Return all stored metrics, oldest first."""
        return list(self._metrics)

    def clear(self) -> None:
        """Drop every stored metric."""
        self._metrics.clear()


class InMemoryLogStorage:
    """In-memory implementation of LogStoragePort.

    Stores log entries in a list, optionally bounded like
    InMemoryMetricsStorage.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=max_size)

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        self._entries.append(entry)

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Returns entries with timestamp > since (and the given level, if any),
        ordered by timestamp ascending.
        """
        filtered = [
            e
            for e in self._entries
            if e.timestamp > since and (level is None or e.level == level)
        ]
        return sorted(filtered, key=lambda e: e.timestamp)
