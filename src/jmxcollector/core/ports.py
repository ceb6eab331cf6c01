"""Port interfaces for discovery and storage adapters.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from jmxcollector.core.models import ExtractedMetric, LogEntry, MBeanResult
from jmxcollector.core.object_name import ObjectName


@runtime_checkable
class DiscoveryPort(Protocol):
    """Port for reading MBean attributes.

    Adapters implementing this protocol resolve query templates to concrete
    MBeans and read the requested attributes from each of them.
    Examples: InMemoryMBeanServer.
    """

    def query(
        self, requested: Mapping[ObjectName, frozenset[str]]
    ) -> Iterable[MBeanResult]:
        """Read the requested attributes of every MBean matching a template.

        Args:
            requested: Query templates mapped to the attribute names to read.

        Returns:
            One MBeanResult per matched MBean, holding either the reading
            or the error that prevented it.
        """
        ...


@runtime_checkable
class MetricsStoragePort(Protocol):
    """Port for publishing extracted metrics.

    Examples: InMemoryMetricsStorage.
    """

    def write(self, metric: ExtractedMetric) -> None:
        """Write an extracted metric to storage."""
        ...

    def scrape(self) -> Iterable[ExtractedMetric]:
        """Return all stored metrics, oldest first."""
        ...


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for log storage operations.

    Examples: InMemoryLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
            level: Only return entries with this level, if given.

        Returns:
            Iterable of LogEntry objects, ordered by timestamp ascending.
        """
        ...
