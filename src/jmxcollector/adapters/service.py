"""Collector service binding declarations, discovery and metric storage.

The service runs exactly one collection per call to ``collect()``; deciding
when to call it belongs to the caller's scheduler.
"""

from collections.abc import Iterable, Mapping

from jmxcollector.adapters.logging import get_logger
from jmxcollector.core.collector import collect_metrics, generate_metric_definitions
from jmxcollector.core.errors import DiscoveryError
from jmxcollector.core.models import (
    CollectionResult,
    MBeanResult,
    MetricDeclaration,
    MetricType,
)
from jmxcollector.core.object_name import ObjectName
from jmxcollector.core.ports import DiscoveryPort, MetricsStoragePort

logger = get_logger(__name__)


class JmxMetricCollector:
    """Collects declared JMX metrics from a discovery adapter.

    Example:
        ```python
        server = InMemoryMBeanServer()
        storage = InMemoryMetricsStorage()
        collector = JmxMetricCollector(load_declarations_file("jmx.toml"), server, storage)
        collector.collect()
        ```
    """

    def __init__(
        self,
        declarations: Iterable[MetricDeclaration],
        discovery: DiscoveryPort,
        metrics_storage: MetricsStoragePort | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            declarations: Metric declarations, typically from the config loader.
            discovery: Adapter implementing DiscoveryPort.
            metrics_storage: Storage adapter receiving every extracted metric
                             (optional).
        """
        self.declarations = tuple(declarations)
        self.discovery = discovery
        self.metrics_storage = metrics_storage

    @property
    def definitions(self) -> dict[str, MetricType]:
        """Every metric name the declarations can produce, with its type."""
        return generate_metric_definitions(self.declarations)

    def collect(self) -> CollectionResult:
        """Run one collection and publish the extracted metrics.

        Collected errors are logged as warnings and returned with the
        metrics. A discovery call that raises is logged and reported as a
        single DiscoveryError, so a failing tick never takes down the
        scheduler calling it. Failures outside discovery propagate.

        Returns:
            CollectionResult of this run.
        """
        result = collect_metrics(self.declarations, self._query)

        if self.metrics_storage is not None:
            for metric in result.metrics:
                self.metrics_storage.write(metric)

        for error in result.errors:
            logger.warning(
                "JMX collection error: %s",
                error,
                extra={"error_type": type(error).__name__},
            )
        logger.debug(
            "Collected %d JMX metrics with %d errors",
            len(result.metrics),
            len(result.errors),
        )
        return result

    def _query(
        self, requested: Mapping[ObjectName, frozenset[str]]
    ) -> list[MBeanResult]:
        """Call discovery, turning a raised exception into one error result."""
        try:
            return list(self.discovery.query(requested))
        except Exception as e:
            logger.exception("JMX discovery failed")
            error = DiscoveryError(f"discovery call failed: {type(e).__name__}: {e}")
            error.__cause__ = e
            return [MBeanResult(error=error)]
