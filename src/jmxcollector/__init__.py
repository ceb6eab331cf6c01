"""jmxcollector - resolve JMX MBeans against declared metrics and extract their values.

Example:
    ```python
    from jmxcollector import (
        InMemoryMBeanServer,
        InMemoryMetricsStorage,
        JmxMetricCollector,
        load_declarations_file,
    )

    collector = JmxMetricCollector(
        load_declarations_file("jmx.toml"),
        InMemoryMBeanServer(),
        InMemoryMetricsStorage(),
    )
    result = collector.collect()
    ```
"""

from jmxcollector.adapters.config import (
    ConfigurationError,
    load_declarations,
    load_declarations_file,
    parse_metric_type,
)
from jmxcollector.adapters.discovery.in_memory import InMemoryMBeanServer
from jmxcollector.adapters.logging import LogStorageHandler, get_logger
from jmxcollector.adapters.service import JmxMetricCollector
from jmxcollector.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)
from jmxcollector.core.collector import collect_metrics, generate_metric_definitions
from jmxcollector.core.errors import (
    CollectionError,
    DiscoveryError,
    InternalInconsistency,
    InvalidValue,
    MalformedResourcePattern,
)
from jmxcollector.core.extractor import extract, generate_metric_name, to_long
from jmxcollector.core.matcher import resolve
from jmxcollector.core.models import (
    AttributeConfig,
    AttributeValue,
    CollectionResult,
    ExtractedMetric,
    LogEntry,
    MBeanReading,
    MBeanResult,
    MetricDeclaration,
    MetricMetadata,
    MetricType,
)
from jmxcollector.core.object_name import ObjectName
from jmxcollector.core.planner import plan_queries
from jmxcollector.core.ports import DiscoveryPort, LogStoragePort, MetricsStoragePort

__all__ = [
    # Models
    "AttributeConfig",
    "AttributeValue",
    "CollectionResult",
    "ExtractedMetric",
    "LogEntry",
    "MBeanReading",
    "MBeanResult",
    "MetricDeclaration",
    "MetricMetadata",
    "MetricType",
    "ObjectName",
    # Errors
    "CollectionError",
    "ConfigurationError",
    "DiscoveryError",
    "InternalInconsistency",
    "InvalidValue",
    "MalformedResourcePattern",
    # Ports
    "DiscoveryPort",
    "LogStoragePort",
    "MetricsStoragePort",
    # Core operations
    "collect_metrics",
    "extract",
    "generate_metric_definitions",
    "generate_metric_name",
    "plan_queries",
    "resolve",
    "to_long",
    # Adapters
    "InMemoryLogStorage",
    "InMemoryMBeanServer",
    "InMemoryMetricsStorage",
    "JmxMetricCollector",
    "LogStorageHandler",
    "get_logger",
    "load_declarations",
    "load_declarations_file",
    "parse_metric_type",
]
