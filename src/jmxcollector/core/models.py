"""Core domain models for JMX metric collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jmxcollector.core.errors import CollectionError
    from jmxcollector.core.object_name import ObjectName


class MetricType(Enum):
    """Instrument types a declared attribute can be published as."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    RANGE_SAMPLER = "range-sampler"


@dataclass(frozen=True)
class AttributeConfig:
    """One attribute to read from every MBean matched by a declaration.

    Attributes:
        attribute_name: MBean attribute name (e.g., HeapMemoryUsage).
        metric_type: How the extracted values are published.
        keys: Fields to read when the attribute value is composite.
              Each key produces one metric.
    """

    attribute_name: str
    metric_type: MetricType
    keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricDeclaration:
    """A configured metric: a logical name, an MBean query and its attributes.

    Attributes:
        metric_name: Logical metric name used in generated metric names.
        resource_pattern: MBean query, possibly with wildcard values
                          (e.g., java.lang:type=GarbageCollector,name=*).
        attributes: Attributes to read from each matched MBean.
    """

    metric_name: str
    resource_pattern: str
    attributes: tuple[AttributeConfig, ...] = ()


@dataclass(frozen=True)
class MetricMetadata:
    """Result of resolving a discovered object name against the query templates.

    Instances compare by value but are not hashable, because tags is a dict.

    Attributes:
        metric_name: Logical metric name of the matching declaration.
        tags: Concrete values bound to wildcard or type properties.
    """

    metric_name: str
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AttributeValue:
    """A single attribute read from an MBean."""

    name: str
    value: Any


@dataclass(frozen=True)
class MBeanReading:
    """The attributes read from one discovered MBean."""

    object_name: ObjectName
    attributes: tuple[AttributeValue, ...] = ()


@dataclass(frozen=True)
class MBeanResult:
    """Discovery outcome for one resource: a reading or an error.

    Exactly one of the two is expected. Anything else is reported as an
    internal inconsistency by the collector.
    """

    reading: MBeanReading | None = None
    error: BaseException | str | None = None


@dataclass(frozen=True)
class ExtractedMetric:
    """A named, tagged integer value ready to be published.

    Instances compare by value but are not hashable, because tags is a dict.

    Attributes:
        name: Fully qualified metric name (e.g., jmx-threads-ThreadCount).
        value: The value as a signed 64-bit integer.
        tags: Key-value pairs derived from the matched object name.
        metric_type: Instrument type declared for the attribute.
    """

    name: str
    value: int
    tags: dict[str, str]
    metric_type: MetricType


@dataclass
class CollectionResult:
    """Metrics produced by a run together with every error collected on the way."""

    metrics: list[ExtractedMetric] = field(default_factory=list)
    errors: list[CollectionError] = field(default_factory=list)

    def extend(self, other: CollectionResult) -> None:
        """Append the metrics and errors of another result, keeping order."""
        self.metrics.extend(other.metrics)
        self.errors.extend(other.errors)


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, WARNING, ERROR).
        message: The log message.
        attributes: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)
