"""Pure resolution and extraction engine for JMX metrics."""

from jmxcollector.core.collector import collect_metrics, generate_metric_definitions
from jmxcollector.core.errors import (
    CollectionError,
    DiscoveryError,
    InternalInconsistency,
    InvalidValue,
    MalformedResourcePattern,
)
from jmxcollector.core.extractor import extract, generate_metric_name, to_long
from jmxcollector.core.matcher import match_template, resolve
from jmxcollector.core.object_name import ObjectName
from jmxcollector.core.planner import QueryPlan, plan_queries

__all__ = [
    "CollectionError",
    "DiscoveryError",
    "InternalInconsistency",
    "InvalidValue",
    "MalformedResourcePattern",
    "ObjectName",
    "QueryPlan",
    "collect_metrics",
    "extract",
    "generate_metric_definitions",
    "generate_metric_name",
    "match_template",
    "plan_queries",
    "resolve",
    "to_long",
]
