"""NDJSON and JSON encoders for extracted metrics, definitions and log entries."""

import json
from collections.abc import Iterable, Mapping

from jmxcollector.core.models import ExtractedMetric, LogEntry, MetricType


def _join_lines(objects: Iterable[dict[str, object]]) -> str:
    lines = [json.dumps(obj) for obj in objects]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def encode_metrics(metrics: Iterable[ExtractedMetric]) -> str:
    """Encode extracted metrics to newline-delimited JSON.

    Args:
        metrics: An iterable of ExtractedMetric objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no metrics.
    """
    return _join_lines(
        {
            "name": metric.name,
            "value": metric.value,
            "tags": metric.tags,
            "type": metric.metric_type.value,
        }
        for metric in metrics
    )


def encode_logs(entries: Iterable[LogEntry]) -> str:
    """Encode log entries to newline-delimited JSON.

    Args:
        entries: An iterable of LogEntry objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    return _join_lines(
        {
            "timestamp": entry.timestamp,
            "level": entry.level,
            "message": entry.message,
            "attributes": entry.attributes,
        }
        for entry in entries
    )


def encode_definitions(definitions: Mapping[str, MetricType]) -> str:
    """Encode metric definitions as a JSON object of name to type, sorted by name."""
    return json.dumps(
        {name: metric_type.value for name, metric_type in definitions.items()},
        sort_keys=True,
    )
