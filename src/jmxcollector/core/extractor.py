"""Extraction of integer metric values from raw MBean attribute values."""

import logging
import math
import numbers
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from jmxcollector.core.errors import InvalidValue
from jmxcollector.core.models import CollectionResult, ExtractedMetric, MetricType

logger = logging.getLogger(__name__)

METRIC_NAME_PREFIX = "jmx"

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1


def generate_metric_name(
    metric_name: str, attribute_name: str, key: str | None = None
) -> str:
    """Build the fully qualified name of an extracted metric.

    Args:
        metric_name: Logical metric name of the declaration (e.g., "pool")
        attribute_name: MBean attribute name (e.g., "Count")
        key: Composite field name, if the value is composite

    Returns:
        "jmx-<metric>-<attribute>" or "jmx-<metric>-<attribute>-<key>"
    """
    name = f"{METRIC_NAME_PREFIX}-{metric_name}-{attribute_name}"
    if key is not None:
        name = f"{name}-{key}"
    return name


def to_long(value: Any) -> int:
    """Coerce a raw attribute value to a signed 64-bit integer.

    Any real number (Decimal included) is accepted; non-integral values are
    truncated toward zero. Booleans, strings, None, complex numbers, NaN,
    infinities and integers outside the 64-bit range are rejected.

    Raises:
        InvalidValue: If the value is not an integral-representable number.
    """
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        raise InvalidValue(value)

    if isinstance(value, numbers.Integral):
        result = int(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidValue(value)
        result = math.trunc(value)
    elif isinstance(value, numbers.Rational):
        # exact, no float conversion
        result = math.trunc(value)
    else:
        try:
            finite = math.isfinite(value)
        except (ValueError, OverflowError):
            finite = False
        if not finite:
            raise InvalidValue(value)
        result = math.trunc(value)

    if not _LONG_MIN <= result <= _LONG_MAX:
        raise InvalidValue(value, reason=f"{value!r} does not fit in a 64-bit integer.")
    return result


def extract(
    metric_name: str,
    attribute_name: str,
    keys: Sequence[str],
    raw_value: Any,
    tags: Mapping[str, str],
    metric_type: MetricType,
) -> CollectionResult:
    """Extract the metrics of one attribute reading.

    A composite (mapping) value yields one metric or one error per requested
    key. Any other value yields a single metric or a single error.

    Args:
        metric_name: Logical metric name of the declaration.
        attribute_name: Name of the attribute that was read.
        keys: Composite fields to extract. Ignored for scalar values.
        raw_value: Value returned by discovery.
        tags: Tags resolved from the object name.
        metric_type: Declared instrument type.

    Returns:
        CollectionResult with the extracted metrics and InvalidValue errors.
    """
    result = CollectionResult()

    if isinstance(raw_value, Mapping):
        if not keys:
            logger.warning(
                "Composite attribute %s of %s declares no keys; nothing extracted",
                attribute_name,
                metric_name,
                extra={"metric_name": metric_name, "attribute_name": attribute_name},
            )
            return result

        for key in keys:
            full_name = generate_metric_name(metric_name, attribute_name, key)
            if key not in raw_value:
                result.errors.append(
                    InvalidValue(
                        None,
                        metric_name=full_name,
                        reason=f"composite value has no field {key!r}.",
                    )
                )
                continue
            _append_metric(result, full_name, raw_value[key], tags, metric_type)
        return result

    full_name = generate_metric_name(metric_name, attribute_name)
    _append_metric(result, full_name, raw_value, tags, metric_type)
    return result


def _append_metric(
    result: CollectionResult,
    full_name: str,
    raw_value: Any,
    tags: Mapping[str, str],
    metric_type: MetricType,
) -> None:
    """Coerce one value and record it as a metric, or record the failure."""
    try:
        value = to_long(raw_value)
    except InvalidValue as error:
        result.errors.append(InvalidValue(raw_value, full_name, str(error)))
        return
    result.metrics.append(
        ExtractedMetric(
            name=full_name, value=value, tags=dict(tags), metric_type=metric_type
        )
    )
