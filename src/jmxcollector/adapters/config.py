"""Loading of metric declarations from TOML files or plain mappings.

The expected layout mirrors the collector's configuration block::

    [[mbeans]]
    metric-name = "threads"
    jmx-mbean-query = "java.lang:type=Threading"

    [[mbeans.attributes]]
    attribute-name = "ThreadCount"
    metric-type = "gauge"
    keys = []

MBean queries are not parsed here. A malformed query is reported by the
collector as a collected error on every run, leaving the other declarations
working.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jmxcollector.adapters.logging import get_logger
from jmxcollector.core.models import AttributeConfig, MetricDeclaration, MetricType

logger = get_logger(__name__)

MBEANS_KEY = "mbeans"


class ConfigurationError(ValueError):
    """The collector configuration is structurally invalid."""


def parse_metric_type(text: str) -> MetricType:
    """Parse a metric type name such as "gauge" or "range-sampler".

    Matching is case-insensitive and accepts underscores for dashes.

    Raises:
        ConfigurationError: If the name is not a supported metric type.
    """
    normalized = str(text).strip().lower().replace("_", "-")
    try:
        return MetricType(normalized)
    except ValueError:
        supported = ", ".join(t.value for t in MetricType)
        raise ConfigurationError(
            f"Unsupported metric type {text!r} (supported: {supported})"
        ) from None


def _require_str(entry: Mapping[str, Any], key: str, context: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{context}: '{key}' must be a non-empty string")
    return value


def _parse_attribute(entry: Any, context: str) -> AttributeConfig:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"{context}: attribute must be a table")
    name = _require_str(entry, "attribute-name", context)
    metric_type = parse_metric_type(_require_str(entry, "metric-type", context))
    keys = entry.get("keys", [])
    if not isinstance(keys, list) or not all(
        isinstance(key, str) and key for key in keys
    ):
        raise ConfigurationError(
            f"{context}/{name}: 'keys' must be a list of non-empty strings"
        )
    return AttributeConfig(
        attribute_name=name, metric_type=metric_type, keys=tuple(keys)
    )


def _parse_declaration(entry: Any, index: int) -> MetricDeclaration:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"{MBEANS_KEY}[{index}] must be a table")
    context = f"{MBEANS_KEY}[{index}]"
    metric_name = _require_str(entry, "metric-name", context)
    context = f"{context} ({metric_name})"
    query = _require_str(entry, "jmx-mbean-query", context)
    attributes = entry.get("attributes", [])
    if not isinstance(attributes, list):
        raise ConfigurationError(f"{context}: 'attributes' must be a list")
    return MetricDeclaration(
        metric_name=metric_name,
        resource_pattern=query,
        attributes=tuple(_parse_attribute(a, context) for a in attributes),
    )


def load_declarations(data: Mapping[str, Any]) -> list[MetricDeclaration]:
    """Build metric declarations from a parsed configuration mapping.

    Args:
        data: Mapping with an "mbeans" list (a missing list means no metrics).

    Returns:
        Declarations in configuration order.

    Raises:
        ConfigurationError: If an entry is missing a name, query or attribute
            field, or uses an unsupported metric type.
    """
    entries = data.get(MBEANS_KEY, [])
    if not isinstance(entries, list):
        raise ConfigurationError(f"'{MBEANS_KEY}' must be a list of tables")
    declarations = [_parse_declaration(entry, i) for i, entry in enumerate(entries)]
    logger.debug("Loaded %d metric declarations", len(declarations))
    return declarations


def load_declarations_file(path: Path | str) -> list[MetricDeclaration]:
    """Load metric declarations from a TOML file.

    Raises:
        ConfigurationError: If the file is missing, is not valid TOML, or
            contains invalid declarations.
    """
    config_path = Path(path)
    logger.info("Loading JMX collector configuration from: %s", config_path)

    if not config_path.exists():
        logger.error("Configuration file not found: %s", config_path)
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        logger.error("Invalid TOML in %s: %s", config_path, e)
        raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

    return load_declarations(data)
