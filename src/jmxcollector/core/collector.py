"""One collection run: plan queries, read MBeans, resolve and extract metrics."""

from collections.abc import Callable, Iterable, Iterator, Mapping

from jmxcollector.core.errors import (
    CollectionError,
    DiscoveryError,
    InternalInconsistency,
)
from jmxcollector.core.extractor import extract, generate_metric_name
from jmxcollector.core.matcher import resolve
from jmxcollector.core.models import (
    AttributeConfig,
    AttributeValue,
    CollectionResult,
    MBeanReading,
    MBeanResult,
    MetricDeclaration,
    MetricMetadata,
    MetricType,
)
from jmxcollector.core.object_name import ObjectName
from jmxcollector.core.planner import PlannedDeclaration, QueryPlan, plan_queries

QueryFunction = Callable[[Mapping[ObjectName, frozenset[str]]], Iterable[MBeanResult]]


def collect_metrics(
    declarations: Iterable[MetricDeclaration], query: QueryFunction
) -> CollectionResult:
    """Run one collection over the declared metrics.

    Errors never abort the run: malformed declarations, failed resources and
    invalid values are all returned alongside the metrics that could be
    extracted.

    Args:
        declarations: Metric declarations in configuration order.
        query: Discovery call taking query templates mapped to the attribute
               names to read, and returning one MBeanResult per resource.

    Returns:
        CollectionResult whose errors list parse errors first, then
        discovery errors, then extraction errors.
    """
    plan = plan_queries(declarations)
    readings, discovery_errors = _split_results(query(plan.attributes_by_template))

    extraction = CollectionResult()
    for declared, attribute_config, attribute, metadata in _join(plan, readings):
        extraction.extend(
            extract(
                declared.metric_name,
                attribute.name,
                attribute_config.keys,
                attribute.value,
                metadata.tags,
                attribute_config.metric_type,
            )
        )

    return CollectionResult(
        metrics=extraction.metrics,
        errors=[*plan.errors, *discovery_errors, *extraction.errors],
    )


def generate_metric_definitions(
    declarations: Iterable[MetricDeclaration],
) -> dict[str, MetricType]:
    """Map every metric name the declarations can produce to its type.

    Needs no discovery, so the types can be registered before any value is
    observed.
    """
    definitions: dict[str, MetricType] = {}
    for declaration in declarations:
        for attribute in declaration.attributes:
            if not attribute.keys:
                name = generate_metric_name(
                    declaration.metric_name, attribute.attribute_name
                )
                definitions[name] = attribute.metric_type
                continue
            for key in attribute.keys:
                name = generate_metric_name(
                    declaration.metric_name, attribute.attribute_name, key
                )
                definitions[name] = attribute.metric_type
    return definitions


def _split_results(
    results: Iterable[MBeanResult],
) -> tuple[list[MBeanReading], list[CollectionError]]:
    """Separate discovery results into readings and errors."""
    readings: list[MBeanReading] = []
    errors: list[CollectionError] = []
    for result in results:
        if result.reading is not None and result.error is None:
            readings.append(result.reading)
        elif result.reading is None and result.error is not None:
            errors.append(_discovery_error(result.error))
        elif result.reading is not None:
            errors.append(
                InternalInconsistency(
                    "Invalid state: both MBean reading and error defined "
                    f"for {result.reading.object_name}"
                )
            )
        else:
            errors.append(
                InternalInconsistency(
                    "Invalid state: neither MBean reading nor error defined"
                )
            )
    return readings, errors


def _discovery_error(error: BaseException | str) -> DiscoveryError:
    """Wrap a discovery failure, chaining the original exception."""
    if isinstance(error, DiscoveryError):
        return error
    wrapped = DiscoveryError(str(error))
    if isinstance(error, BaseException):
        wrapped.__cause__ = error
    return wrapped


def _join(
    plan: QueryPlan, readings: Iterable[MBeanReading]
) -> Iterator[tuple[PlannedDeclaration, AttributeConfig, AttributeValue, MetricMetadata]]:
    """Pair each read attribute with the declaration and attribute config it answers."""
    for reading in readings:
        metadata = resolve(reading.object_name, plan.metric_names_by_template)
        if metadata is None:
            continue
        for declared in plan.declarations:
            if declared.metric_name != metadata.metric_name:
                continue
            for attribute_config in declared.attributes:
                for attribute in reading.attributes:
                    if attribute.name == attribute_config.attribute_name:
                        yield declared, attribute_config, attribute, metadata
