"""BDD step definitions for JMX metric collection features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from jmxcollector.adapters.discovery.in_memory import InMemoryMBeanServer
from jmxcollector.core import errors
from jmxcollector.core.collector import collect_metrics
from jmxcollector.core.models import (
    AttributeConfig,
    CollectionResult,
    ExtractedMetric,
    MetricDeclaration,
    MetricType,
)


@dataclass
class CollectionScenarioContext:
    """Shared state between steps in a collection scenario."""

    server: InMemoryMBeanServer = field(default_factory=InMemoryMBeanServer)
    declarations: list[MetricDeclaration] = field(default_factory=list)
    result: CollectionResult | None = None

    def metrics_named(self, name: str) -> list[ExtractedMetric]:
        assert self.result is not None, "metrics were not collected"
        return [m for m in self.result.metrics if m.name == name]


@pytest.fixture
def ctx() -> CollectionScenarioContext:
    """Fresh scenario context for each test."""
    return CollectionScenarioContext()


# === Given ===
@given("an in-memory MBean server")
def step_mbean_server(ctx: CollectionScenarioContext) -> None:
    ctx.server = InMemoryMBeanServer()


@given(
    parsers.re(
        r'the metric "(?P<name>[^"]+)" declared for "(?P<pattern>[^"]+)" '
        r'with (?P<metric_type>\w+) attribute "(?P<attribute>[^"]+)"'
        r'(?: and keys "(?P<keys>[^"]*)")?'
    )
)
def step_declare_metric(
    ctx: CollectionScenarioContext,
    name: str,
    pattern: str,
    metric_type: str,
    attribute: str,
    keys: str | None,
) -> None:
    ctx.declarations.append(
        MetricDeclaration(
            metric_name=name,
            resource_pattern=pattern,
            attributes=(
                AttributeConfig(
                    attribute_name=attribute,
                    metric_type=MetricType(metric_type),
                    keys=tuple(k for k in (keys or "").split(",") if k),
                ),
            ),
        )
    )


@given(
    parsers.re(
        r'the MBean "(?P<object_name>[^"]+)" has attribute "(?P<attribute>[^"]+)" '
        r"with value (?P<value>-?\d+)"
    ),
    converters={"value": int},
)
def step_numeric_attribute(
    ctx: CollectionScenarioContext, object_name: str, attribute: str, value: int
) -> None:
    ctx.server.register(object_name, {attribute: value})


@given(
    parsers.re(
        r'the MBean "(?P<object_name>[^"]+)" has attribute "(?P<attribute>[^"]+)" '
        r'with text "(?P<text>[^"]*)"'
    )
)
def step_text_attribute(
    ctx: CollectionScenarioContext, object_name: str, attribute: str, text: str
) -> None:
    ctx.server.register(object_name, {attribute: text})


@given(
    parsers.re(
        r'the MBean "(?P<object_name>[^"]+)" has composite attribute '
        r'"(?P<attribute>[^"]+)" with fields:'
    )
)
def step_composite_attribute(
    ctx: CollectionScenarioContext,
    object_name: str,
    attribute: str,
    datatable: list[list[str]],
) -> None:
    _, *rows = datatable
    ctx.server.register(object_name, {attribute: {k: int(v) for k, v in rows}})


@given(parsers.re(r'the MBean "(?P<object_name>[^"]+)" cannot be read'))
def step_unreadable_mbean(ctx: CollectionScenarioContext, object_name: str) -> None:
    ctx.server.register_failure(object_name, RuntimeError("attribute read failed"))


# === When ===
@when("metrics are collected")
def step_collect(ctx: CollectionScenarioContext) -> None:
    ctx.result = collect_metrics(ctx.declarations, ctx.server.query)


# === Then ===
@then(
    parsers.re(r"(?P<count>\d+) metrics? (?:is|are) produced"),
    converters={"count": int},
)
def then_metric_count(ctx: CollectionScenarioContext, count: int) -> None:
    assert ctx.result is not None
    assert len(ctx.result.metrics) == count, ctx.result.metrics


@then(
    parsers.re(r'the metric "(?P<name>[^"]+)" has value (?P<value>-?\d+) and no tags'),
    converters={"value": int},
)
def then_metric_untagged(ctx: CollectionScenarioContext, name: str, value: int) -> None:
    matching = ctx.metrics_named(name)
    assert len(matching) == 1, matching
    assert matching[0].value == value
    assert matching[0].tags == {}


@then(
    parsers.re(
        r'the metric "(?P<name>[^"]+)" tagged (?P<tag>\w+)="(?P<tag_value>[^"]+)" '
        r"has value (?P<value>-?\d+)"
    ),
    converters={"value": int},
)
def then_metric_tagged(
    ctx: CollectionScenarioContext, name: str, tag: str, tag_value: str, value: int
) -> None:
    matching = [m for m in ctx.metrics_named(name) if m.tags.get(tag) == tag_value]
    assert len(matching) == 1, ctx.result
    assert matching[0].value == value


@then(
    parsers.re(r"(?P<count>\d+) errors are reported"),
    converters={"count": int},
)
def then_error_count(ctx: CollectionScenarioContext, count: int) -> None:
    assert ctx.result is not None
    assert len(ctx.result.errors) == count, ctx.result.errors


@then(
    parsers.re(r"error (?P<index>\d+) is an? (?P<kind>\w+)"),
    converters={"index": int},
)
def then_error_kind(ctx: CollectionScenarioContext, index: int, kind: str) -> None:
    assert ctx.result is not None
    error = ctx.result.errors[index - 1]
    assert isinstance(error, getattr(errors, kind)), error
