"""Turns metric declarations into the MBean queries to run."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from jmxcollector.core.errors import CollectionError, MalformedResourcePattern
from jmxcollector.core.models import AttributeConfig, MetricDeclaration
from jmxcollector.core.object_name import ObjectName


@dataclass(frozen=True)
class PlannedDeclaration:
    """A declaration whose MBean query parsed successfully."""

    metric_name: str
    template: ObjectName
    attributes: tuple[AttributeConfig, ...]


@dataclass
class QueryPlan:
    """What to ask discovery for, and how to map the answers back.

    Attributes:
        attributes_by_template: Attribute names requested per query template.
        metric_names_by_template: Logical metric name per query template.
        declarations: Parsed declarations in declaration order.
        errors: Declarations whose query could not be parsed.
    """

    attributes_by_template: dict[ObjectName, frozenset[str]] = field(
        default_factory=dict
    )
    metric_names_by_template: dict[ObjectName, str] = field(default_factory=dict)
    declarations: list[PlannedDeclaration] = field(default_factory=list)
    errors: list[CollectionError] = field(default_factory=list)


def plan_queries(declarations: Iterable[MetricDeclaration]) -> QueryPlan:
    """Parse each declaration's MBean query and build the query plan.

    A declaration with a malformed query is reported in ``errors`` and left
    out of the plan; the others are planned normally. Declarations sharing a
    template request the union of their attributes, and the last one names
    the template.

    Args:
        declarations: Metric declarations in configuration order.

    Returns:
        The QueryPlan for one collection run.
    """
    plan = QueryPlan()
    for declaration in declarations:
        try:
            template = ObjectName.parse(declaration.resource_pattern)
        except MalformedResourcePattern as error:
            plan.errors.append(
                MalformedResourcePattern(
                    error.pattern, error.reason, metric_name=declaration.metric_name
                )
            )
            continue

        names = frozenset(a.attribute_name for a in declaration.attributes)
        requested = plan.attributes_by_template.get(template, frozenset())
        plan.attributes_by_template[template] = requested | names
        plan.metric_names_by_template[template] = declaration.metric_name
        plan.declarations.append(
            PlannedDeclaration(
                metric_name=declaration.metric_name,
                template=template,
                attributes=tuple(declaration.attributes),
            )
        )
    return plan
