"""Resolution of discovered object names against declared query templates."""

from collections.abc import Mapping

from jmxcollector.core.models import MetricMetadata
from jmxcollector.core.object_name import TYPE_PROPERTY, WILDCARD, ObjectName


def match_template(template: ObjectName, object_name: ObjectName) -> dict[str, str] | None:
    """Match a concrete object name against one query template.

    Properties are paired by position, not looked up by key: both names must
    list the same keys in the same order. A template value of ``*`` accepts
    any concrete value at its position.

    Args:
        template: Declared query template, possibly with wildcard values.
        object_name: Concrete object name returned by discovery.

    Returns:
        Tags for the match (one per wildcard or ``type`` position, valued with
        the concrete value), or None when the template does not match.
    """
    if template.domain != object_name.domain:
        return None

    # @tra: Core.Matcher.TypeGate
    template_type = template.get(TYPE_PROPERTY)
    if template_type != WILDCARD and template_type != object_name.get(TYPE_PROPERTY):
        return None

    if len(template.properties) != len(object_name.properties):
        return None

    # @tra: Core.Matcher.PositionalPairs
    pairs = list(zip(template.properties, object_name.properties))
    for (template_key, template_value), (key, value) in pairs:
        if template_key != key:
            return None
        if template_value != WILDCARD and template_value != value:
            return None

    return {
        template_key: value
        for (template_key, template_value), (_, value) in pairs
        if template_key == TYPE_PROPERTY or template_value == WILDCARD
    }


def resolve(
    object_name: ObjectName, templates: Mapping[ObjectName, str]
) -> MetricMetadata | None:
    """Find the declared metric a discovered object name belongs to.

    An exact template match returns the metric name without tags. Otherwise
    templates are tried in order of their string form and the first match
    wins, so overlapping templates always resolve the same way.

    Args:
        object_name: Concrete object name returned by discovery.
        templates: Query templates mapped to their logical metric names.

    Returns:
        MetricMetadata for the match, or None when no template matches.
    """
    # @tra: Core.Matcher.FastPath
    metric_name = templates.get(object_name)
    if metric_name is not None:
        return MetricMetadata(metric_name=metric_name)

    # @tra: Core.Matcher.OrderedScan
    for template, name in sorted(templates.items(), key=lambda item: str(item[0])):
        tags = match_template(template, object_name)
        if tags is not None:
            return MetricMetadata(metric_name=name, tags=tags)
    return None
