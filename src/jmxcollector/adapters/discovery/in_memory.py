"""In-memory discovery adapter backed by registered MBeans."""

from collections.abc import Iterable, Mapping
from typing import Any

from jmxcollector.core.models import AttributeValue, MBeanReading, MBeanResult
from jmxcollector.core.object_name import WILDCARD, ObjectName


def _query_matches(template: ObjectName, object_name: ObjectName) -> bool:
    """JMX query semantics: same domain, same key set, values equal or wildcard.

    Unlike the collector's resolution step this is a lookup by key, so the
    property order of the registered name does not matter.
    """
    if template.domain != object_name.domain:
        return False
    template_properties = dict(template.properties)
    properties = dict(object_name.properties)
    if template_properties.keys() != properties.keys():
        return False
    return all(
        value == WILDCARD or value == properties[key]
        for key, value in template_properties.items()
    )


class InMemoryMBeanServer:
    """In-memory implementation of DiscoveryPort.

    Holds MBeans registered by object name with fixed attribute values.
    Suitable for testing and for feeding the collector from values sampled
    elsewhere.
    """

    def __init__(self) -> None:
        self._beans: dict[ObjectName, dict[str, Any]] = {}
        self._failures: dict[ObjectName, BaseException | str] = {}

    def register(
        self, name: ObjectName | str, attributes: Mapping[str, Any]
    ) -> ObjectName:
        """Register an MBean and its attribute values.

        Args:
            name: Concrete object name (a string is parsed).
            attributes: Attribute names mapped to raw values. A mapping value
                        stands for a composite attribute.

        Returns:
            The registered ObjectName.

        Raises:
            MalformedResourcePattern: If the name cannot be parsed.
            ValueError: If the name contains a wildcard value.
        """
        object_name = name if isinstance(name, ObjectName) else ObjectName.parse(name)
        if object_name.is_pattern:
            raise ValueError(f"Cannot register a pattern as an MBean: {object_name}")
        self._beans[object_name] = dict(attributes)
        self._failures.pop(object_name, None)
        return object_name

    def register_failure(
        self, name: ObjectName | str, error: BaseException | str
    ) -> ObjectName:
        """Register an MBean whose attributes cannot be read.

        Queries matching it return an error result instead of a reading.
        """
        object_name = self.register(name, {})
        self._failures[object_name] = error
        return object_name

    def unregister(self, name: ObjectName | str) -> None:
        """Remove an MBean. Unknown names are ignored."""
        object_name = name if isinstance(name, ObjectName) else ObjectName.parse(name)
        self._beans.pop(object_name, None)
        self._failures.pop(object_name, None)

    def query(
        self, requested: Mapping[ObjectName, frozenset[str]]
    ) -> Iterable[MBeanResult]:
        """Read the requested attributes of every registered MBean matching a template.

        An MBean matched by several templates is read once with the union of
        their attribute names. Attributes the MBean does not have are left out
        of the reading.
        """
        wanted: dict[ObjectName, set[str]] = {}
        for template, attribute_names in requested.items():
            for object_name in self._beans:
                if _query_matches(template, object_name):
                    wanted.setdefault(object_name, set()).update(attribute_names)

        results: list[MBeanResult] = []
        for object_name, attribute_names in wanted.items():
            if object_name in self._failures:
                results.append(MBeanResult(error=self._failures[object_name]))
                continue
            values = self._beans[object_name]
            attributes = tuple(
                AttributeValue(name=name, value=values[name])
                for name in sorted(attribute_names)
                if name in values
            )
            results.append(
                MBeanResult(
                    reading=MBeanReading(object_name=object_name, attributes=attributes)
                )
            )
        return results
