"""Structured MBean object names and their parser.

An object name is a domain plus an ordered list of key properties, written
as ``domain:key=value,key=value``. Declared query templates may use ``*`` as
a property value to match any concrete value at that position.
"""

from dataclasses import dataclass

from jmxcollector.core.errors import MalformedResourcePattern

WILDCARD = "*"
TYPE_PROPERTY = "type"

_KEY_FORBIDDEN = frozenset(':,=*?"\n')
_VALUE_FORBIDDEN = frozenset(':,="\n')
_QUOTED_ESCAPES = frozenset('"\\*?n')


@dataclass(frozen=True)
class ObjectName:
    """An MBean object name with properties kept in declaration order.

    Equality is verbatim: the same properties in a different order make a
    different name.

    Attributes:
        domain: Domain segment (e.g., java.lang).
        properties: Ordered (key, value) pairs.
    """

    domain: str
    properties: tuple[tuple[str, str], ...]

    @classmethod
    def parse(cls, name: str) -> "ObjectName":
        """Parse an object name or query template.

        Args:
            name: Object name string (e.g., "java.lang:type=Memory").

        Returns:
            The parsed ObjectName.

        Raises:
            MalformedResourcePattern: If the string is not a valid object name
                or uses a pattern form other than whole-value wildcards.
        """
        domain, separator, key_list = name.partition(":")
        if not separator:
            raise MalformedResourcePattern(name, "missing ':' after the domain")
        if not domain:
            raise MalformedResourcePattern(name, "domain is empty")
        if "*" in domain or "?" in domain:
            raise MalformedResourcePattern(name, "domain patterns are not supported")
        if "\n" in domain:
            raise MalformedResourcePattern(name, "domain contains a newline")
        if not key_list:
            raise MalformedResourcePattern(name, "key property list is empty")

        properties: list[tuple[str, str]] = []
        seen: set[str] = set()
        for entry in _split_key_list(name, key_list):
            key, value = _parse_property(name, entry, seen)
            seen.add(key)
            properties.append((key, value))
        return cls(domain=domain, properties=tuple(properties))

    def get(self, key: str) -> str | None:
        """Return the value of a key property, or None when absent."""
        for property_key, value in self.properties:
            if property_key == key:
                return value
        return None

    @property
    def is_pattern(self) -> bool:
        """True when any property value is the wildcard token."""
        return any(value == WILDCARD for _, value in self.properties)

    def __str__(self) -> str:
        key_list = ",".join(f"{key}={value}" for key, value in self.properties)
        return f"{self.domain}:{key_list}"


def _split_key_list(name: str, key_list: str) -> list[str]:
    """Split a key property list on commas that are not inside quotes."""
    entries: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False
    for char in key_list:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if in_quotes:
            if char == "\\":
                escaped = True
            elif char == '"':
                in_quotes = False
            current.append(char)
            continue
        if char == ",":
            entries.append("".join(current))
            current = []
            continue
        if char == '"':
            in_quotes = True
        current.append(char)

    if in_quotes:
        raise MalformedResourcePattern(name, "unterminated quoted value")
    entries.append("".join(current))
    return entries


def _parse_property(name: str, entry: str, seen: set[str]) -> tuple[str, str]:
    """Validate one ``key=value`` entry of a key property list."""
    if entry == WILDCARD:
        raise MalformedResourcePattern(
            name, "property list patterns (',*') are not supported"
        )
    if not entry:
        raise MalformedResourcePattern(name, "empty key property")

    key, equals, value = entry.partition("=")
    if not equals:
        raise MalformedResourcePattern(name, f"property {entry!r} has no '='")
    if not key:
        raise MalformedResourcePattern(name, f"property {entry!r} has an empty key")
    if _KEY_FORBIDDEN.intersection(key):
        raise MalformedResourcePattern(name, f"invalid character in key {key!r}")
    if key in seen:
        raise MalformedResourcePattern(name, f"duplicate key {key!r}")
    if not value:
        raise MalformedResourcePattern(name, f"empty value for key {key!r}")

    if value.startswith('"'):
        _check_quoted_value(name, key, value)
    elif _VALUE_FORBIDDEN.intersection(value):
        raise MalformedResourcePattern(
            name, f"invalid character in value of key {key!r}"
        )
    elif value != WILDCARD and ("*" in value or "?" in value):
        raise MalformedResourcePattern(
            name, f"only '*' as a whole value is supported as a pattern ({key!r})"
        )
    return key, value


def _check_quoted_value(name: str, key: str, value: str) -> None:
    """Check that a quoted value is closed exactly at its end with valid escapes."""
    index = 1
    while index < len(value):
        char = value[index]
        if char == "\\":
            if index + 1 >= len(value) or value[index + 1] not in _QUOTED_ESCAPES:
                raise MalformedResourcePattern(
                    name, f"invalid escape in quoted value of key {key!r}"
                )
            index += 2
            continue
        if char == '"':
            if index != len(value) - 1:
                raise MalformedResourcePattern(
                    name, f"characters after closing quote in value of key {key!r}"
                )
            return
        if char in "*?":
            raise MalformedResourcePattern(
                name, f"wildcards inside quoted value of key {key!r}"
            )
        if char == "\n":
            raise MalformedResourcePattern(
                name, f"newline in quoted value of key {key!r}"
            )
        index += 1
    raise MalformedResourcePattern(name, f"unterminated quoted value for key {key!r}")
