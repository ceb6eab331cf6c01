"""Errors collected while turning declarations and MBean readings into metrics.

None of these are raised out of a collection run. The core gathers them into
the error list of a CollectionResult so one bad declaration, resource, or
attribute never stops the rest of the batch.
"""

from typing import Any


class CollectionError(Exception):
    """Base class for failures collected during a collection run."""


class MalformedResourcePattern(CollectionError, ValueError):
    """A declared MBean query could not be parsed into an object name."""

    def __init__(
        self, pattern: str, reason: str, metric_name: str | None = None
    ) -> None:
        self.pattern = pattern
        self.reason = reason
        self.metric_name = metric_name
        prefix = f"{metric_name}: " if metric_name else ""
        super().__init__(f"{prefix}invalid MBean query {pattern!r}: {reason}")


class DiscoveryError(CollectionError):
    """Discovery failed for one resource."""


class InvalidValue(CollectionError, ValueError):
    """An attribute value could not be turned into a 64-bit integer."""

    def __init__(
        self,
        value: Any,
        metric_name: str | None = None,
        reason: str | None = None,
    ) -> None:
        self.value = value
        self.metric_name = metric_name
        message = reason or f"{value!r} is not a valid number."
        if metric_name:
            message = f"{metric_name}: {message}"
        super().__init__(message)


class InternalInconsistency(CollectionError):
    """Discovery returned a result with both or neither of reading and error."""
