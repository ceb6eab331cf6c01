"""Storage adapters implementing core ports."""

from jmxcollector.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)

__all__ = [
    "InMemoryLogStorage",
    "InMemoryMetricsStorage",
]
