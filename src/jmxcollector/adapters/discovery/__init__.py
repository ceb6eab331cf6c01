"""Discovery adapters implementing DiscoveryPort."""

from jmxcollector.adapters.discovery.in_memory import InMemoryMBeanServer

__all__ = ["InMemoryMBeanServer"]
