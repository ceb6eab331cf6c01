"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from jmxcollector.adapters.discovery.in_memory import InMemoryMBeanServer
from jmxcollector.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)
from jmxcollector.core.models import AttributeConfig, MetricDeclaration, MetricType


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Provide a temporary path for configuration file tests."""
    return tmp_path / "jmx.toml"


@pytest.fixture
def mbean_server() -> InMemoryMBeanServer:
    """Fixture providing an empty in-memory MBean server."""
    return InMemoryMBeanServer()


@pytest.fixture
def metrics_storage() -> InMemoryMetricsStorage:
    """Fixture providing an empty metrics storage."""
    return InMemoryMetricsStorage()


@pytest.fixture
def log_storage() -> InMemoryLogStorage:
    """Fixture providing an empty log storage."""
    return InMemoryLogStorage()


@pytest.fixture
def declaration():
    """Factory fixture for metric declarations.

    Usage:
        declaration("threads", "java.lang:type=Threading", ("ThreadCount", "gauge"))
        declaration("memory", "java.lang:type=Memory",
                    ("HeapMemoryUsage", "gauge", ["used", "max"]))
    """

    def _declaration(
        metric_name: str, pattern: str, *attributes: tuple
    ) -> MetricDeclaration:
        configs = []
        for attribute in attributes:
            name, metric_type, *rest = attribute
            keys = tuple(rest[0]) if rest else ()
            configs.append(
                AttributeConfig(
                    attribute_name=name,
                    metric_type=MetricType(metric_type),
                    keys=keys,
                )
            )
        return MetricDeclaration(
            metric_name=metric_name,
            resource_pattern=pattern,
            attributes=tuple(configs),
        )

    return _declaration


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(metrics_storage, log_storage)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
