"""Integration tests for the ASGI endpoints."""

import json
import logging

import pytest

from jmxcollector.adapters.discovery.in_memory import InMemoryMBeanServer
from jmxcollector.adapters.frameworks.asgi import create_asgi_app
from jmxcollector.adapters.logging import LogStorageHandler
from jmxcollector.adapters.service import JmxMetricCollector
from jmxcollector.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)
from jmxcollector.core.models import ExtractedMetric, LogEntry, MetricType


@pytest.fixture
def metrics_storage_with_data() -> InMemoryMetricsStorage:
    """Fixture providing a metrics storage with sample data."""
    storage = InMemoryMetricsStorage()
    storage.write(
        ExtractedMetric(
            name="jmx-threads-ThreadCount",
            value=42,
            tags={},
            metric_type=MetricType.GAUGE,
        )
    )
    storage.write(
        ExtractedMetric(
            name="jmx-gc-CollectionCount",
            value=3,
            tags={"type": "GarbageCollector", "name": "Young"},
            metric_type=MetricType.COUNTER,
        )
    )
    return storage


class _FailingMetricsStorage:
    """Metrics storage whose scrape raises."""

    def write(self, metric: ExtractedMetric) -> None:
        pass

    def scrape(self):
        raise RuntimeError("storage unavailable")


class TestMetricsEndpoint:
    """Tests for the /metrics endpoint."""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.MetricsEndpointNDJSON")
    @pytest.mark.asgi
    async def test_metrics_endpoint_returns_ndjson(
        self, metrics_storage_with_data: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """/metrics returns one JSON object per stored metric."""
        app = create_asgi_app(metrics_storage_with_data)

        async with asgi_test_client(app) as client:
            response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/x-ndjson"
        lines = [json.loads(line) for line in response.text.splitlines()]
        assert lines[0] == {
            "name": "jmx-threads-ThreadCount",
            "value": 42,
            "tags": {},
            "type": "gauge",
        }
        assert len(lines) == 2

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.MetricsEndpointNameFilter")
    @pytest.mark.asgi
    async def test_metrics_endpoint_filters_by_name_prefix(
        self, metrics_storage_with_data: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """?name= keeps only metrics whose name starts with the prefix."""
        app = create_asgi_app(metrics_storage_with_data)

        async with asgi_test_client(app) as client:
            response = await client.get("/metrics", params={"name": "jmx-gc"})

        names = [json.loads(line)["name"] for line in response.text.splitlines()]
        assert names == ["jmx-gc-CollectionCount"]

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.MetricsEndpointEmpty")
    @pytest.mark.asgi
    async def test_empty_storage_returns_empty_body(
        self, metrics_storage: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """An empty storage gives an empty 200 response."""
        app = create_asgi_app(metrics_storage)

        async with asgi_test_client(app) as client:
            response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.text == ""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.MetricsEndpointEncodingError")
    @pytest.mark.asgi
    async def test_storage_failure_returns_500(self, asgi_test_client) -> None:
        """A failing storage gives a JSON 500 response."""
        app = create_asgi_app(_FailingMetricsStorage())

        async with asgi_test_client(app) as client:
            response = await client.get("/metrics")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


class TestDefinitionsEndpoint:
    """Tests for the /metrics/definitions endpoint."""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.DefinitionsEndpoint")
    @pytest.mark.asgi
    async def test_definitions_endpoint_returns_types(
        self, metrics_storage: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """/metrics/definitions maps metric names to type names."""
        app = create_asgi_app(
            metrics_storage,
            definitions={"jmx-threads-ThreadCount": MetricType.GAUGE},
        )

        async with asgi_test_client(app) as client:
            response = await client.get("/metrics/definitions")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"jmx-threads-ThreadCount": "gauge"}


class TestLogsEndpoint:
    """Tests for the /logs endpoint."""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.LogsEndpointFilters")
    @pytest.mark.asgi
    async def test_logs_endpoint_filters_by_since_and_level(
        self,
        metrics_storage: InMemoryMetricsStorage,
        log_storage: InMemoryLogStorage,
        asgi_test_client,
    ) -> None:
        """/logs honours the since and level query parameters."""
        log_storage.write(LogEntry(timestamp=1.0, level="WARNING", message="old"))
        log_storage.write(LogEntry(timestamp=5.0, level="INFO", message="info"))
        log_storage.write(LogEntry(timestamp=6.0, level="WARNING", message="new"))
        app = create_asgi_app(metrics_storage, log_storage)

        async with asgi_test_client(app) as client:
            response = await client.get(
                "/logs", params={"since": "2", "level": "warning"}
            )

        messages = [json.loads(line)["message"] for line in response.text.splitlines()]
        assert messages == ["new"]

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.LogsEndpointDisabled")
    @pytest.mark.asgi
    async def test_logs_endpoint_without_storage_is_not_found(
        self, metrics_storage: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """Without a log storage /logs does not exist."""
        app = create_asgi_app(metrics_storage)

        async with asgi_test_client(app) as client:
            response = await client.get("/logs")

        assert response.status_code == 404


class TestRouting:
    """Tests for unknown paths."""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.RoutingUnknownPath")
    @pytest.mark.asgi
    async def test_unknown_path_returns_404(
        self, metrics_storage: InMemoryMetricsStorage, asgi_test_client
    ) -> None:
        """Unknown paths answer 404."""
        app = create_asgi_app(metrics_storage)

        async with asgi_test_client(app) as client:
            response = await client.get("/unknown")

        assert response.status_code == 404
        assert response.text == "Not Found"


class TestCollectorOverHttp:
    """End-to-end: a collection tick served over HTTP."""

    @pytest.mark.tier(2)
    @pytest.mark.tra("Adapter.ASGI.EndToEnd")
    @pytest.mark.asgi
    async def test_collected_metrics_and_errors_are_served(
        self, declaration, asgi_test_client
    ) -> None:
        """Metrics land on /metrics and collection errors on /logs."""
        server = InMemoryMBeanServer()
        server.register("java.lang:type=Threading", {"ThreadCount": 42})
        server.register("java.lang:type=Memory", {"HeapMemoryUsage": "N/A"})
        metrics_storage = InMemoryMetricsStorage()
        log_storage = InMemoryLogStorage()
        handler = LogStorageHandler(log_storage, level=logging.WARNING)
        package_logger = logging.getLogger("jmxcollector")
        package_logger.addHandler(handler)
        collector = JmxMetricCollector(
            [
                declaration(
                    "threads", "java.lang:type=Threading", ("ThreadCount", "gauge")
                ),
                declaration("memory", "java.lang:type=Memory", ("HeapMemoryUsage", "gauge")),
            ],
            server,
            metrics_storage,
        )
        try:
            collector.collect()
        finally:
            package_logger.removeHandler(handler)
        app = create_asgi_app(metrics_storage, log_storage, collector.definitions)

        async with asgi_test_client(app) as client:
            metrics = await client.get("/metrics")
            logs = await client.get("/logs", params={"level": "WARNING"})
            definitions = await client.get("/metrics/definitions")

        assert [json.loads(line)["name"] for line in metrics.text.splitlines()] == [
            "jmx-threads-ThreadCount"
        ]
        log_lines = [json.loads(line) for line in logs.text.splitlines()]
        assert len(log_lines) == 1
        assert log_lines[0]["attributes"]["error_type"] == "InvalidValue"
        assert set(definitions.json()) == {
            "jmx-threads-ThreadCount",
            "jmx-memory-HeapMemoryUsage",
        }
