"""Example ASGI application serving JMX metrics collected on a timer.

Run with:
    uvicorn examples.collector_example:app

Endpoints:
    /metrics                 - NDJSON of every collected metric
    /metrics?name=<prefix>   - NDJSON filtered by metric name prefix
    /metrics/definitions     - JSON object of metric name to metric type
    /logs                    - NDJSON collector logs (since/level filters)

The MBeans come from an in-memory server whose values are refreshed on each
tick, standing in for a real JMX connection.
"""

import asyncio
import logging
import random

from jmxcollector import (
    InMemoryLogStorage,
    InMemoryMBeanServer,
    InMemoryMetricsStorage,
    JmxMetricCollector,
    LogStorageHandler,
    load_declarations,
)
from jmxcollector.adapters.frameworks.asgi import create_asgi_app

CONFIG = {
    "mbeans": [
        {
            "metric-name": "threads",
            "jmx-mbean-query": "java.lang:type=Threading",
            "attributes": [
                {"attribute-name": "ThreadCount", "metric-type": "gauge"},
            ],
        },
        {
            "metric-name": "memory",
            "jmx-mbean-query": "java.lang:type=Memory",
            "attributes": [
                {
                    "attribute-name": "HeapMemoryUsage",
                    "metric-type": "gauge",
                    "keys": ["used", "committed", "max"],
                },
            ],
        },
        {
            "metric-name": "gc",
            "jmx-mbean-query": "java.lang:type=GarbageCollector,name=*",
            "attributes": [
                {"attribute-name": "CollectionCount", "metric-type": "counter"},
                {"attribute-name": "CollectionTime", "metric-type": "counter"},
            ],
        },
    ]
}

COLLECT_INTERVAL_SECONDS = 2.0

server = InMemoryMBeanServer()
metrics_storage = InMemoryMetricsStorage(max_size=10_000)
log_storage = InMemoryLogStorage(max_size=1_000)
logging.getLogger("jmxcollector").addHandler(LogStorageHandler(log_storage))

collector = JmxMetricCollector(load_declarations(CONFIG), server, metrics_storage)
metrics_app = create_asgi_app(metrics_storage, log_storage, collector.definitions)


def refresh_mbeans(tick: int) -> None:
    """Publish new sample values for the simulated JVM."""
    server.register(
        "java.lang:type=Threading", {"ThreadCount": random.randint(20, 60)}
    )
    server.register(
        "java.lang:type=Memory",
        {
            "HeapMemoryUsage": {
                "used": random.randint(50, 200) * 1024 * 1024,
                "committed": 256 * 1024 * 1024,
                "max": 512 * 1024 * 1024,
            }
        },
    )
    for name in ("G1 Young Generation", "G1 Old Generation"):
        server.register(
            f"java.lang:type=GarbageCollector,name={name}",
            {"CollectionCount": tick, "CollectionTime": tick * 3},
        )


async def collect_forever() -> None:
    """Run one collection per interval."""
    tick = 0
    while True:
        tick += 1
        refresh_mbeans(tick)
        collector.collect()
        await asyncio.sleep(COLLECT_INTERVAL_SECONDS)


async def app(scope, receive, send):  # type: ignore[no-untyped-def]
    """Start the collection loop on lifespan startup, then serve endpoints."""
    if scope["type"] == "lifespan":
        task: asyncio.Task[None] | None = None
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                task = asyncio.create_task(collect_forever())
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                if task is not None:
                    task.cancel()
                await send({"type": "lifespan.shutdown.complete"})
                return
    await metrics_app(scope, receive, send)
