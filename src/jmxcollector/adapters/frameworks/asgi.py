"""ASGI adapter exposing collected metrics, metric definitions and logs.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring a web
framework as a dependency.
"""

import json
from collections.abc import Callable, Coroutine, Mapping
from typing import Any
from urllib.parse import parse_qs

from jmxcollector.adapters.frameworks.query_params import (
    _parse_level_param,
    _parse_name_param,
    _parse_since_param,
)
from jmxcollector.adapters.logging import get_logger
from jmxcollector.core.encoding.ndjson import (
    encode_definitions,
    encode_logs,
    encode_metrics,
)
from jmxcollector.core.models import MetricType
from jmxcollector.core.ports import LogStoragePort, MetricsStoragePort

logger = get_logger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


def _parse_query_params(scope: Scope) -> dict[str, list[str]]:
    """Parse query string from ASGI scope into parameter dictionary.

    Returns:
        Dictionary mapping parameter names to lists of values.
        Returns empty dict if query_string is missing or empty.
    """
    query_string = scope.get("query_string", b"").decode(errors="replace")
    return parse_qs(query_string)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], str],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Function that returns the response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = endpoint_func()
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, content_type, body)


def create_asgi_app(
    metrics_storage: MetricsStoragePort,
    log_storage: LogStoragePort | None = None,
    definitions: Mapping[str, MetricType] | None = None,
) -> ASGIApp:
    """Create an ASGI app with /metrics, /metrics/definitions and /logs endpoints.

    Args:
        metrics_storage: Storage adapter the collector publishes to.
        log_storage: Storage adapter fed by LogStorageHandler (optional;
                     /logs answers 404 without it).
        definitions: Metric names mapped to their types, usually
                     JmxMetricCollector.definitions.

    Returns:
        ASGI application callable.
    """
    metric_definitions = dict(definitions or {})

    def _metrics_body(prefix: str) -> str:
        return encode_metrics(
            m for m in metrics_storage.scrape() if m.name.startswith(prefix)
        )

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]

        if path == "/metrics":
            prefix = _parse_name_param(_parse_query_params(scope))
            await _handle_endpoint(
                send,
                lambda: _metrics_body(prefix),
                "application/x-ndjson",
                "Error encoding metrics endpoint",
            )
        elif path == "/metrics/definitions":
            await _handle_endpoint(
                send,
                lambda: encode_definitions(metric_definitions),
                "application/json",
                "Error encoding definitions endpoint",
            )
        elif path == "/logs" and log_storage is not None:
            params = _parse_query_params(scope)
            since = _parse_since_param(params)
            level = _parse_level_param(params)
            await _handle_endpoint(
                send,
                lambda: encode_logs(log_storage.read(since=since, level=level)),
                "application/x-ndjson",
                "Error encoding logs endpoint",
            )
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
