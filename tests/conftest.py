"""
Pytest fixtures for Node Health Agent tests.

Outbound HTTP is faked with httpx.MockTransport: nodes are keyed by host and
answer eth_blockNumber with a hex result, or raise a connection error.
"""

from __future__ import annotations

from typing import Callable, Iterator

import httpx
import pytest

AGENT_ENV_VARS = (
    "PROBE_MODE",
    "HEALTH_SOURCE",
    "SAMPLING_MODE",
    "LOCAL_NODE_URL",
    "REFERENCE_NODE_URLS",
    "LISTEN_HOST",
    "AGENT_LISTEN_PORT",
    "APP_LISTEN_PORT",
    "METRICS_HOSTNAME",
    "METRICS_PORT",
    "METRIC_NAME",
    "METRIC_POLICY",
    "METRIC_MAX_VALUE",
    "SAMPLE_INTERVAL_SEC",
    "HTTP_TIMEOUT_SEC",
)


def rpc_transport(results: dict[str, object]) -> httpx.MockTransport:
    """
    results maps host -> hex string (returned as result), int (HTTP status with
    empty body), dict (raw JSON body), or None (connection refused).
    Unknown hosts are refused.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        value = results.get(request.url.host)
        if value is None:
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(value, int):
            return httpx.Response(value)
        if isinstance(value, dict):
            return httpx.Response(200, json=value)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": value})

    return httpx.MockTransport(handler)


def text_transport(status_code: int, body: str) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, text=body))


@pytest.fixture
def rpc_client() -> Iterator[Callable[[dict[str, object]], httpx.Client]]:
    """Factory: httpx.Client whose nodes answer per rpc_transport()."""
    clients: list[httpx.Client] = []

    def make(results: dict[str, object]) -> httpx.Client:
        client = httpx.Client(transport=rpc_transport(results))
        clients.append(client)
        return client

    yield make
    for client in clients:
        client.close()


@pytest.fixture
def metrics_client() -> Iterator[Callable[..., httpx.Client]]:
    """Factory: httpx.Client returning a fixed metrics page."""
    clients: list[httpx.Client] = []

    def make(body: str, status_code: int = 200) -> httpx.Client:
        client = httpx.Client(transport=text_transport(status_code, body))
        clients.append(client)
        return client

    yield make
    for client in clients:
        client.close()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset every agent variable and run from an empty dir so no .env leaks in."""
    for name in AGENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "node_health_agent.config.env._ENV_PATH", tmp_path / ".env"
    )
    return monkeypatch
