"""
Application settings.

Read once at startup from the environment (and optional .env file) into a
frozen Settings dataclass; immutable for the lifetime of the process.
Missing endpoint configuration for the selected mode raises ConfigurationError.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from node_health_agent.config.env import (
    env_choice,
    env_float,
    env_int,
    env_list,
    env_port,
    env_str,
    load_agent_env,
)
from node_health_agent.core.exceptions import ConfigurationError
from node_health_agent.health_source.metric_threshold import (
    DEFAULT_METRIC_NAME,
    POLICY_EQUALS_ZERO,
    POLICY_RANGE,
)

PROBE_MODE_AGENT_CHECK = "agent-check"
PROBE_MODE_HTTP = "http"
PROBE_MODES = (PROBE_MODE_AGENT_CHECK, PROBE_MODE_HTTP)

SOURCE_CHAIN_HEIGHT = "chain-height"
SOURCE_METRIC = "metric"
HEALTH_SOURCES = (SOURCE_CHAIN_HEIGHT, SOURCE_METRIC)

SAMPLING_INTERVAL = "interval"
SAMPLING_ON_DEMAND = "on-demand"
SAMPLING_MODES = (SAMPLING_INTERVAL, SAMPLING_ON_DEMAND)

METRIC_POLICIES = (POLICY_EQUALS_ZERO, POLICY_RANGE)

DEFAULT_AGENT_LISTEN_PORT = 9876  # HAProxy agent-check
DEFAULT_APP_LISTEN_PORT = 8282
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_METRICS_HOSTNAME = "localhost"
DEFAULT_METRICS_PORT_AGENT_CHECK = 9090
DEFAULT_METRICS_PORT_HTTP = 3737
DEFAULT_METRIC_MAX_VALUE = 2
DEFAULT_SAMPLE_INTERVAL_SEC = 0.5
DEFAULT_HTTP_TIMEOUT_SEC = 5.0


def _check_url(name: str, url: str) -> None:
    """Reject URLs httpx cannot send to."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"{name} contains an invalid URL {url!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(f"{name} must be an http(s) URL with a host, got {url!r}")


@dataclass(frozen=True)
class Settings:
    """
    Endpoint and server configuration.

    probe_mode: agent-check (TCP line protocol) or http (/rpc-health status code).
    health_source: chain-height (eth_blockNumber vs reference nodes) or metric.
    sampling_mode: interval (background sampler, probes read cached state)
        or on-demand (each probe triggers one synchronous sample).
    """

    probe_mode: str = PROBE_MODE_AGENT_CHECK
    health_source: str = SOURCE_CHAIN_HEIGHT
    sampling_mode: str = SAMPLING_INTERVAL
    local_node_url: str = ""
    reference_node_urls: tuple[str, ...] = field(default_factory=tuple)
    listen_host: str = DEFAULT_LISTEN_HOST
    agent_listen_port: int = DEFAULT_AGENT_LISTEN_PORT
    app_listen_port: int = DEFAULT_APP_LISTEN_PORT
    metrics_hostname: str = DEFAULT_METRICS_HOSTNAME
    metrics_port: int = DEFAULT_METRICS_PORT_AGENT_CHECK
    metric_name: str = DEFAULT_METRIC_NAME
    metric_policy: str = POLICY_EQUALS_ZERO
    metric_max_value: int = DEFAULT_METRIC_MAX_VALUE
    sample_interval_sec: float = DEFAULT_SAMPLE_INTERVAL_SEC
    http_timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC

    def __post_init__(self) -> None:
        if self.sample_interval_sec <= 0:
            raise ConfigurationError("SAMPLE_INTERVAL_SEC must be positive")
        if self.http_timeout_sec <= 0:
            raise ConfigurationError("HTTP_TIMEOUT_SEC must be positive")
        if self.health_source == SOURCE_CHAIN_HEIGHT:
            if not self.local_node_url or not self.reference_node_urls:
                raise ConfigurationError(
                    "LOCAL_NODE_URL and REFERENCE_NODE_URLS environment variables must be set."
                )
            _check_url("LOCAL_NODE_URL", self.local_node_url)
            for url in self.reference_node_urls:
                _check_url("REFERENCE_NODE_URLS", url)
        elif self.health_source == SOURCE_METRIC:
            _check_url("METRICS_HOSTNAME", self.metrics_url)
        if not self.metric_name:
            raise ConfigurationError("METRIC_NAME must be non-empty")

    @property
    def metrics_url(self) -> str:
        return f"http://{self.metrics_hostname}:{self.metrics_port}/metrics"

    @property
    def listen_port(self) -> int:
        """Port of the probe server selected by probe_mode."""
        if self.probe_mode == PROBE_MODE_HTTP:
            return self.app_listen_port
        return self.agent_listen_port


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Defaults follow the probe mode: agent-check samples the chain height on
    an interval; http samples the metrics endpoint on demand with the range
    policy.
    """
    load_agent_env()
    probe_mode = env_choice("PROBE_MODE", PROBE_MODES, PROBE_MODE_AGENT_CHECK)
    is_http = probe_mode == PROBE_MODE_HTTP
    return Settings(
        probe_mode=probe_mode,
        health_source=env_choice(
            "HEALTH_SOURCE",
            HEALTH_SOURCES,
            SOURCE_METRIC if is_http else SOURCE_CHAIN_HEIGHT,
        ),
        sampling_mode=env_choice(
            "SAMPLING_MODE",
            SAMPLING_MODES,
            SAMPLING_ON_DEMAND if is_http else SAMPLING_INTERVAL,
        ),
        local_node_url=env_str("LOCAL_NODE_URL"),
        reference_node_urls=tuple(env_list("REFERENCE_NODE_URLS")),
        listen_host=env_str("LISTEN_HOST", DEFAULT_LISTEN_HOST),
        agent_listen_port=env_port("AGENT_LISTEN_PORT", DEFAULT_AGENT_LISTEN_PORT),
        app_listen_port=env_port("APP_LISTEN_PORT", DEFAULT_APP_LISTEN_PORT),
        metrics_hostname=env_str("METRICS_HOSTNAME", DEFAULT_METRICS_HOSTNAME),
        metrics_port=env_port(
            "METRICS_PORT",
            DEFAULT_METRICS_PORT_HTTP if is_http else DEFAULT_METRICS_PORT_AGENT_CHECK,
        ),
        metric_name=env_str("METRIC_NAME", DEFAULT_METRIC_NAME),
        metric_policy=env_choice(
            "METRIC_POLICY",
            METRIC_POLICIES,
            POLICY_RANGE if is_http else POLICY_EQUALS_ZERO,
        ),
        metric_max_value=env_int("METRIC_MAX_VALUE", DEFAULT_METRIC_MAX_VALUE),
        sample_interval_sec=env_float("SAMPLE_INTERVAL_SEC", DEFAULT_SAMPLE_INTERVAL_SEC),
        http_timeout_sec=env_float("HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC),
    )
