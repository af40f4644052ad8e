"""
Tests for environment-driven settings and the source factory.
"""

from __future__ import annotations

import pytest

from node_health_agent.config import load_settings
from node_health_agent.config.settings import Settings
from node_health_agent.core.exceptions import ConfigurationError
from node_health_agent.health_source import ChainHeightSource, MetricThresholdSource
from node_health_agent.health_source.factory import build_source


def test_agent_check_defaults(clean_env):
    clean_env.setenv("LOCAL_NODE_URL", "http://local:8545")
    clean_env.setenv("REFERENCE_NODE_URLS", "http://ref1:8545, http://ref2:8545,,")
    s = load_settings()
    assert s.probe_mode == "agent-check"
    assert s.health_source == "chain-height"
    assert s.sampling_mode == "interval"
    assert s.reference_node_urls == ("http://ref1:8545", "http://ref2:8545")
    assert s.agent_listen_port == 9876
    assert s.listen_port == 9876
    assert s.sample_interval_sec == 0.5
    assert s.metrics_port == 9090


def test_http_defaults_do_not_need_node_urls(clean_env):
    clean_env.setenv("PROBE_MODE", "http")
    s = load_settings()
    assert s.health_source == "metric"
    assert s.sampling_mode == "on-demand"
    assert s.metric_policy == "range"
    assert s.metrics_url == "http://localhost:3737/metrics"
    assert s.listen_port == 8282


def test_overrides(clean_env):
    clean_env.setenv("PROBE_MODE", "agent-check")
    clean_env.setenv("HEALTH_SOURCE", "metric")
    clean_env.setenv("METRICS_HOSTNAME", "geth")
    clean_env.setenv("METRICS_PORT", "6060")
    clean_env.setenv("METRIC_NAME", "chain_head_lag")
    clean_env.setenv("AGENT_LISTEN_PORT", "7777")
    s = load_settings()
    assert s.metrics_url == "http://geth:6060/metrics"
    assert s.metric_policy == "equals-zero"
    assert s.metric_name == "chain_head_lag"
    assert s.listen_port == 7777


def test_missing_local_node_url_is_fatal(clean_env):
    clean_env.setenv("REFERENCE_NODE_URLS", "http://ref1:8545")
    with pytest.raises(ConfigurationError, match="LOCAL_NODE_URL"):
        load_settings()


def test_missing_reference_urls_is_fatal(clean_env):
    clean_env.setenv("LOCAL_NODE_URL", "http://local:8545")
    with pytest.raises(ConfigurationError, match="REFERENCE_NODE_URLS"):
        load_settings()


@pytest.mark.parametrize(
    "name, value",
    [
        ("PROBE_MODE", "udp"),
        ("AGENT_LISTEN_PORT", "not-a-port"),
        ("AGENT_LISTEN_PORT", "70000"),
        ("SAMPLE_INTERVAL_SEC", "0"),
        ("METRIC_POLICY", "median"),
    ],
)
def test_invalid_values(clean_env, name, value):
    clean_env.setenv("LOCAL_NODE_URL", "http://local:8545")
    clean_env.setenv("REFERENCE_NODE_URLS", "http://ref1:8545")
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings()


def test_dotenv_file_is_loaded(clean_env, tmp_path):
    (tmp_path / ".env").write_text(
        "LOCAL_NODE_URL=http://from-dotenv:8545\nREFERENCE_NODE_URLS=http://ref:8545\n",
        encoding="utf-8",
    )
    # Register the variables with monkeypatch so the values dotenv writes are undone afterwards
    for name in ("LOCAL_NODE_URL", "REFERENCE_NODE_URLS"):
        clean_env.setenv(name, "")
        clean_env.delenv(name)
    assert load_settings().local_node_url == "http://from-dotenv:8545"


def test_build_source():
    chain = build_source(Settings(local_node_url="http://l", reference_node_urls=("http://r",)))
    metric = build_source(Settings(health_source="metric", metric_policy="range"))
    try:
        assert isinstance(chain, ChainHeightSource)
        assert isinstance(metric, MetricThresholdSource)
        assert metric.name == "metric:sync_execution_network_diff"
    finally:
        chain.close()
        metric.close()


@pytest.mark.parametrize(
    "name, value",
    [
        ("LOCAL_NODE_URL", "http://[::1"),
        ("LOCAL_NODE_URL", "local:8545"),
        ("REFERENCE_NODE_URLS", "http://ref1:8545,http://[::1"),
        ("REFERENCE_NODE_URLS", "ftp://ref1"),
    ],
)
def test_malformed_node_urls_are_fatal(clean_env, name, value):
    clean_env.setenv("LOCAL_NODE_URL", "http://local:8545")
    clean_env.setenv("REFERENCE_NODE_URLS", "http://ref1:8545")
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        load_settings()


def test_malformed_metrics_host_is_fatal(clean_env):
    clean_env.setenv("PROBE_MODE", "http")
    clean_env.setenv("METRICS_HOSTNAME", "[::1")
    with pytest.raises(ConfigurationError, match="METRICS_HOSTNAME"):
        load_settings()
