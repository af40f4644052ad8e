"""
Build the configured health source from Settings.
"""

from __future__ import annotations

from node_health_agent.config.settings import SOURCE_CHAIN_HEIGHT, Settings
from node_health_agent.health_source import HealthSource
from node_health_agent.health_source.chain_height import ChainHeightSource
from node_health_agent.health_source.metric_threshold import (
    MetricThreshold,
    MetricThresholdSource,
)


def build_source(settings: Settings) -> HealthSource:
    if settings.health_source == SOURCE_CHAIN_HEIGHT:
        return ChainHeightSource(
            settings.local_node_url,
            settings.reference_node_urls,
            timeout_sec=settings.http_timeout_sec,
        )
    return MetricThresholdSource(
        settings.metrics_url,
        metric_name=settings.metric_name,
        threshold=MetricThreshold(
            policy=settings.metric_policy,
            max_value=settings.metric_max_value,
        ),
        timeout_sec=settings.http_timeout_sec,
    )
