"""
Health source package.

Strategies that turn a remote endpoint into a HealthSnapshot: the
chain-height source (eth_blockNumber against reference nodes) and the
metric-threshold source (integer metric from a /metrics page).
"""

from typing import Protocol

from node_health_agent.health_source.chain_height import ChainHeightSource
from node_health_agent.health_source.metric_threshold import (
    MetricThreshold,
    MetricThresholdSource,
)
from node_health_agent.health_source.models import HealthSnapshot, HealthVerdict


class HealthSource(Protocol):
    """sample() never raises; failures come back as a down snapshot."""

    @property
    def name(self) -> str: ...

    def sample(self) -> HealthSnapshot: ...

    def close(self) -> None: ...


__all__ = [
    "ChainHeightSource",
    "HealthSnapshot",
    "HealthSource",
    "HealthVerdict",
    "MetricThreshold",
    "MetricThresholdSource",
]
