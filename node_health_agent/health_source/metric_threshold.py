"""
Metric-threshold health source.

Fetches a Prometheus-style text page, extracts the first "<metric_name> <integer>"
line with a single regex search, and thresholds the value. Two policies:

- equals-zero: value == 0 -> up weight=100, otherwise down (weight 50)
- range:       value <= max_value -> up weight=100, otherwise down (weight 50)

Any fetch or parse failure is down with weight 0.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass

import httpx

from node_health_agent.core.exceptions import FetchError, ParseError
from node_health_agent.health_source.models import (
    WEIGHT_DEGRADED,
    WEIGHT_FULL,
    HealthSnapshot,
    HealthVerdict,
)
from node_health_agent.health_source.rpc import fetch_metrics_text
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

DEFAULT_METRIC_NAME = "sync_execution_network_diff"
DEFAULT_TIMEOUT_SEC = 5.0

POLICY_EQUALS_ZERO = "equals-zero"
POLICY_RANGE = "range"

# Unsigned decimal only; "+3", "-1", "1_0" and "1.5" are rejected
_INTEGER_VALUE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class MetricThreshold:
    """Comparison applied to the parsed metric value."""

    policy: str = POLICY_EQUALS_ZERO
    max_value: int = 2

    def __post_init__(self) -> None:
        if self.policy not in (POLICY_EQUALS_ZERO, POLICY_RANGE):
            raise ValueError(f"unknown metric policy: {self.policy!r}")

    def passes(self, value: int) -> bool:
        if self.policy == POLICY_EQUALS_ZERO:
            return value == 0
        return value <= self.max_value

    def verdict(self, value: int) -> HealthVerdict:
        if self.passes(value):
            return HealthVerdict.up(WEIGHT_FULL)
        return HealthVerdict.down(WEIGHT_DEGRADED)


def compile_metric_pattern(metric_name: str) -> re.Pattern[str]:
    """Match "<metric_name> <value>" at the start of a line; value captured raw."""
    return re.compile(rf"^{re.escape(metric_name)}[ \t]+(\S+)", re.MULTILINE)


def extract_metric_value(body: str, pattern: re.Pattern[str]) -> int:
    match = pattern.search(body)
    if match is None:
        raise ParseError(f"metric not found: {pattern.pattern}")
    raw = match.group(1)
    if _INTEGER_VALUE.fullmatch(raw) is None:
        raise ParseError(f"metric value is not an integer: {raw!r}")
    return int(raw)


class MetricThresholdSource:
    """Health source thresholding a single integer metric from a /metrics page."""

    def __init__(
        self,
        metrics_url: str,
        *,
        metric_name: str = DEFAULT_METRIC_NAME,
        threshold: MetricThreshold | None = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.Client | None = None,
    ) -> None:
        if not metrics_url.strip():
            raise ValueError("metrics_url must be non-empty")
        self._metrics_url = metrics_url.strip()
        self._metric_name = metric_name
        self._pattern = compile_metric_pattern(metric_name)
        self._threshold = threshold or MetricThreshold()
        self._client = client or httpx.Client(timeout=timeout_sec)

    @property
    def name(self) -> str:
        return f"metric:{self._metric_name}"

    def sample(self) -> HealthSnapshot:
        try:
            body = fetch_metrics_text(self._client, self._metrics_url)
            value = extract_metric_value(body, self._pattern)
        except (FetchError, ParseError) as e:
            logger.warning(
                "metric_sample_failed",
                metrics_url=self._metrics_url,
                metric=self._metric_name,
                error=str(e),
            )
            return HealthSnapshot.failed()

        verdict = self._threshold.verdict(value)
        logger.debug(
            "metric_sampled",
            metric=self._metric_name,
            value=value,
            policy=self._threshold.policy,
            status=verdict.status_line,
        )
        return HealthSnapshot(verdict=verdict, sampled_at=time.time())

    def close(self) -> None:
        self._client.close()
