"""
Chain-height health source.

Compares the local node's eth_blockNumber with the highest height reported
by a set of reference nodes:

- local node unreachable or unparsable -> down (weight 0)
- local >= highest reference           -> up weight=100
- local <  highest reference           -> up weight=50 (lagging, still serving)

Reference nodes that fail are skipped and logged; the running maximum starts
at 0, so all references failing compares the local height against 0.
"""

from __future__ import annotations

import time
from typing import Sequence

import httpx

from node_health_agent.core.exceptions import FetchError, ParseError
from node_health_agent.health_source.models import (
    WEIGHT_DEGRADED,
    WEIGHT_FULL,
    HealthSnapshot,
    HealthVerdict,
)
from node_health_agent.health_source.rpc import fetch_block_height
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 5.0


def verdict_for_heights(local_height: int, highest_reference_height: int) -> HealthVerdict:
    if local_height >= highest_reference_height:
        return HealthVerdict.up(WEIGHT_FULL)
    return HealthVerdict.up(WEIGHT_DEGRADED)


class ChainHeightSource:
    """
    Health source comparing local vs reference node block heights.

    Calls are sequential: one eth_blockNumber to the local node, then one to
    each reference node. Every call is bounded by timeout_sec.
    """

    def __init__(
        self,
        local_node_url: str,
        reference_node_urls: Sequence[str],
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.Client | None = None,
    ) -> None:
        if not local_node_url.strip():
            raise ValueError("local_node_url must be non-empty")
        self._local_node_url = local_node_url.strip()
        self._reference_node_urls = [u.strip() for u in reference_node_urls if u.strip()]
        self._client = client or httpx.Client(timeout=timeout_sec)

    @property
    def name(self) -> str:
        return "chain-height"

    def highest_reference_height(self) -> int:
        """Max height over the reference nodes that answered; 0 if none did."""
        highest = 0
        for url in self._reference_node_urls:
            try:
                height = fetch_block_height(self._client, url)
            except (FetchError, ParseError) as e:
                logger.warning("chain_height_reference_failed", node_url=url, error=str(e))
                continue
            if height > highest:
                highest = height
        return highest

    def sample(self) -> HealthSnapshot:
        try:
            local_height = fetch_block_height(self._client, self._local_node_url)
        except (FetchError, ParseError) as e:
            logger.warning(
                "chain_height_local_failed",
                node_url=self._local_node_url,
                error=str(e),
                status="down",
            )
            return HealthSnapshot.failed()

        highest = self.highest_reference_height()
        verdict = verdict_for_heights(local_height, highest)
        logger.debug(
            "chain_height_sampled",
            local_height=local_height,
            highest_reference_height=highest,
            status=verdict.status_line,
        )
        return HealthSnapshot(
            verdict=verdict,
            local_height=local_height,
            highest_reference_height=highest,
            sampled_at=time.time(),
        )

    def close(self) -> None:
        self._client.close()
