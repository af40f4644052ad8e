"""
Tests for the chain-height health source.

Local and reference nodes are faked per host via the rpc_client fixture.
"""

from __future__ import annotations

from node_health_agent.health_source.chain_height import (
    ChainHeightSource,
    verdict_for_heights,
)
from node_health_agent.health_source.models import HealthVerdict

LOCAL_URL = "http://local-node:8545"
REF_URL_1 = "http://ref-node-1:8545"
REF_URL_2 = "http://ref-node-2:8545"


def _source(client, refs=(REF_URL_1,)) -> ChainHeightSource:
    return ChainHeightSource(LOCAL_URL, list(refs), client=client)


def test_verdict_for_heights():
    assert verdict_for_heights(100, 100) == HealthVerdict.up(100)
    assert verdict_for_heights(101, 100) == HealthVerdict.up(100)
    assert verdict_for_heights(99, 100) == HealthVerdict.up(50)


def test_local_ahead_of_reference_is_full_weight(rpc_client):
    """Local 0x64 (100) vs only reference 0x32 (50) -> up weight=100."""
    client = rpc_client({"local-node": "0x64", "ref-node-1": "0x32"})
    snap = _source(client).sample()
    assert snap.verdict.status_line == "up weight=100"
    assert snap.verdict.healthy is True
    assert snap.verdict.weight == 100
    assert snap.local_height == 100
    assert snap.highest_reference_height == 50
    assert snap.sampled_at is not None


def test_local_behind_reference_is_degraded(rpc_client):
    client = rpc_client({"local-node": "0x32", "ref-node-1": "0x64"})
    snap = _source(client).sample()
    assert snap.verdict.status_line == "up weight=50"
    assert snap.verdict.healthy is True
    assert snap.verdict.weight == 50


def test_local_unreachable_is_down(rpc_client):
    client = rpc_client({"ref-node-1": "0x64"})
    snap = _source(client).sample()
    assert snap.verdict.status_line == "down"
    assert snap.verdict.healthy is False
    assert snap.verdict.weight == 0
    assert snap.local_height == 0
    assert snap.highest_reference_height == 0


def test_local_bad_payload_is_down(rpc_client):
    client = rpc_client({"local-node": "garbage", "ref-node-1": "0x64"})
    assert _source(client).sample().verdict.status_line == "down"


def test_failing_reference_is_skipped_not_zero(rpc_client):
    """One reference fails, the other reports 200: max is 200, not 0."""
    client = rpc_client({"local-node": "0x64", "ref-node-2": "0xc8"})
    snap = _source(client, refs=(REF_URL_1, REF_URL_2)).sample()
    assert snap.highest_reference_height == 200
    assert snap.verdict.status_line == "up weight=50"


def test_all_references_failing_gives_zero(rpc_client):
    client = rpc_client({"local-node": "0x64", "ref-node-1": 500})
    snap = _source(client, refs=(REF_URL_1, REF_URL_2)).sample()
    assert snap.highest_reference_height == 0
    assert snap.verdict.status_line == "up weight=100"


def test_highest_of_several_references(rpc_client):
    client = rpc_client({"local-node": "0x64", "ref-node-1": "0x10", "ref-node-2": "0x65"})
    source = _source(client, refs=(REF_URL_1, REF_URL_2))
    assert source.highest_reference_height() == 101
    assert source.sample().verdict.weight == 50


def test_blank_reference_urls_ignored(rpc_client):
    client = rpc_client({"local-node": "0x1"})
    source = ChainHeightSource(LOCAL_URL, ["", "  "], client=client)
    assert source.highest_reference_height() == 0
    assert source.name == "chain-height"


def test_malformed_reference_url_is_skipped(rpc_client):
    client = rpc_client({"local-node": "0x64", "ref-node-1": "0x32"})
    snap = _source(client, refs=(REF_URL_1, "http://[::1")).sample()
    assert snap.highest_reference_height == 50
    assert snap.verdict.status_line == "up weight=100"


def test_malformed_local_url_is_down(rpc_client):
    client = rpc_client({"ref-node-1": "0x32"})
    snap = ChainHeightSource("http://[::1", [REF_URL_1], client=client).sample()
    assert snap.verdict.status_line == "down"
