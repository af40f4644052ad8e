"""
Outbound JSON-RPC and metrics fetches.

eth_blockNumber over HTTP POST (result is a 0x-prefixed hex quantity) and a
plain-text GET for the metrics endpoint. Transport problems raise FetchError;
payloads that cannot be interpreted raise ParseError. Callers decide how a
failure degrades the verdict.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from node_health_agent.core.exceptions import FetchError, ParseError

# Signed 64-bit upper bound for block heights
MAX_BLOCK_NUMBER = 2**63 - 1
ETH_BLOCK_NUMBER = "eth_blockNumber"
JSON_RPC_REQUEST_ID = 1


class JsonRpcResponse(BaseModel):
    """Envelope of a JSON-RPC 2.0 response; error responses carry no result."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any = None
    error: Any = None


def build_rpc_body(method: str, params: list[Any] | None = None) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "method": method,
        "params": params or [],
        "id": JSON_RPC_REQUEST_ID,
    }


def block_number_to_hex(number: int) -> str:
    """Encode a block height as a JSON-RPC quantity (e.g. 100 -> "0x64")."""
    if not (0 <= number <= MAX_BLOCK_NUMBER):
        raise ValueError(f"block number out of range: {number}")
    return hex(number)


def parse_block_number(value: Any) -> int:
    """
    Parse a 0x-prefixed hex quantity into a non-negative 64-bit block height.
    Raises ParseError on anything else.
    """
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ParseError(f"block number is not a 0x-prefixed hex string: {value!r}")
    digits = value[2:]
    if not digits or not all(c in "0123456789abcdefABCDEF" for c in digits):
        raise ParseError(f"block number is not valid hex: {value!r}")
    number = int(digits, 16)
    if number > MAX_BLOCK_NUMBER:
        raise ParseError(f"block number exceeds 64-bit range: {value!r}")
    return number


def _post_json(client: httpx.Client, url: str, body: dict[str, Any]) -> httpx.Response:
    try:
        resp = client.post(url, json=body)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e
    return resp


def fetch_block_height(client: httpx.Client, node_url: str) -> int:
    """Query eth_blockNumber on node_url and return the parsed height."""
    resp = _post_json(client, node_url, build_rpc_body(ETH_BLOCK_NUMBER))
    try:
        envelope = JsonRpcResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        raise ParseError(f"{node_url}: malformed JSON-RPC response") from e
    if envelope.error is not None:
        raise ParseError(f"{node_url}: JSON-RPC error {envelope.error}")
    return parse_block_number(envelope.result)


def fetch_metrics_text(client: httpx.Client, metrics_url: str) -> str:
    """GET the metrics page; anything but 200 is a FetchError."""
    try:
        resp = client.get(metrics_url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(metrics_url, str(e) or type(e).__name__) from e
    if resp.status_code != 200:
        raise FetchError(metrics_url, f"HTTP {resp.status_code}")
    return resp.text
