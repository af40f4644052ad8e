"""
Application-level exceptions.

- ConfigurationError: fatal at startup; the process exits before serving.
- FetchError / ParseError: raised by the remote fetch helpers and converted
  into a verdict inside each health source; never escape sample().
- ProbeIOError: a single probe connection failed; logged and abandoned.
"""

from __future__ import annotations


class NodeHealthAgentError(Exception):
    """Base class for all agent errors."""


class ConfigurationError(NodeHealthAgentError):
    """Required configuration is missing or invalid."""


class FetchError(NodeHealthAgentError):
    """Transport failure, timeout or non-success HTTP status reaching a remote endpoint."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ParseError(NodeHealthAgentError):
    """Remote endpoint answered but the payload could not be interpreted."""


class ProbeIOError(NodeHealthAgentError):
    """Accept or write failure on an inbound probe connection."""
