"""
Configuration management for the Node Health Agent.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all service configuration.
"""

from node_health_agent.config.settings import Settings, load_settings  # noqa: F401

__all__ = ["Settings", "load_settings"]
