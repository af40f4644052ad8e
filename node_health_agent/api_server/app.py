"""
FastAPI/ASGI application entrypoint.

Builds the app from the environment. SAMPLING_MODE=interval starts the
background sampler with the app and serves the cached verdict; on-demand
samples once per request. Either way the health source is closed on shutdown.
Run with: uvicorn node_health_agent.api_server.app:create_app_from_env --factory --host 0.0.0.0 --port 8282
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI

from node_health_agent.agent_worker import (
    SamplerConfig,
    SharedHealthState,
    cached_verdict_provider,
    on_demand_verdict_provider,
    start_sampler_thread,
)
from node_health_agent.api_server.server import create_app
from node_health_agent.config import Settings, load_settings
from node_health_agent.config.settings import PROBE_MODE_HTTP, SAMPLING_INTERVAL
from node_health_agent.core.exceptions import ConfigurationError
from node_health_agent.health_source import HealthSource
from node_health_agent.health_source.factory import build_source
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

SAMPLER_JOIN_TIMEOUT_SEC = 5.0


def _source_lifespan(
    source: HealthSource,
    state: SharedHealthState,
    settings: Settings,
) -> Callable[[FastAPI], Any]:
    """Run the sampler (interval mode only) for the lifetime of the app, then close the source."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stop_event = threading.Event()
        thread = None
        if settings.sampling_mode == SAMPLING_INTERVAL:
            thread = start_sampler_thread(
                source,
                state,
                SamplerConfig(interval_sec=settings.sample_interval_sec),
                stop_event,
            )
        logger.info("rpc_health_app_started", source=source.name, sampling_mode=settings.sampling_mode)
        try:
            yield
        finally:
            stop_event.set()
            if thread is not None:
                thread.join(timeout=SAMPLER_JOIN_TIMEOUT_SEC)
                if thread.is_alive():
                    logger.warning("sampler_join_timeout", timeout_sec=SAMPLER_JOIN_TIMEOUT_SEC)
            source.close()
            logger.info("rpc_health_app_stopped", source=source.name)

    return lifespan


def create_app_from_env() -> FastAPI:
    """App factory for uvicorn --factory."""
    settings = load_settings()
    if settings.probe_mode != PROBE_MODE_HTTP:
        raise ConfigurationError(
            f"the HTTP app needs PROBE_MODE={PROBE_MODE_HTTP}, got {settings.probe_mode!r}"
        )
    source = build_source(settings)
    state = SharedHealthState()
    if settings.sampling_mode == SAMPLING_INTERVAL:
        provider = cached_verdict_provider(state)
    else:
        provider = on_demand_verdict_provider(source, state)
    return create_app(provider, lifespan=_source_lifespan(source, state, settings))


__all__ = ["create_app_from_env"]
