"""
Main entrypoint: health sampler in a background thread + probe server in the main thread.

The sampler runs in a daemon thread and keeps the shared health state fresh;
the probe server (HAProxy agent-check over TCP, or the HTTP /rpc-health
endpoint) runs in the main thread and only reads that state. With
SAMPLING_MODE=on-demand there is no sampler thread and every probe samples
the node itself. On SIGINT/SIGTERM the server stops and the process exits.

Env: PROBE_MODE, HEALTH_SOURCE, SAMPLING_MODE, LOCAL_NODE_URL, REFERENCE_NODE_URLS,
AGENT_LISTEN_PORT, APP_LISTEN_PORT, METRICS_HOSTNAME, METRICS_PORT, etc.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
from typing import Any

# Configure structured JSON logging before other imports that may log
from node_health_agent.logging import get_logger
from node_health_agent.logging.logger import resolve_level

logger = get_logger("main")


def _uvicorn_log_level() -> str:
    """LOG_LEVEL as a uvicorn level name (WARN -> warning, unknown -> info)."""
    return logging.getLevelName(resolve_level(os.getenv("LOG_LEVEL"))).lower()


def _install_shutdown_handler(server: Any, stop_event: threading.Event) -> None:
    """SIGTERM: stop the sampler and the accept loop (shutdown() must run off the serving thread)."""

    def request_shutdown(signum: int, frame: Any) -> None:
        logger.info("main_shutdown_signal", signal=signal.Signals(signum).name)
        stop_event.set()
        threading.Thread(target=server.shutdown, name="agent-check-shutdown", daemon=True).start()

    try:
        signal.signal(signal.SIGTERM, request_shutdown)
    except (AttributeError, ValueError):
        # Windows or not in main thread
        pass


def main() -> int:
    """Load config, start the sampler (interval mode), then serve probes until shutdown."""
    from node_health_agent.agent_worker import (
        SamplerConfig,
        SharedHealthState,
        cached_verdict_provider,
        on_demand_verdict_provider,
        start_sampler_thread,
    )
    from node_health_agent.config import load_settings
    from node_health_agent.config.settings import PROBE_MODE_HTTP, SAMPLING_INTERVAL
    from node_health_agent.core.exceptions import ConfigurationError
    from node_health_agent.health_source.factory import build_source

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("main_config_error", message=str(e))
        return 1

    source = build_source(settings)
    state = SharedHealthState()
    stop_event = threading.Event()
    logger.info(
        "main_config_loaded",
        probe_mode=settings.probe_mode,
        health_source=source.name,
        sampling_mode=settings.sampling_mode,
        listen_port=settings.listen_port,
    )

    if settings.sampling_mode == SAMPLING_INTERVAL:
        start_sampler_thread(
            source,
            state,
            SamplerConfig(interval_sec=settings.sample_interval_sec),
            stop_event,
        )
        logger.info("main_sampler_started", thread="daemon", interval_sec=settings.sample_interval_sec)
        provider = cached_verdict_provider(state)
    else:
        provider = on_demand_verdict_provider(source, state)

    try:
        if settings.probe_mode == PROBE_MODE_HTTP:
            import uvicorn

            from node_health_agent.api_server.server import create_app

            logger.info("main_server_starting", host=settings.listen_host, port=settings.app_listen_port)
            uvicorn.run(
                create_app(provider),
                host=settings.listen_host,
                port=settings.app_listen_port,
                log_level=_uvicorn_log_level(),
            )
        else:
            from node_health_agent.probe_server.agent_check import AgentCheckServer

            try:
                server = AgentCheckServer(
                    provider,
                    host=settings.listen_host,
                    port=settings.agent_listen_port,
                )
            except OSError as e:
                logger.error(
                    "main_bind_failed",
                    host=settings.listen_host,
                    port=settings.agent_listen_port,
                    error=str(e),
                )
                return 1
            _install_shutdown_handler(server, stop_event)
            with server:
                server.serve()
        return 0
    except KeyboardInterrupt:
        logger.info("main_shutdown_signal", signal="SIGINT")
        return 0
    except Exception as e:
        logger.exception("runtime_fatal", error=str(e))
        return 1
    finally:
        stop_event.set()
        source.close()


if __name__ == "__main__":
    sys.exit(main())
