# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Wire the process-wide defaults from configuration."""

from __future__ import annotations

import structlog

from flyrequest.config.properties.queue import QueueProperties
from flyrequest.config.properties.transport import TransportProperties
from flyrequest.core.config import Config
from flyrequest.dispatch.adapters.thread_pool import shutdown_background_dispatcher
from flyrequest.logging.structlog_adapter import StructlogAdapter
from flyrequest.queue.request_queue import RequestQueue, set_default_queue
from flyrequest.transport.adapters.httpx_adapter import HttpxTransport
from flyrequest.transport.defaults import set_default_transport

logger = structlog.get_logger("flyrequest.auto_configuration")


def configure(config: Config | None = None) -> Config:
    """Configure logging, the default queue and the default transport.

    With no *config*, the packaged defaults are used. Requests still
    held by the previous default queue stay there and finish under its
    limit. The previous default transport is left open; call
    :func:`shutdown` first to close it.
    """
    config = config if config is not None else Config.defaults()

    StructlogAdapter().configure(config)

    queue_props = config.bind(QueueProperties)
    transport_props = config.bind(TransportProperties)

    previous = set_default_queue(RequestQueue(queue_props))
    if previous is not None and len(previous):
        logger.warning(
            "default_queue_replaced",
            pending=previous.pending_count,
            executing=previous.executing_count,
        )
    set_default_transport(HttpxTransport.from_properties(transport_props))

    logger.info(
        "flyrequest_configured",
        max_concurrent_connections=queue_props.max_concurrent_connections,
        timeout=transport_props.timeout,
        sources=config.loaded_sources,
    )
    return config


async def shutdown(wait: bool = True) -> None:
    """Close the default transport and stop the background dispatcher."""
    transport = set_default_transport(None)
    if transport is not None:
        await transport.close()
    shutdown_background_dispatcher(wait=wait)
    logger.info("flyrequest_shutdown")
