"""Readiness polling shared by orchestrator implementations."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from ethnet.core.exceptions import ServicesTimeoutError
from ethnet.core.logger import Logger

from .protocol import Orchestrator


DEFAULT_POLL_INTERVAL = 1.0

logger = Logger("orchestrator.wait")


async def wait_for_services(
    orchestrator: Orchestrator,
    enclave_name: str,
    service_names: Sequence[str],
    *,
    timeout: float,  # noqa: ASYNC109
    interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    """Poll the orchestrator until every named service reports ``RUNNING``.

    The service listing is checked once immediately, then every *interval*
    seconds. Errors from ``get_services`` propagate as-is; nothing is
    retried beyond this loop.

    Args:
        orchestrator: Orchestrator to query.
        enclave_name: Enclave whose services are checked.
        service_names: Services that must all be present and running.
        timeout: Seconds before giving up.
        interval: Seconds between checks.

    Raises:
        ServicesTimeoutError: If the services are not ready in time. The
            message lists the services still pending.
        asyncio.CancelledError: If the caller cancels the wait.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    while True:
        services = await orchestrator.get_services(enclave_name)
        pending = [
            name for name in service_names if name not in services or not services[name].is_running
        ]
        if not pending:
            logger.debug("services_ready", enclave=enclave_name, count=len(service_names))
            return

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise ServicesTimeoutError(
                f"timeout waiting for services to be ready in {enclave_name}: "
                f"{', '.join(sorted(pending))}"
            )
        logger.debug("services_pending", enclave=enclave_name, pending=",".join(sorted(pending)))
        await asyncio.sleep(min(interval, remaining))
