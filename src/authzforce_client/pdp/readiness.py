"""Readiness gate: poll a condition until it holds or time runs out.

Times are in seconds. The gate sleeps a full interval after every failed
probe, so a condition that is never true is probed roughly
timeout / interval times before the gate gives up.
"""

from __future__ import annotations

__all__ = [
    "wait_for_condition",
    "wait_until_ready",
]

import asyncio
import inspect
import logging
import time
from typing import Awaitable, Callable, Union

from authzforce_client.constants import (
    DEFAULT_READINESS_INTERVAL_SECONDS,
    DEFAULT_READINESS_TIMEOUT_SECONDS,
)
from authzforce_client.logging_setup import null_logger
from authzforce_client.pdp.client import PdpClient

Predicate = Callable[[], Union[bool, Awaitable[bool]]]


async def wait_for_condition(
    predicate: Predicate,
    timeout: float = 30.0,
    interval: float = 1.0,
) -> bool:
    """Poll predicate until it returns True or timeout elapses.

    The predicate may be a plain or an async callable. Exceptions it raises
    propagate to the caller.

    Args:
        predicate: Zero-argument callable returning bool (or awaitable bool).
        timeout: Total budget in seconds.
        interval: Sleep between probes in seconds.

    Returns:
        True as soon as the predicate holds, False once the budget is spent.

    Raises:
        ValueError: If timeout or interval is not positive.
    """
    if timeout <= 0 or interval <= 0:
        raise ValueError("timeout and interval must be positive")

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        outcome = predicate()
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if outcome:
            return True
        await asyncio.sleep(interval)
    return False


async def wait_until_ready(
    client: PdpClient,
    timeout: float = DEFAULT_READINESS_TIMEOUT_SECONDS,
    interval: float = DEFAULT_READINESS_INTERVAL_SECONDS,
    logger: logging.Logger | None = None,
) -> bool:
    """Wait for the AuthzForce server behind client to answer health checks.

    Args:
        client: Client pointing at the server.
        timeout: Total budget in seconds.
        interval: Sleep between health checks in seconds.
        logger: Progress output (default: discarded).

    Returns:
        True if the server became ready within the budget.
    """
    log = logger or null_logger()
    log.info(f"Waiting for AuthzForce at {client.base_url} (timeout {timeout:g}s)")

    ready = await wait_for_condition(client.health_check, timeout=timeout, interval=interval)
    if ready:
        log.info("AuthzForce is ready")
    else:
        log.error(f"AuthzForce not ready after {timeout:g}s")
    return ready
