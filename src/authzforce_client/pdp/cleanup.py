"""Bulk domain deletion.

Deletions run concurrently. A failed deletion is logged as a warning and
recorded in its outcome; it never stops the others or raises.
"""

from __future__ import annotations

__all__ = [
    "CleanupOutcome",
    "clean_all_domains",
    "cleanup_domains",
]

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

from authzforce_client.logging_setup import null_logger
from authzforce_client.pdp.client import PdpClient


@dataclass(frozen=True, slots=True)
class CleanupOutcome:
    """Result of deleting one domain."""

    domain_id: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _delete_one(client: PdpClient, domain_id: str, logger: logging.Logger) -> CleanupOutcome:
    try:
        await client.delete_domain(domain_id)
    except Exception as e:
        logger.warning(f"Failed to cleanup domain {domain_id}: {e}")
        return CleanupOutcome(domain_id, error=str(e))
    logger.debug(f"Cleaned up domain {domain_id}")
    return CleanupOutcome(domain_id)


async def cleanup_domains(
    client: PdpClient,
    domain_ids: Iterable[str],
    logger: logging.Logger | None = None,
) -> list[CleanupOutcome]:
    """Delete the given domains concurrently.

    Args:
        client: Client pointing at the server.
        domain_ids: Domains to delete.
        logger: Warning destination for failures (default: discarded).

    Returns:
        One outcome per id, in input order.
    """
    log = logger or null_logger()
    return list(await asyncio.gather(*(_delete_one(client, domain_id, log) for domain_id in domain_ids)))


async def clean_all_domains(
    client: PdpClient,
    logger: logging.Logger | None = None,
) -> list[CleanupOutcome]:
    """Delete every domain on the server.

    Raises:
        TransportError: If the domain listing itself fails.
    """
    log = logger or null_logger()
    domain_ids = await client.list_domains()
    log.info(f"Found {len(domain_ids)} domain(s) to delete")
    return await cleanup_domains(client, domain_ids, log)
