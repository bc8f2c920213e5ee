"""Per-invocation CLI state shared from the group to its commands."""

from __future__ import annotations

__all__ = ["CliState"]

import logging
from dataclasses import dataclass

from authzforce_client.config import ClientConfig
from authzforce_client.pdp.client import PdpClient


@dataclass(frozen=True)
class CliState:
    """Resolved configuration and console logger for one CLI run."""

    config: ClientConfig
    logger: logging.Logger

    def create_client(self) -> PdpClient:
        """Create a PDP client for the configured server."""
        return PdpClient.from_config(self.config, logger=self.logger)
