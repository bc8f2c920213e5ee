"""Command-line interface for authzforce-client.

Provides commands for building policies, waiting for the PDP, and cleaning
up domains.
"""

from .main import cli, main

__all__ = ["cli", "main"]
