"""AuthzForce PDP lifecycle client.

Structure:
    client.py     - PdpClient (domains, policies, evaluation, health)
    documents.py  - Admin request bodies and link parsing
    readiness.py  - Polling readiness gate
    cleanup.py    - Concurrent bulk domain deletion
"""

from authzforce_client.pdp.cleanup import CleanupOutcome, clean_all_domains, cleanup_domains
from authzforce_client.pdp.client import PdpClient, PolicyDomain
from authzforce_client.pdp.readiness import wait_for_condition, wait_until_ready

__all__ = [
    "CleanupOutcome",
    "PdpClient",
    "PolicyDomain",
    "clean_all_domains",
    "cleanup_domains",
    "wait_for_condition",
    "wait_until_ready",
]
