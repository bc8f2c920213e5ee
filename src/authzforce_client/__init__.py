"""authzforce-client: XACML 3.0 codec and AuthzForce PDP lifecycle client.

Structure:
    xmltools/   - Formatter, namespace normalizer, namespace-agnostic reader
    xacml/      - Request document model, codec, decisions, policy documents
    pdp/        - REST lifecycle client, readiness gate, bulk cleanup
    cli/        - Command line entry point (build, wait, clean-domains)

Usage:
    from authzforce_client import AccessQuery, PdpClient

    async with PdpClient("http://127.0.0.1:8080/authzforce-ce") as client:
        domain_id = await client.create_domain("my-tests")
        await client.deploy_policy(domain_id, policy_xml)
        result = await client.evaluate_request(
            domain_id,
            AccessQuery(subject={"subject-id": "alice"}, action={"action-id": "read"}),
        )
"""

__version__ = "0.3.0"

from authzforce_client.exceptions import (
    AuthzForceClientError,
    ConfigurationError,
    DecodeError,
    ParseError,
    PolicyExtractionError,
    ProtocolViolation,
    TransportError,
)
from authzforce_client.pdp.cleanup import CleanupOutcome, cleanup_domains
from authzforce_client.pdp.client import PdpClient, PolicyDomain
from authzforce_client.pdp.readiness import wait_for_condition, wait_until_ready
from authzforce_client.xacml.codec import AccessQueryCodec
from authzforce_client.xacml.decision import Decision, DecisionResult, PolicyDirective
from authzforce_client.xacml.model import AccessQuery
from authzforce_client.xacml.policy import PolicyDocument

__all__ = [
    "__version__",
    # Errors
    "AuthzForceClientError",
    "ConfigurationError",
    "DecodeError",
    "ParseError",
    "PolicyExtractionError",
    "ProtocolViolation",
    "TransportError",
    # Codec
    "AccessQuery",
    "AccessQueryCodec",
    "Decision",
    "DecisionResult",
    "PolicyDirective",
    "PolicyDocument",
    # PDP
    "CleanupOutcome",
    "PdpClient",
    "PolicyDomain",
    "cleanup_domains",
    "wait_for_condition",
    "wait_until_ready",
]
