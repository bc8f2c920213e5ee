"""XACML 3.0 request/response codec.

Structure:
    model.py     - AccessQuery and the typed Request document model
    codec.py     - AccessQueryCodec (encode Request, decode Response)
    decision.py  - Decision enum and DecisionResult
    policy.py    - Policy identity extraction, validation, loading
"""

from authzforce_client.xacml.codec import AccessQueryCodec
from authzforce_client.xacml.decision import (
    AttributeAssignment,
    Decision,
    DecisionResult,
    PolicyDirective,
)
from authzforce_client.xacml.model import (
    AccessQuery,
    Attribute,
    AttributeBag,
    AttributesGroup,
    AttributeValue,
    XacmlRequest,
)
from authzforce_client.xacml.policy import (
    PolicyDocument,
    PolicyValidation,
    extract_policy_id,
    load_policy,
    require_policy_id,
    validate_policy_xml,
)

__all__ = [
    # Query and document model
    "AccessQuery",
    "Attribute",
    "AttributeBag",
    "AttributesGroup",
    "AttributeValue",
    "XacmlRequest",
    # Codec
    "AccessQueryCodec",
    # Decisions
    "AttributeAssignment",
    "Decision",
    "DecisionResult",
    "PolicyDirective",
    # Policies
    "PolicyDocument",
    "PolicyValidation",
    "extract_policy_id",
    "load_policy",
    "require_policy_id",
    "validate_policy_xml",
]
