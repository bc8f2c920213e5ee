"""Policy documents: identity extraction, sanity checks, loading.

A policy's identity always comes from its own XML (PolicySetId, else
PolicyId on the root element). A caller-supplied id is only ever checked
against it.
"""

from __future__ import annotations

__all__ = [
    "PolicyDocument",
    "PolicyValidation",
    "extract_policy_id",
    "load_policy",
    "require_policy_id",
    "validate_policy_xml",
]

from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree

from authzforce_client.constants import XACML_CORE_NS
from authzforce_client.exceptions import ParseError, PolicyExtractionError
from authzforce_client.xmltools.reader import XmlDocument

_ROOT_ID_ATTRIBUTES = {"PolicySet": "PolicySetId", "Policy": "PolicyId"}


@dataclass(frozen=True, slots=True)
class PolicyDocument:
    """A policy uploaded to a domain.

    Attributes:
        policy_id: PolicySetId or PolicyId from the XML.
        version: Version assigned by the PDP on upload.
        xml_content: The uploaded XML.
    """

    policy_id: str
    version: str
    xml_content: str


@dataclass
class PolicyValidation:
    """Result of validate_policy_xml()."""

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _parse_policy(policy_xml: str) -> XmlDocument:
    try:
        return XmlDocument.parse(policy_xml)
    except ParseError as e:
        raise PolicyExtractionError(f"Policy is not well-formed XML: {e.diagnostic}") from e


def extract_policy_id(policy_xml: str) -> str | None:
    """Extract the policy identifier from policy XML.

    PolicySetId takes priority over PolicyId, so a policy set is identified
    by its own id rather than that of a nested policy.

    Args:
        policy_xml: XACML Policy or PolicySet document.

    Returns:
        The id, or None if neither attribute is present.

    Raises:
        PolicyExtractionError: If the XML is not well-formed.
    """
    doc = _parse_policy(policy_xml)
    return doc.select_attribute("PolicySet", "PolicySetId") or doc.select_attribute("Policy", "PolicyId")


def require_policy_id(policy_xml: str, declared_id: str | None = None) -> str:
    """Extract the policy id, failing if absent or different from declared_id.

    Args:
        policy_xml: XACML Policy or PolicySet document.
        declared_id: Id the caller expects, if any.

    Returns:
        The extracted id.

    Raises:
        PolicyExtractionError: If no id is found or it differs from declared_id.
    """
    policy_id = extract_policy_id(policy_xml)
    if not policy_id:
        raise PolicyExtractionError("Could not extract PolicySetId or PolicyId from policy XML")
    if declared_id is not None and declared_id != policy_id:
        raise PolicyExtractionError(f"Policy XML declares id {policy_id!r}, not {declared_id!r}")
    return policy_id


def validate_policy_xml(policy_xml: str) -> PolicyValidation:
    """Check the basic shape of a policy before upload.

    Errors: not well-formed, root is not Policy/PolicySet, root has no id.
    Warnings: root is not in the XACML 3.0 core namespace.

    Args:
        policy_xml: XACML Policy or PolicySet document.

    Returns:
        PolicyValidation with is_valid False if any error was found.
    """
    result = PolicyValidation()
    try:
        doc = XmlDocument.parse(policy_xml)
    except ParseError as e:
        result.is_valid = False
        result.errors.append(f"Not well-formed XML: {e.diagnostic}")
        return result

    root_name = doc.root_name
    id_attribute = _ROOT_ID_ATTRIBUTES.get(root_name)
    if id_attribute is None:
        result.is_valid = False
        result.errors.append(f"Missing Policy or PolicySet root element (found {root_name})")
    elif not doc.root.get(id_attribute):
        result.is_valid = False
        result.errors.append(f"Missing {id_attribute} attribute")

    namespace = etree.QName(doc.root).namespace
    if namespace is None:
        result.warnings.append("Missing XML namespace declaration")
    elif namespace != XACML_CORE_NS:
        result.warnings.append(f"Unexpected namespace {namespace}")

    return result


def load_policy(path: Path | str) -> str:
    """Read a policy file as UTF-8 text.

    Raises:
        PolicyExtractionError: If the file is missing or cannot be read.
    """
    policy_path = Path(path)
    try:
        return policy_path.read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyExtractionError(f"Failed to read policy file {policy_path}: {e}") from e
