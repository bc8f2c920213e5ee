"""AuthzForce REST API administration documents.

Request bodies are built as elements and serialized, so ids taken from
callers are always escaped. Response lookups go through XmlDocument and
match on local name only.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_DOMAIN_DESCRIPTION",
    "domain_properties_xml",
    "link_hrefs",
    "pdp_properties_update_xml",
    "trailing_segment",
]

from lxml import etree

from authzforce_client.constants import AUTHZ_NS
from authzforce_client.exceptions import ProtocolViolation
from authzforce_client.xmltools.reader import XmlDocument

DEFAULT_DOMAIN_DESCRIPTION = "Test domain for XACML policy evaluation"


def _authz(tag: str) -> str:
    return f"{{{AUTHZ_NS}}}{tag}"


def _serialize(root: etree._Element) -> str:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8").decode("utf-8")


def domain_properties_xml(
    external_id: str | None = None,
    description: str = DEFAULT_DOMAIN_DESCRIPTION,
) -> str:
    """Build the <domainProperties> body for domain creation.

    Args:
        external_id: Caller-chosen id stored as the externalId attribute.
        description: Free-text description.
    """
    root = etree.Element(_authz("domainProperties"), nsmap={None: AUTHZ_NS})
    if external_id:
        root.set("externalId", external_id)
    etree.SubElement(root, _authz("description")).text = description
    return _serialize(root)


def pdp_properties_update_xml(policy_id: str) -> str:
    """Build the <pdpPropertiesUpdate> body naming policy_id as root policy."""
    root = etree.Element(_authz("pdpPropertiesUpdate"), nsmap={None: AUTHZ_NS})
    etree.SubElement(root, _authz("rootPolicyRefExpression")).text = policy_id
    return _serialize(root)


def link_hrefs(doc: XmlDocument) -> list[str]:
    """Return the href of every link element, in document order."""
    return [href for href in doc.select_attributes("link", "href") if href]


def trailing_segment(href: str, what: str) -> str:
    """Return the last path segment of a link href.

    AuthzForce answers creation calls with a link to the new resource, e.g.
    "MinimalTestPolicySet/1.0" for a policy upload; the trailing segment is
    the new id or version.

    Args:
        href: Link target.
        what: Name of the value being extracted, for the error message.

    Raises:
        ProtocolViolation: If the href has no non-empty trailing segment.
    """
    segment = href.split("/")[-1]
    if not segment:
        raise ProtocolViolation(f"Could not extract {what} from link href {href!r}")
    return segment
