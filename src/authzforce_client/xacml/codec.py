"""XACML 3.0 request encoding and response decoding.

Encoding maps each category bag onto one <Attributes> element:

    subject      -> urn:oasis:names:tc:xacml:1.0:subject-category:access-subject
    resource(s)  -> urn:oasis:names:tc:xacml:3.0:attribute-category:resource
    action       -> urn:oasis:names:tc:xacml:3.0:attribute-category:action
    environment  -> urn:oasis:names:tc:xacml:3.0:attribute-category:environment
                    (only with include_environment=True)

Each key becomes AttributeId "urn:oasis:names:tc:xacml:1.0:<category>:<key>"
with a single xs:string value. Categories without attributes are omitted.

Decoding looks elements up by local name only, so it does not depend on the
prefixes the PDP happens to emit.
"""

from __future__ import annotations

__all__ = [
    "AccessQueryCodec",
]

from typing import Iterable, Literal

from lxml import etree

from authzforce_client.constants import (
    ATTRIBUTE_ID_PREFIXES,
    CATEGORY_ACCESS_SUBJECT,
    CATEGORY_ACTION,
    CATEGORY_ENVIRONMENT,
    CATEGORY_RESOURCE,
)
from authzforce_client.exceptions import DecodeError
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
from authzforce_client.xmltools.reader import XmlDocument, child_elements

_DECISIONS = {decision.value: decision for decision in Decision}


class AccessQueryCodec:
    """Translate AccessQuery to XACML Request XML and Response XML to DecisionResult.

    Stateless apart from its options; one instance can be shared freely.
    """

    def __init__(self, include_environment: bool = False) -> None:
        """Initialize codec.

        Args:
            include_environment: Also encode the environment bag. Off by
                default: the request carries subject, resource and action
                only.
        """
        self.include_environment = include_environment

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def build_request(self, query: AccessQuery) -> XacmlRequest:
        """Build the typed Request document for a query."""
        sections: list[tuple[str, list[AttributeBag]]] = [
            (CATEGORY_ACCESS_SUBJECT, [query.subject]),
            (CATEGORY_RESOURCE, [query.resource, *query.resources]),
            (CATEGORY_ACTION, [query.action]),
        ]
        if self.include_environment:
            sections.append((CATEGORY_ENVIRONMENT, [query.environment]))

        groups = []
        for category, bags in sections:
            attributes = tuple(_attributes(category, bags))
            if attributes:
                groups.append(AttributesGroup(category=category, attributes=attributes))

        return XacmlRequest(groups=tuple(groups))

    def encode(self, query: AccessQuery) -> str:
        """Encode a query as a XACML 3.0 Request document.

        Args:
            query: The access question.

        Returns:
            Request XML with declaration, in the XACML core namespace.
        """
        return self.build_request(query).to_xml()

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def decode(self, xml: str | bytes) -> DecisionResult:
        """Decode a XACML 3.0 Response document.

        Args:
            xml: Response body from the PDP.

        Returns:
            DecisionResult with decision, status, obligations and advice.

        Raises:
            ParseError: If the body is not well-formed XML.
            DecodeError: If there is no Decision element, or its text is
                not one of Permit, Deny, Indeterminate, NotApplicable.
        """
        doc = XmlDocument.parse(xml)

        if doc.select_one("Decision") is None:
            raise DecodeError("No Decision element found in response")
        text = doc.text("Decision")
        if text is None:
            raise DecodeError("Decision element in response is empty")
        decision = _DECISIONS.get(text)
        if decision is None:
            raise DecodeError(f"Unknown decision in response: {text!r}")

        return DecisionResult(
            decision=decision,
            status=doc.select_attribute("StatusCode", "Value"),
            obligations=tuple(_directive(el, "obligation") for el in doc.select("Obligation")),
            advice=tuple(_directive(el, "advice") for el in doc.select("Advice")),
        )


def _attributes(category: str, bags: Iterable[AttributeBag]) -> Iterable[Attribute]:
    """One Attribute per key/value pair, AttributeId prefixed for category."""
    prefix = ATTRIBUTE_ID_PREFIXES[category]
    for bag in bags:
        for name, value in bag.items():
            yield Attribute(attribute_id=f"{prefix}{name}", values=(AttributeValue(value),))


def _directive(element: etree._Element, kind: Literal["obligation", "advice"]) -> PolicyDirective:
    id_attribute = "ObligationId" if kind == "obligation" else "AdviceId"
    assignments = tuple(
        AttributeAssignment(
            attribute_id=child.get("AttributeId", ""),
            value=(child.text or "").strip(),
            category=child.get("Category"),
            data_type=child.get("DataType"),
        )
        for child in child_elements(element, "AttributeAssignment")
    )
    return PolicyDirective(
        kind=kind,
        id=element.get(id_attribute),
        assignments=assignments,
        xml=etree.tostring(element, encoding="unicode", with_tail=False),
    )
