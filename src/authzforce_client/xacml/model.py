"""Access queries and the XACML 3.0 Request document model.

AccessQuery is what callers write: short attribute names per category.

    AccessQuery(
        subject={"subject-id": "alice", "role": "admin"},
        resources=[{"resource-id": "urn:klf:ds:person"}, {"resource-id": "urn:klf:ds:field:person.name"}],
        action={"action-id": "read"},
    )

The codec turns it into the typed document model below, and only the
document model knows how to become XML:

    XacmlRequest
    └── groups: AttributesGroup (one per non-empty category)
        └── attributes: Attribute (AttributeId, IncludeInResult)
            └── values: AttributeValue (DataType, text)
"""

from __future__ import annotations

__all__ = [
    "AccessQuery",
    "Attribute",
    "AttributeBag",
    "AttributeValue",
    "AttributesGroup",
    "XacmlRequest",
]

from dataclasses import dataclass

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, field_validator

from authzforce_client.constants import XACML_CORE_NS, XS_STRING

# Short attribute name -> scalar value, one bag per category
AttributeBag = dict[str, str]


def _xacml(tag: str) -> str:
    return f"{{{XACML_CORE_NS}}}{tag}"


def _xml_bool(value: bool) -> str:
    return "true" if value else "false"


# =============================================================================
# Caller-facing query
# =============================================================================


class AccessQuery(BaseModel):
    """An access-control question as attribute bags.

    Keys are short names ("subject-id", "role"); the codec prefixes them
    into full AttributeIds. Scalar values (int, float, bool) are accepted
    and stored as their string form, since every value is sent as
    xs:string.

    Attributes:
        subject: Access-subject attributes.
        resource: Resource attributes.
        resources: Further resource bags merged into the resource category,
            for requests that name several resources at once.
        action: Action attributes.
        environment: Environment attributes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    subject: AttributeBag = Field(default_factory=dict)
    resource: AttributeBag = Field(default_factory=dict)
    resources: list[AttributeBag] = Field(default_factory=list)
    action: AttributeBag = Field(default_factory=dict)
    environment: AttributeBag = Field(default_factory=dict)

    @field_validator("subject", "resource", "action", "environment", mode="before")
    @classmethod
    def _coerce_bag(cls, value: object) -> object:
        if value is None:
            return {}
        return _stringify_bag(value)

    @field_validator("resources", mode="before")
    @classmethod
    def _coerce_bags(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [_stringify_bag(bag) for bag in value]
        return value

    @property
    def is_empty(self) -> bool:
        """True if no category carries any attribute."""
        return not (
            self.subject or self.resource or self.action or self.environment or any(self.resources)
        )


def _stringify_bag(value: object) -> object:
    """Convert scalar bag values to strings; leave anything else to validation."""
    if not isinstance(value, dict):
        return value
    result: dict[object, object] = {}
    for key, item in value.items():
        if isinstance(key, str) and not key.strip():
            raise ValueError("Attribute names must not be empty")
        if isinstance(item, bool):
            result[key] = _xml_bool(item)
        elif isinstance(item, (int, float)):
            result[key] = str(item)
        else:
            result[key] = item
    return result


# =============================================================================
# Request document model
# =============================================================================


@dataclass(frozen=True, slots=True)
class AttributeValue:
    """<AttributeValue DataType="...">value</AttributeValue>"""

    value: str
    data_type: str = XS_STRING

    def append_to(self, parent: etree._Element) -> etree._Element:
        element = etree.SubElement(parent, _xacml("AttributeValue"), DataType=self.data_type)
        element.text = self.value
        return element


@dataclass(frozen=True, slots=True)
class Attribute:
    """<Attribute AttributeId="..." IncludeInResult="..."> with its values."""

    attribute_id: str
    values: tuple[AttributeValue, ...]
    include_in_result: bool = False

    def append_to(self, parent: etree._Element) -> etree._Element:
        element = etree.SubElement(parent, _xacml("Attribute"))
        element.set("AttributeId", self.attribute_id)
        element.set("IncludeInResult", _xml_bool(self.include_in_result))
        for value in self.values:
            value.append_to(element)
        return element


@dataclass(frozen=True, slots=True)
class AttributesGroup:
    """<Attributes Category="..."> holding one category's attributes."""

    category: str
    attributes: tuple[Attribute, ...]

    def append_to(self, parent: etree._Element) -> etree._Element:
        element = etree.SubElement(parent, _xacml("Attributes"), Category=self.category)
        for attribute in self.attributes:
            attribute.append_to(element)
        return element


@dataclass(frozen=True, slots=True)
class XacmlRequest:
    """Root <Request> element."""

    groups: tuple[AttributesGroup, ...]
    return_policy_id_list: bool = False
    combined_decision: bool = False

    def to_element(self) -> etree._Element:
        root = etree.Element(_xacml("Request"), nsmap={None: XACML_CORE_NS})
        root.set("ReturnPolicyIdList", _xml_bool(self.return_policy_id_list))
        root.set("CombinedDecision", _xml_bool(self.combined_decision))
        for group in self.groups:
            group.append_to(root)
        return root

    def to_xml(self) -> str:
        """Serialize with an XML declaration, as UTF-8 text."""
        return etree.tostring(self.to_element(), xml_declaration=True, encoding="UTF-8").decode("utf-8")
