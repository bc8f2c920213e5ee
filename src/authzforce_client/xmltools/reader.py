"""Namespace-agnostic XML queries.

AuthzForce picks its own namespace prefixes (ns2:, ns3:, ns5:, or none at
all) and they have changed between releases. Every lookup here therefore
matches on local-name() only, so the same query works whatever prefix, or
default namespace, the server chose.

Example:
    doc = XmlDocument.parse(response_text)
    href = doc.select_attribute("link", "href")
    decision = doc.text("Decision")
"""

from __future__ import annotations

__all__ = [
    "XmlDocument",
    "child_elements",
    "local_name",
]

from typing import Iterator

from lxml import etree

from authzforce_client.exceptions import ParseError

# No DTD entity expansion or network fetches for documents from the wire
_PARSER_OPTIONS = {
    "resolve_entities": False,
    "no_network": True,
    "load_dtd": False,
    "huge_tree": False,
}

_ELEMENTS = etree.XPath("//*[local-name() = $name]")
_ATTRIBUTES = etree.XPath("//*[local-name() = $element]/@*[local-name() = $attribute]")


def local_name(element: etree._Element) -> str:
    """Return an element's tag without its namespace."""
    return etree.QName(element).localname


def child_elements(element: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield direct children of element with the given local name."""
    for child in element:
        # Skips comments and processing instructions, whose tag is not a str
        if isinstance(child.tag, str) and local_name(child) == name:
            yield child


class XmlDocument:
    """A parsed XML document queried by local name.

    Instances are created with XmlDocument.parse(); the constructor wraps an
    already-parsed root element.
    """

    def __init__(self, root: etree._Element) -> None:
        self._root = root

    @classmethod
    def parse(cls, text: str | bytes) -> XmlDocument:
        """Parse XML text into a document.

        Args:
            text: XML as str or bytes. A str may carry an encoding
                declaration; it is re-encoded as UTF-8 before parsing.

        Returns:
            XmlDocument wrapping the root element.

        Raises:
            ParseError: If the text is empty or not well-formed. The
                parser's diagnostic text is preserved on the exception.
        """
        data = text.encode("utf-8") if isinstance(text, str) else text
        if not data.strip():
            raise ParseError("Document is empty")

        parser = etree.XMLParser(**_PARSER_OPTIONS)
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            diagnostic = str(e) or "\n".join(str(entry) for entry in parser.error_log)
            raise ParseError(diagnostic) from e

        # lxml returns None instead of raising for some recover-mode inputs
        if root is None:
            raise ParseError("\n".join(str(entry) for entry in parser.error_log) or "No root element")
        return cls(root)

    @property
    def root(self) -> etree._Element:
        """Root element of the document."""
        return self._root

    @property
    def root_name(self) -> str:
        """Local name of the root element."""
        return local_name(self._root)

    def select(self, name: str) -> list[etree._Element]:
        """Return all elements with the given local name, in document order."""
        return list(_ELEMENTS(self._root, name=name))

    def select_one(self, name: str) -> etree._Element | None:
        """Return the first element with the given local name, or None."""
        matches = _ELEMENTS(self._root, name=name)
        return matches[0] if matches else None

    def select_attributes(self, element: str, attribute: str) -> list[str]:
        """Return every value of attribute on elements named element."""
        return [str(value) for value in _ATTRIBUTES(self._root, element=element, attribute=attribute)]

    def select_attribute(self, element: str, attribute: str) -> str | None:
        """Return the first value of attribute on elements named element, or None."""
        values = _ATTRIBUTES(self._root, element=element, attribute=attribute)
        return str(values[0]) if values else None

    def text(self, name: str) -> str | None:
        """Return the stripped text of the first element named name.

        Returns None if there is no such element or it has no text.
        """
        element = self.select_one(name)
        if element is None or element.text is None:
            return None
        return element.text.strip() or None

    def __repr__(self) -> str:
        return f"XmlDocument(root={self.root_name!r})"
