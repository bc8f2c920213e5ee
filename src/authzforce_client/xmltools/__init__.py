"""Minimal XML handling: formatting, namespace rewriting, local-name queries.

Structure:
    formatter.py   - format_xml / minify_xml (single-pass, no parser)
    namespaces.py  - normalize_namespace for authored policies
    reader.py      - XmlDocument, lxml-backed namespace-agnostic lookups
"""

from authzforce_client.xmltools.formatter import format_xml, minify_xml
from authzforce_client.xmltools.namespaces import normalize_namespace
from authzforce_client.xmltools.reader import XmlDocument, child_elements, local_name

__all__ = [
    "XmlDocument",
    "child_elements",
    "format_xml",
    "local_name",
    "minify_xml",
    "normalize_namespace",
]
