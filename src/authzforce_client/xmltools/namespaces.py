"""Namespace normalization for authored XACML policies.

The policy authoring tool writes every element with an auxiliary prefix:

    <xacml3:PolicySet xmlns:xacml3="urn:...:wd-17" PolicySetId="ps">
      <xacml3:Target/>
    </xacml3:PolicySet>

AuthzForce accepts that, but reads and diffs better with the XACML core
namespace as the default one:

    <PolicySet xmlns="urn:oasis:names:tc:xacml:3.0:core:schema:wd-17" PolicySetId="ps"> <Target/> </PolicySet>

The rewrite is textual. Whitespace inside tags and whitespace-only runs
between tags collapse to single spaces; attribute values and text content
are left untouched. Run format_xml() afterwards for a readable layout.
"""

from __future__ import annotations

__all__ = [
    "normalize_namespace",
]

import re

from authzforce_client.constants import AUTHORING_NS_PREFIX, XACML_CORE_NS

# CDATA sections, tags (quote-aware, so '>' inside attribute values does not end a tag) or text runs
_TOKEN = re.compile(r"""<!\[CDATA\[.*?\]\]>|<(?:!--.*?--|[^<>"']*(?:(?:"[^"]*"|'[^']*')[^<>"']*)*)>|[^<]+""", re.DOTALL)
_QUOTED_OR_SPACE = re.compile(r"""("[^"]*"|'[^']*')|\s+""")
_SPACE_BEFORE_END = re.compile(r"\s+(/?>)$")
_ROOT_NAMES = ("PolicySet", "Policy")
_DEFAULT_NS = re.compile(r"""\sxmlns\s*=\s*("[^"]*"|'[^']*')""")


def _collapse_tag(tag: str) -> str:
    """Collapse whitespace runs in a tag outside quoted attribute values."""
    if tag.startswith(("<!--", "<![CDATA[", "<?")):
        return tag
    collapsed = _QUOTED_OR_SPACE.sub(lambda m: m.group(1) or " ", tag)
    return _SPACE_BEFORE_END.sub(r"\1", collapsed)


def _install_default_namespace(tag: str, namespace: str) -> str:
    """Make namespace the default namespace of the given start tag."""
    declaration = f' xmlns="{namespace}"'
    if _DEFAULT_NS.search(tag):
        return _DEFAULT_NS.sub(declaration, tag, count=1)
    match = re.match(r"<[\w.\-]+", tag)
    assert match is not None  # Caller only passes named start tags
    return tag[: match.end()] + declaration + tag[match.end() :]


def normalize_namespace(
    xml: str,
    prefix: str = AUTHORING_NS_PREFIX,
    namespace: str = XACML_CORE_NS,
) -> str:
    """Replace an element-name prefix with a default namespace.

    Steps:
    1. Remove the xmlns:<prefix>="..." declaration
    2. Strip <prefix>: from every start and end tag name
    3. Declare namespace as default on the root PolicySet/Policy element
    4. Collapse whitespace inside tags and between tags

    Documents without the prefix pass through steps 1-2 unchanged, so
    normalizing twice gives the same result as normalizing once.

    Args:
        xml: Authored policy or policy set XML.
        prefix: Namespace prefix to strip (default: xacml3).
        namespace: Namespace URI to install as default.

    Returns:
        Rewritten XML.
    """
    p = re.escape(prefix)
    rewritten = re.sub(rf"""\s+xmlns:{p}\s*=\s*("[^"]*"|'[^']*')""", "", xml)
    rewritten = re.sub(rf"<(/?){p}:", r"<\1", rewritten)

    parts: list[str] = []
    root_seen = False
    for token in _TOKEN.findall(rewritten):
        if not token.startswith("<"):
            # Text content is preserved; whitespace-only runs collapse
            parts.append(" " if not token.strip() else token)
            continue

        tag = _collapse_tag(token)
        is_start_tag = not tag.startswith(("</", "<!", "<?"))
        if is_start_tag and not root_seen:
            root_seen = True
            name = re.match(r"<([\w.\-]+)", tag)
            if name is not None and name.group(1) in _ROOT_NAMES:
                tag = _install_default_namespace(tag, namespace)
        parts.append(tag)

    return "".join(parts)
