"""XML pretty-printing without a parser.

format_xml() walks a flat XML string tag by tag in a single pass and emits
one tag per line, indented by nesting depth. Elements whose only content is
text stay on one line:

    <Result><Decision>Permit</Decision></Result>

becomes

    <Result>
      <Decision>Permit</Decision>
    </Result>

minify_xml() removes the whitespace format_xml() inserts, so
format_xml(minify_xml(format_xml(x))) == format_xml(x).
"""

from __future__ import annotations

__all__ = [
    "format_xml",
    "minify_xml",
]

import re

_TAG_NAME = re.compile(r"^<([\w:.\-]+)")
_BETWEEN_TAGS = re.compile(r">\s+<")


def _find_tag_end(xml: str, start: int) -> int:
    """Return the index of the '>' closing the tag at start, or -1.

    Comments, CDATA and processing instructions end at their own terminator.
    For regular tags, '>' inside quoted attribute values is skipped.
    """
    if xml.startswith("<!--", start):
        end = xml.find("-->", start + 4)
        return -1 if end == -1 else end + 2
    if xml.startswith("<![CDATA[", start):
        end = xml.find("]]>", start + 9)
        return -1 if end == -1 else end + 2
    if xml.startswith("<?", start):
        end = xml.find("?>", start + 2)
        return -1 if end == -1 else end + 1

    quote: str | None = None
    for i in range(start + 1, len(xml)):
        ch = xml[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch == ">":
            return i
    return -1


def format_xml(xml: str, indent: int = 2) -> str:
    """Indent an XML string, keeping text-only elements inline.

    Rules per tag:
    - declaration, comment, CDATA, DOCTYPE: emitted without changing depth
    - closing tag: depth decremented, then emitted
    - self-closing tag: emitted at current depth
    - opening tag whose content up to its closing tag is non-blank text with
      no '<': emitted together with text and closing tag on one line
    - any other opening tag: emitted, then depth incremented

    Non-blank text between tags (mixed content) is kept on its own line.

    Args:
        xml: XML document or fragment.
        indent: Spaces per nesting level.

    Returns:
        Formatted XML, lines joined with '\\n', no trailing newline.

    Raises:
        ValueError: If a tag is never closed with '>' or has no name.
    """
    pad = " " * indent
    lines: list[str] = []
    depth = 0
    pos = 0

    while pos < len(xml):
        start = xml.find("<", pos)
        if start == -1:
            break

        text = xml[pos:start].strip()
        if text:
            lines.append(pad * depth + text)

        end = _find_tag_end(xml, start)
        if end == -1:
            raise ValueError(f"Unterminated tag at offset {start}")
        tag = xml[start : end + 1]

        if tag.startswith("<?"):
            lines.append(tag)
        elif tag.startswith("<!"):
            lines.append(pad * depth + tag)
        elif tag.startswith("</"):
            depth = max(depth - 1, 0)
            lines.append(pad * depth + tag)
        elif tag.endswith("/>"):
            lines.append(pad * depth + tag)
        else:
            match = _TAG_NAME.match(tag)
            if match is None:
                raise ValueError(f"Failed to extract tag name from {tag!r}")
            closing = f"</{match.group(1)}>"
            close_start = xml.find(closing, end + 1)
            if close_start != -1:
                inner = xml[end + 1 : close_start]
                if "<" not in inner and inner.strip():
                    lines.append(pad * depth + tag + inner + closing)
                    pos = close_start + len(closing)
                    continue
            lines.append(pad * depth + tag)
            depth += 1

        pos = end + 1

    return "\n".join(lines)


def minify_xml(xml: str) -> str:
    """Remove whitespace between tags, leaving text content untouched."""
    return _BETWEEN_TAGS.sub("><", xml).strip()
