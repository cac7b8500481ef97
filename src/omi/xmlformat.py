"""
XML pretty-printing for metadata server responses.

Responses are parsed, stripped of whitespace-only text between elements and
re-serialized with two spaces of indentation per level. Namespace prefixes
and declarations are written back as received. No XML declaration is
written, so the output of :func:`format_xml` can be fed back in unchanged.
"""

from typing import Optional
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from .exceptions import MalformedXMLError

INDENT = "  "


def _strip_whitespace(node: minidom.Node) -> None:
    """Drop whitespace-only text nodes so indentation is rebuilt from scratch."""
    for child in list(node.childNodes):
        if child.nodeType == child.TEXT_NODE and not child.data.strip():
            node.removeChild(child)
        elif child.nodeType == child.ELEMENT_NODE:
            _strip_whitespace(child)


def format_xml(raw: Optional[str], indent: str = INDENT) -> str:
    """
    Format an XML string for display.

    Args:
        raw: Unformatted XML text
        indent: Indentation used for each nesting level

    Returns:
        str: Indented XML without a declaration line

    Raises:
        MalformedXMLError: If raw is empty or not well-formed XML
    """
    if not raw or not raw.strip():
        raise MalformedXMLError("Empty response cannot be formatted as XML")

    try:
        document = minidom.parseString(raw)
    except ExpatError as e:
        raise MalformedXMLError(f"Response is not well-formed XML: {e}") from e

    try:
        root = document.documentElement
        _strip_whitespace(root)
        return root.toprettyxml(indent=indent, newl="\n").rstrip("\n")
    finally:
        document.unlink()
