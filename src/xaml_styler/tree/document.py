"""Parsing markup into a mutable element tree and serializing it back.

The tree keeps whitespace, comments, processing instructions and CDATA
sections so that the serialization handed to the streaming formatter still
carries every layout-significant detail of the input.
"""

import re
from dataclasses import dataclass
from typing import Pattern

from lxml import etree

from xaml_styler.shared.errors import MarkupSyntaxError
from xaml_styler.tokenization import XmlNodeType, read_nodes

_XML_DECLARATION_PATTERN: Pattern[str] = re.compile(r"^\s*(<\?xml\s.*?\?>)", re.DOTALL)


def _create_parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_blank_text=False,
        remove_comments=False,
        remove_pis=False,
        strip_cdata=False,
        resolve_entities=False,
        no_network=True,
    )


@dataclass
class MarkupDocument:
    """A parsed document and the XML declaration that preceded it.

    lxml cannot parse a ``str`` that carries an encoding declaration, and
    re-encoding the text would make such a declaration lie, so the
    declaration is split off before parsing and re-attached verbatim on
    serialization.
    """

    tree: etree._ElementTree
    declaration: str = ""

    @property
    def root(self) -> etree._Element:
        """The document element."""
        return self.tree.getroot()

    def serialize(self) -> str:
        """Serialize the document, including doctype and top-level siblings."""
        return self.declaration + etree.tostring(self.tree, encoding="unicode")


def parse_document(text: str) -> MarkupDocument:
    """Parse ``text`` into a :class:`MarkupDocument`.

    Raises:
        MarkupSyntaxError: If the text is empty or not well-formed
    """
    if not text.strip():
        raise MarkupSyntaxError("Document is empty", 1, 1)

    declaration = ""
    body = text
    match = _XML_DECLARATION_PATTERN.match(text)
    if match:
        declaration = match.group(1)
        # Blank the declaration out so error positions still refer to the input
        body = re.sub(r"[^\n]", " ", text[:match.end()]) + text[match.end():]

    try:
        root = etree.fromstring(body.encode("utf-8"), _create_parser())
    except etree.XMLSyntaxError as e:
        raise MarkupSyntaxError(
            f"Malformed markup: {e.msg}", e.lineno, e.offset
        ) from e

    _keep_explicit_end_tags(root, body)
    return MarkupDocument(tree=root.getroottree(), declaration=declaration)


def _keep_explicit_end_tags(root: etree._Element, text: str) -> None:
    # lxml writes <X></X> as <X/>; an empty text node keeps the end tag
    start_tags = (
        node for node in read_nodes(text) if node.node_type == XmlNodeType.ELEMENT
    )
    for element, node in zip(root.iter(etree.Element), start_tags):
        if not node.is_empty_element and len(element) == 0 and element.text is None:
            element.text = ""


def is_element(node: etree._Element) -> bool:
    """Check whether an lxml node is an element (not a comment, PI or entity)."""
    return isinstance(node.tag, str)
