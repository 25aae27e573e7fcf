"""Forward-only annotated node reader for serialized markup.

This module turns well-formed markup text into an ordered stream of nodes, each
annotated with its kind, name, raw value, structural depth, attributes in
document order, and source position. It is the low-level, order-preserving view
the streaming formatter walks: unlike a tree it keeps every whitespace run, the
boundaries of CDATA sections, and the XML declaration as separate nodes.

Text and attribute values are reported in their escaped (serialized) form so
that re-emitting them never changes the entity content of the document.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, List, Pattern, Tuple

from xaml_styler.shared.errors import MarkupSyntaxError

XML_WHITESPACE = " \t\r\n"

_TAG_NAME_PATTERN: Pattern[str] = re.compile(r"[^\s/>]+")
_ATTRIBUTE_PATTERN: Pattern[str] = re.compile(
    r"""([^\s=/>]+)\s*=\s*(?:"([^"]*)"|'([^']*)')"""
)
_SPACE_PATTERN: Pattern[str] = re.compile(r"\s*")


class XmlNodeType(Enum):
    """Kinds of nodes reported by the reader."""

    ELEMENT = auto()                 # Start tag, or the whole of an empty element
    END_ELEMENT = auto()             # End tag
    TEXT = auto()                    # Character content with non-whitespace
    WHITESPACE = auto()              # Whitespace-only character content
    COMMENT = auto()                 # <!-- ... -->
    CDATA = auto()                   # <![CDATA[ ... ]]>
    PROCESSING_INSTRUCTION = auto()  # <?target data?>
    XML_DECLARATION = auto()         # <?xml ...?>
    DOCUMENT_TYPE = auto()           # <!DOCTYPE ...>


@dataclass
class NodePosition:
    """Position of a node in the text being read."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class XmlNode:
    """A single node of the markup stream.

    ``depth`` follows the usual reader convention: the document element and
    top-level siblings are at depth 0, content of the document element at
    depth 1, and an end tag has the depth of its start tag.
    """

    node_type: XmlNodeType
    depth: int
    position: NodePosition
    name: str = ""
    value: str = ""
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    is_empty_element: bool = False

    @property
    def has_attributes(self) -> bool:
        """Check if this node carries attributes."""
        return len(self.attributes) > 0


class XmlNodeReader:
    """Iterate over the nodes of a markup document in document order.

    The reader expects well-formed input (it is fed the serialization of an
    already parsed tree) and raises :class:`MarkupSyntaxError` on structures it
    cannot delimit, such as an unterminated comment or an unbalanced end tag.
    """

    def __init__(self, content: str) -> None:
        self.content = content
        self._reset_state()

    def _reset_state(self) -> None:
        self._offset = 0
        self._line = 1
        self._column = 1
        self._depth = 0
        self._open_elements: List[str] = []

    def __iter__(self) -> Iterator[XmlNode]:
        self._reset_state()
        content = self.content
        length = len(content)

        while self._offset < length:
            start = self._offset
            position = NodePosition(self._line, self._column, start)

            if content.startswith("<!--", start):
                end = self._find("-->", start + 4, "comment")
                node = XmlNode(
                    XmlNodeType.COMMENT, self._depth, position,
                    value=content[start + 4:end],
                )
                next_offset = end + 3
            elif content.startswith("<![CDATA[", start):
                end = self._find("]]>", start + 9, "CDATA section")
                node = XmlNode(
                    XmlNodeType.CDATA, self._depth, position,
                    value=content[start + 9:end],
                )
                next_offset = end + 3
            elif content.startswith("<?", start):
                end = self._find("?>", start + 2, "processing instruction")
                node = self._read_processing_instruction(
                    content[start + 2:end], position
                )
                next_offset = end + 2
            elif content.startswith("<!", start):
                next_offset = self._find_doctype_end(start)
                node = XmlNode(
                    XmlNodeType.DOCUMENT_TYPE, self._depth, position,
                    name="DOCTYPE", value=content[start:next_offset],
                )
            elif content.startswith("</", start):
                end = self._find(">", start + 2, "end tag")
                node = self._read_end_tag(content[start + 2:end].strip(), position)
                next_offset = end + 1
            elif content[start] == "<":
                node, next_offset = self._read_start_tag(start, position)
            else:
                end = content.find("<", start)
                if end == -1:
                    end = length
                text = content[start:end]
                node_type = (
                    XmlNodeType.WHITESPACE
                    if not text.strip(XML_WHITESPACE)
                    else XmlNodeType.TEXT
                )
                node = XmlNode(node_type, self._depth, position, value=text)
                next_offset = end

            self._advance(next_offset)
            yield node

        if self._open_elements:
            raise MarkupSyntaxError(
                f"Unclosed element <{self._open_elements[-1]}> at end of input",
                self._line,
                self._column,
            )

    def _read_processing_instruction(
        self, inner: str, position: NodePosition
    ) -> XmlNode:
        parts = inner.split(None, 1)
        if not parts:
            raise self._error("Processing instruction without target", position)
        target = parts[0]
        data = parts[1] if len(parts) > 1 else ""
        node_type = (
            XmlNodeType.XML_DECLARATION
            if target == "xml"
            else XmlNodeType.PROCESSING_INSTRUCTION
        )
        return XmlNode(node_type, self._depth, position, name=target, value=data.strip())

    def _read_end_tag(self, name: str, position: NodePosition) -> XmlNode:
        if not self._open_elements or self._open_elements[-1] != name:
            raise self._error(f"Unexpected end tag </{name}>", position)
        self._open_elements.pop()
        self._depth -= 1
        return XmlNode(XmlNodeType.END_ELEMENT, self._depth, position, name=name)

    def _read_start_tag(
        self, start: int, position: NodePosition
    ) -> Tuple[XmlNode, int]:
        content = self.content
        name_match = _TAG_NAME_PATTERN.match(content, start + 1)
        if not name_match:
            raise self._error("Start tag without element name", position)

        attributes: List[Tuple[str, str]] = []
        offset = name_match.end()
        while True:
            offset = _SPACE_PATTERN.match(content, offset).end()
            if content.startswith("/>", offset):
                is_empty = True
                offset += 2
                break
            if content.startswith(">", offset):
                is_empty = False
                offset += 1
                break
            attribute_match = _ATTRIBUTE_PATTERN.match(content, offset)
            if not attribute_match:
                raise self._error(
                    f"Malformed attribute in start tag <{name_match.group()}>",
                    position,
                )
            attribute_name, double_quoted, single_quoted = attribute_match.groups()
            if double_quoted is not None:
                value = double_quoted
            else:
                value = single_quoted.replace('"', "&quot;")
            attributes.append((attribute_name, value))
            offset = attribute_match.end()

        name = name_match.group()
        node = XmlNode(
            XmlNodeType.ELEMENT, self._depth, position,
            name=name, attributes=attributes, is_empty_element=is_empty,
        )
        if not is_empty:
            self._open_elements.append(name)
            self._depth += 1
        return node, offset

    def _find_doctype_end(self, start: int) -> int:
        content = self.content
        close = content.find(">", start)
        subset = content.find("[", start)
        if subset != -1 and (close == -1 or subset < close):
            subset_end = self._find("]", subset, "document type subset")
            close = content.find(">", subset_end)
        if close == -1:
            raise self._error(
                "Unterminated document type declaration",
                NodePosition(self._line, self._column, start),
            )
        return close + 1

    def _find(self, terminator: str, offset: int, construct: str) -> int:
        end = self.content.find(terminator, offset)
        if end == -1:
            raise MarkupSyntaxError(
                f"Unterminated {construct}: expected {terminator!r}",
                self._line,
                self._column,
            )
        return end

    def _advance(self, offset: int) -> None:
        consumed = self.content[self._offset:offset]
        newlines = consumed.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(consumed) - consumed.rfind("\n")
        else:
            self._column += len(consumed)
        self._offset = offset

    @staticmethod
    def _error(message: str, position: NodePosition) -> MarkupSyntaxError:
        return MarkupSyntaxError(message, position.line, position.column)


def read_nodes(content: str) -> Iterator[XmlNode]:
    """Iterate over the nodes of ``content`` in document order."""
    return iter(XmlNodeReader(content))
