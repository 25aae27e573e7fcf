"""Streaming re-serialization of markup.

The formatter walks a document as a forward-only node stream and rebuilds its
text. One :class:`ElementFrame` per open element records what kind of content
the element has shown so far; when the element closes, that record decides
whether it collapses to a self-closing tag, keeps short text inline between
its tags, or gets a closing tag on its own line.

Indentation is always computed from the depth the reader reports, never
accumulated, so it stays consistent with nesting whatever was decided for
earlier elements.
"""

import re
from dataclasses import dataclass
from enum import Flag
from typing import List, Optional, Pattern

from xaml_styler.shared.config import StylerConfig
from xaml_styler.shared.logging import get_logger
from xaml_styler.tokenization import XmlNode, XmlNodeType, read_nodes

from .attributes import AttributeOrderRules
from .layout import AttributeLayoutEngine

_LINE_SPLIT_PATTERN: Pattern[str] = re.compile(r"\r?\n")
_TRAILING_WHITESPACE = " \t\r\n"


class ContentType(Flag):
    """Kinds of content observed inside an element. Flags accumulate."""

    NONE = 0
    SINGLE_LINE_TEXT_ONLY = 1
    MULTI_LINE_TEXT_ONLY = 2
    MIXED = 4


@dataclass
class ElementFrame:
    """Formatting state of one open element."""

    name: str = ""
    content_type: ContentType = ContentType.NONE
    is_multiline_start_tag: bool = False
    is_self_closing: bool = False

    def upgrade(self, content_type: ContentType) -> None:
        """Add ``content_type`` to the content seen so far."""
        self.content_type |= content_type


class OutputBuffer:
    """Append-mostly text buffer supporting edits at its tail.

    Closing an element may rewrite the text written since its start tag, so
    the buffer keeps chunks and only touches the chunks after the last
    occurrence of the character being searched for.
    """

    def __init__(self) -> None:
        self._parts: List[str] = []

    def append(self, text: str) -> None:
        if text:
            self._parts.append(text)

    def is_empty(self) -> bool:
        return not self._parts

    def last_char(self) -> str:
        return self._parts[-1][-1] if self._parts else ""

    def ends_with_newline(self) -> bool:
        char = self.last_char()
        return char != "" and char in "\r\n"

    def is_at_line_start(self) -> bool:
        return self.is_empty() or self.ends_with_newline()

    def rstrip(self, chars: str) -> None:
        """Remove trailing ``chars`` from the buffer."""
        while self._parts:
            part = self._parts.pop().rstrip(chars)
            if part:
                self._parts.append(part)
                return

    def pop_from_last(self, char: str) -> str:
        """Remove and return the text from the last ``char`` to the end."""
        collected: List[str] = []
        while self._parts:
            part = self._parts.pop()
            index = part.rfind(char)
            if index == -1:
                collected.append(part)
                continue
            if index > 0:
                self._parts.append(part[:index])
            collected.append(part[index:])
            break
        return "".join(reversed(collected))

    def getvalue(self) -> str:
        return "".join(self._parts)


class StreamingFormatter:
    """Rebuilds markup text node by node with a stack of element frames.

    An instance owns its frame stack for the duration of :meth:`format` and
    resets it at the start of every call.
    """

    def __init__(
        self,
        config: StylerConfig,
        order_rules: Optional[AttributeOrderRules] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config
        self.layout_engine = AttributeLayoutEngine(config, order_rules)
        self.logger = get_logger(__name__, correlation_id, "streaming_formatter")
        self._inline_elements = frozenset(config.inline_element_names)
        self._reset_state()

    def _reset_state(self) -> None:
        # Sentinel frame standing for the document itself
        self._stack: List[ElementFrame] = [ElementFrame()]
        self._output = OutputBuffer()
        self.elements_formatted = 0

    @property
    def depth(self) -> int:
        """Number of frames on the stack, sentinel included."""
        return len(self._stack)

    def format(self, markup: str) -> str:
        """Format serialized, well-formed ``markup``."""
        self._reset_state()
        for node in read_nodes(markup):
            self._process_node(node)
        return self._output.getvalue()

    def _process_node(self, node: XmlNode) -> None:
        if node.node_type == XmlNodeType.ELEMENT:
            self._process_element(node)
        elif node.node_type == XmlNodeType.TEXT:
            self._process_text(node)
        elif node.node_type == XmlNodeType.WHITESPACE:
            self._process_whitespace(node)
        elif node.node_type == XmlNodeType.COMMENT:
            self._process_comment(node)
        elif node.node_type == XmlNodeType.CDATA:
            self._process_cdata(node)
        elif node.node_type == XmlNodeType.PROCESSING_INSTRUCTION:
            self._process_instruction(node)
        elif node.node_type == XmlNodeType.END_ELEMENT:
            self._process_end_element(node)
        elif node.node_type == XmlNodeType.XML_DECLARATION:
            self._process_xml_declaration(node)
        elif node.node_type == XmlNodeType.DOCUMENT_TYPE:
            self._process_document_type(node)
        else:
            self.logger.debug(
                "Unprocessed node",
                extra={"node_type": node.node_type.name, "node_name": node.name},
            )

    def _update_parent(self, content_type: ContentType) -> None:
        self._stack[-1].upgrade(content_type)

    def _start_line(self) -> None:
        if not self._output.is_at_line_start():
            self._output.append(self.config.newline)

    def _process_element(self, node: XmlNode) -> None:
        self._update_parent(ContentType.MIXED)
        frame = ElementFrame(name=node.name)
        self._stack.append(frame)
        self._write_start_tag(node, frame)
        self.elements_formatted += 1
        if frame.is_self_closing:
            self._stack.pop()

    def _write_start_tag(self, node: XmlNode, frame: ElementFrame) -> None:
        config = self.config
        output = self._output
        indent = config.indent(node.depth)

        if node.name in self._inline_elements:
            # No line break before inline elements: it would add rendered whitespace
            if output.ends_with_newline():
                output.append(indent)
        else:
            self._start_line()
            output.append(indent)
        output.append("<" + node.name)

        has_bracket_on_new_line = False
        if node.has_attributes:
            # Sentinel plus this element: the document root
            is_root = len(self._stack) == 2
            layout = self.layout_engine.layout(
                node.attributes, node.name, node.depth, is_root=is_root
            )
            output.append(layout.render(config.newline))
            frame.is_multiline_start_tag = layout.is_multiline

            if config.put_ending_bracket_on_new_line and layout.is_multiline:
                output.append(config.newline + layout.indent)
                has_bracket_on_new_line = True

        if node.is_empty_element:
            if not has_bracket_on_new_line and config.space_before_closing_slash:
                output.append(" ")
            output.append("/>")
            frame.is_self_closing = True
        else:
            output.append(">")

    def _process_text(self, node: XmlNode) -> None:
        self._update_parent(ContentType.SINGLE_LINE_TEXT_ONLY)
        indent = self.config.indent(node.depth)
        lines = [
            line.strip()
            for line in node.value.replace("\r", "").strip().split("\n")
            if line.strip()
        ]
        for line in lines:
            self._output.append(self.config.newline + indent + line)
        if len(lines) > 1:
            self._update_parent(ContentType.MULTI_LINE_TEXT_ONLY)

    def _process_whitespace(self, node: XmlNode) -> None:
        value = node.value
        if "\n" in value:
            # A pure line break: keep the line feeds, drop the indentation
            line_feeds = value.count("\n")
            self._output.append(self.config.newline * line_feeds)
        else:
            # Whitespace between inline elements is rendered; keep it as is
            self._output.append(value)

    def _process_comment(self, node: XmlNode) -> None:
        self._update_parent(ContentType.MIXED)
        config = self.config
        indent = config.indent(node.depth)
        content = node.value
        self._start_line()

        if "<" in content and ">" in content:
            # Commented-out markup keeps its own layout
            self._output.append(indent + "<!--")
            if "\n" in content:
                lines = _LINE_SPLIT_PATTERN.split(content)
                self._output.append(
                    config.newline.join(line.rstrip(" \t") for line in lines)
                )
                if content.rstrip(" \t").endswith("\n"):
                    self._output.append(indent)
            else:
                self._output.append(content)
            self._output.append("-->")
        elif "\n" in content:
            content_indent = config.indent(node.depth + 1)
            self._output.append(indent + "<!--")
            for line in _LINE_SPLIT_PATTERN.split(content.strip()):
                line = line.strip()
                self._output.append(config.newline + (content_indent + line if line else ""))
            self._output.append(config.newline + indent + "-->")
        else:
            self._output.append(indent + "<!--  " + content.strip() + "  -->")

    def _process_cdata(self, node: XmlNode) -> None:
        self._update_parent(ContentType.SINGLE_LINE_TEXT_ONLY)
        self._output.append("<![CDATA[" + node.value + "]]>")

    def _process_instruction(self, node: XmlNode) -> None:
        self._update_parent(ContentType.MIXED)
        self._start_line()
        data = " " + node.value if node.value else ""
        self._output.append(self.config.indent(node.depth) + "<?" + node.name + data + " ?>")

    def _process_xml_declaration(self, node: XmlNode) -> None:
        self._output.append("<?xml " + node.value.strip() + " ?>")

    def _process_document_type(self, node: XmlNode) -> None:
        self._start_line()
        self._output.append(node.value)

    def _process_end_element(self, node: XmlNode) -> None:
        frame = self._stack[-1]
        config = self.config
        output = self._output

        if frame.content_type == ContentType.NONE and config.remove_ending_tag_of_empty_element:
            # <Element>  </Element> => <Element />
            output.rstrip(_TRAILING_WHITESPACE)
            output.pop_from_last(">")
            if output.last_char() not in (" ", "\t") and config.space_before_closing_slash:
                output.append(" ")
            output.append("/>")
        elif (
            frame.content_type == ContentType.SINGLE_LINE_TEXT_ONLY
            and not frame.is_multiline_start_tag
        ):
            # <Element>\n    text\n</Element> => <Element>text</Element>
            text = output.pop_from_last(">")[1:].strip()
            output.append(">" + text + "</" + node.name + ">")
        else:
            self._start_line()
            output.append(config.indent(node.depth) + "</" + node.name + ">")

        self._stack.pop()
