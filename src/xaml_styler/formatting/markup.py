"""Markup extension parsing and multi-line expansion.

A markup extension is an attribute value of the form
``{TypeName arg, Key=Value, Other={Nested a, b}}``. For layout purposes it is
split into its type name and its top-level arguments; nested extensions and
quoted strings are kept intact inside the argument that contains them.
"""

from dataclasses import dataclass, field
from typing import List

# Extensions with fewer arguments than this always stay on one line
MIN_ARGUMENTS_TO_EXPAND = 2


@dataclass
class MarkupExtensionInfo:
    """Type name and top-level arguments of a markup extension."""

    type_name: str
    arguments: List[str] = field(default_factory=list)

    @property
    def is_expandable(self) -> bool:
        """True when the extension has enough arguments to span lines."""
        return len(self.arguments) >= MIN_ARGUMENTS_TO_EXPAND


def split_arguments(text: str) -> List[str]:
    """Split ``text`` on commas outside braces and quotes.

    Returns the stripped, non-empty pieces.
    """
    arguments: List[str] = []
    current: List[str] = []
    depth = 0
    quote = ""

    for char in text:
        if quote:
            if char == quote:
                quote = ""
        elif char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            arguments.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    arguments.append("".join(current).strip())
    return [argument for argument in arguments if argument]


def parse_markup_extension(value: str) -> MarkupExtensionInfo:
    """Parse a ``{TypeName ...}`` value into a :class:`MarkupExtensionInfo`."""
    inner = value.strip()
    if inner.startswith("{") and inner.endswith("}"):
        inner = inner[1:-1]
    inner = inner.strip()

    type_end = 0
    while type_end < len(inner) and not inner[type_end].isspace() and inner[type_end] not in ",{}":
        type_end += 1

    return MarkupExtensionInfo(
        type_name=inner[:type_end],
        arguments=split_arguments(inner[type_end:]),
    )


def format_markup_extension(
    info: MarkupExtensionInfo,
    argument_indent: str,
    newline: str,
) -> str:
    """Lay an extension out with one argument per line.

    The first argument follows the type name; every further argument starts
    a new line at ``argument_indent``, which callers compute so arguments
    line up under the first one.
    """
    first, *rest = info.arguments
    lines = [f"{{{info.type_name} {first}"]
    lines.extend(f"{argument_indent}{argument}" for argument in rest)
    return ("," + newline).join(lines) + "}"
