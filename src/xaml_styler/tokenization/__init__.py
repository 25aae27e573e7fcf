"""Tokenization layer: forward-only node stream over serialized markup."""

from .reader import NodePosition, XmlNode, XmlNodeReader, XmlNodeType, read_nodes

__all__ = [
    "NodePosition",
    "XmlNode",
    "XmlNodeReader",
    "XmlNodeType",
    "read_nodes",
]
