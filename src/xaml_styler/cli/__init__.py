"""Command-line interface for xaml-styler."""

from .main import create_argument_parser, main

__all__ = ["create_argument_parser", "main"]
