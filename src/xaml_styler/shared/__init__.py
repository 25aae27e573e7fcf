"""Shared configuration, logging, error and result types.

This module provides the objects used across all styling layers: the immutable
configuration, the correlation-aware logger, exception types and run metrics.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    LineBreakRule,
    ReorderSettersBy,
    StylerConfig,
)
from .errors import MarkupSyntaxError, StylerError
from .logging import CorrelationLogger, get_logger
from .result import FormatMetrics, FormatResult

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "LineBreakRule",
    "ReorderSettersBy",
    "StylerConfig",
    "MarkupSyntaxError",
    "StylerError",
    "CorrelationLogger",
    "get_logger",
    "FormatMetrics",
    "FormatResult",
]
