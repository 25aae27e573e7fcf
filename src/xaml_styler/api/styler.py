"""Styling API with progressive disclosure.

Module-level functions cover the common case of formatting a string or a file
with a given configuration; :class:`StylerService` holds a configuration and
its derived rule objects for repeated use and reports run metrics.
"""

import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from xaml_styler.character import EntityEscaper
from xaml_styler.formatting import AttributeOrderRules, StreamingFormatter
from xaml_styler.shared import (
    FormatMetrics,
    FormatResult,
    StylerConfig,
    StylerError,
    get_logger,
)
from xaml_styler.tree import NodeReorderEngine, build_reorder_rules, parse_document

MS_PER_SECOND = 1000


class StylerService:
    """Configured formatter for XAML documents.

    The service validates its configuration and derives the attribute order
    table once. Every call to :meth:`format` builds fresh reorder rules and a
    fresh streaming formatter, so no frame stack or rule state leaks from one
    run into the next.

    Examples:
        >>> service = StylerService(StylerConfig(newline="\\n"))
        >>> service.format('<Grid><Button Content="OK"></Button></Grid>')
        '<Grid>\\n    <Button Content="OK" />\\n</Grid>'
    """

    def __init__(
        self,
        config: Optional[StylerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the service.

        Args:
            config: Styling configuration (defaults to ``StylerConfig()``)
            correlation_id: Optional correlation ID for log records

        Raises:
            ConfigValidationError: If the configuration names an unsupported option
        """
        self.config = config or StylerConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "styler_service")

        self._escaper = EntityEscaper()
        self._order_rules = AttributeOrderRules(self.config)
        # Fails fast on unsupported reorder options
        build_reorder_rules(self.config)

        self._format_count = 0
        self._total_processing_time = 0.0

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counters accumulated over the lifetime of this service."""
        return {
            "format_count": self._format_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._format_count
                if self._format_count else 0.0
            ),
        }

    def format(self, source: str) -> str:
        """Format ``source`` and return the formatted text.

        Raises:
            MarkupSyntaxError: If ``source`` is not well-formed
        """
        return self.format_with_result(source).text

    def format_with_result(self, source: str) -> FormatResult:
        """Format ``source`` and return the text together with run metrics.

        Raises:
            MarkupSyntaxError: If ``source`` is not well-formed
        """
        start_time = time.perf_counter()
        self.logger.info(
            "Starting formatting run",
            extra={"content_length": len(source)},
        )

        try:
            document = parse_document(self._escaper.escape(source))

            reorder_engine = NodeReorderEngine(
                build_reorder_rules(self.config), self.correlation_id
            )
            groups_reordered = reorder_engine.apply(document.root)

            formatter = StreamingFormatter(
                self.config, self._order_rules, self.correlation_id
            )
            text = self._escaper.unescape(formatter.format(document.serialize()))
        except StylerError:
            self.logger.exception(
                "Formatting run failed",
                extra={"processing_time_ms": self._elapsed_ms(start_time)},
            )
            raise

        metrics = FormatMetrics(
            processing_time_ms=self._elapsed_ms(start_time),
            characters_in=len(source),
            characters_out=len(text),
            elements_formatted=formatter.elements_formatted,
            groups_reordered=groups_reordered,
        )
        self._format_count += 1
        self._total_processing_time += metrics.processing_time_ms

        self.logger.info(
            "Formatting run completed",
            extra={
                "processing_time_ms": metrics.processing_time_ms,
                "output_length": metrics.characters_out,
                "elements_formatted": metrics.elements_formatted,
                "groups_reordered": metrics.groups_reordered,
            },
        )
        return FormatResult(text=text, metrics=metrics, correlation_id=self.correlation_id)

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return (time.perf_counter() - start_time) * MS_PER_SECOND


def format_string(
    source: str,
    config: Optional[StylerConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Format XAML markup held in a string.

    Examples:
        >>> format_string('<Grid />', StylerConfig(newline="\\n"))
        '<Grid />'
    """
    return StylerService(config, correlation_id).format(source)


def format_file(
    file_path: Union[str, Path],
    config: Optional[StylerConfig] = None,
    encoding: str = "utf-8",
    correlation_id: Optional[str] = None
) -> str:
    """Read a XAML file and return its formatted content.

    The file itself is left untouched.
    """
    path = Path(file_path)
    logger = get_logger(__name__, correlation_id, "format_file")
    logger.debug("Reading file", extra={"file": str(path)})
    with path.open("r", encoding=encoding, newline="") as handle:
        source = handle.read()
    return format_string(source, config, correlation_id)
