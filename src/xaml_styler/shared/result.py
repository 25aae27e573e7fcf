"""Result objects for styling runs."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FormatMetrics:
    """Counters collected during one formatting run."""

    processing_time_ms: float = 0.0
    characters_in: int = 0
    characters_out: int = 0
    elements_formatted: int = 0
    groups_reordered: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate input characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_in * 1000.0) / self.processing_time_ms

    @property
    def size_delta(self) -> int:
        """Difference in length between output and input."""
        return self.characters_out - self.characters_in


@dataclass
class FormatResult:
    """Formatted text together with the metrics of the run that produced it."""

    text: str
    metrics: FormatMetrics = field(default_factory=FormatMetrics)
    correlation_id: Optional[str] = None
