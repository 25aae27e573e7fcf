"""Exception types raised by the styling engine.

Only two things can fail during a run: parsing the input markup and validating
the configuration. Everything downstream is a total function over a parsed
document.
"""

from typing import Optional


class StylerError(Exception):
    """Base exception for styling failures."""


class MarkupSyntaxError(StylerError):
    """Raised when the input markup is not well-formed.

    Attributes:
        line: 1-based line of the error in the input, if known
        column: 1-based column of the error in the input, if known
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None:
            return f"{message} (line {self.line}, column {self.column})"
        return message
