from __future__ import annotations

from typing import Optional


class TensorError(Exception):
    """Base class for coretensor-specific exceptions."""


class ShapeViolationError(TensorError, ValueError):
    pass


class ShapeMismatchError(TensorError, ValueError):
    def __init__(self, message: str, *, expected=None, actual=None):
        detail = ""
        if expected is not None or actual is not None:
            detail = f" (expected {expected}, got {actual})"
        super().__init__(f"{message}{detail}")
        self.expected = expected
        self.actual = actual


class IndexOutOfRangeError(TensorError, IndexError):
    pass


class InvalidElementTypeError(TensorError, TypeError):
    pass


class StaleViewError(TensorError, RuntimeError):
    pass


class DTypeMismatchError(TensorError, TypeError):
    pass


class LiteralParseError(TensorError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        line_text: Optional[str] = None,
    ):
        self.line = line
        self.column = column
        self.line_text = line_text
        super().__init__(message + self._pointer())

    def _pointer(self) -> str:
        """Position suffix, plus the offending source line with a caret under the column."""
        if self.line is None:
            return "" if self.column is None else f" at column {self.column}"
        where = f" at {self.line}:{self.column}" if self.column is not None else f" on line {self.line}"
        if not self.line_text or not self.column or self.column < 1:
            return where
        marker = "^".rjust(self.column)
        return "\n".join((where, "    " + self.line_text, "    " + marker))
