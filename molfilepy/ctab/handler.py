"""
Shared machinery for the block handlers.

A record is decoded by several block handlers reading from one LineReader.
Recoverable problems go through an ErrorReporter, which applies the error
policy of the reader options: STRICT raises, RELAXED warns and continues.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from ..exceptions import FormatError, MolfileWarning, ParseError, StreamError
from ..options import ReaderOptions
from . import fields


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem reported while reading a record.

    Attributes:
        message: Description of the problem.
        line_number: 1-based line number within the record, if known.
        column_start: First column of the offending field.
        column_end: Column after the offending field.
    """

    message: str
    line_number: int | None = None
    column_start: int = 0
    column_end: int = 0

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"{self.message} (line {self.line_number})"


ErrorHandler = Callable[[Diagnostic], None]


class ErrorReporter:
    """Applies the reader's error policy and collects diagnostics.

    Args:
        options: Reader options; only ``mode`` is consulted.
        error_handler: Optional callable receiving every diagnostic.
    """

    def __init__(
        self,
        options: ReaderOptions,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.options = options
        self.error_handler = error_handler
        self.diagnostics: list[Diagnostic] = []

    def clear(self) -> None:
        """Forget the diagnostics of the previous record."""
        self.diagnostics = []

    def report(
        self,
        message: str,
        line_number: int | None = None,
        column_start: int = 0,
        column_end: int = 0,
    ) -> Diagnostic:
        """Record a diagnostic and pass it to the error handler."""
        diagnostic = Diagnostic(message, line_number, column_start, column_end)
        self.diagnostics.append(diagnostic)
        if self.error_handler is not None:
            self.error_handler(diagnostic)
        return diagnostic

    def handle_error(
        self,
        message: str,
        line_number: int | None = None,
        column_start: int = 0,
        column_end: int = 0,
        *,
        line: str | None = None,
        error: type[ParseError] = FormatError,
    ) -> None:
        """Report a recoverable problem.

        Args:
            message: Description of the problem.
            line_number: 1-based line number within the record.
            column_start: First column of the offending field.
            column_end: Column after the offending field.
            line: The offending line, included in a raised error.
            error: Exception class raised in strict mode.

        Raises:
            ParseError: In strict mode (an instance of ``error``).
        """
        diagnostic = self.report(message, line_number, column_start, column_end)
        if self.options.strict:
            column = column_start if line is not None and column_end > column_start else None
            raise error(message, line=line, line_number=line_number, column=column)
        warnings.warn(str(diagnostic), MolfileWarning, stacklevel=4)

    def warn(
        self,
        message: str,
        category: type[Warning] = MolfileWarning,
        line_number: int | None = None,
    ) -> None:
        """Report a problem that is tolerated in every mode."""
        diagnostic = self.report(message, line_number)
        warnings.warn(str(diagnostic), category, stacklevel=4)


class LineReader:
    """Line source for the block handlers.

    Line terminators are stripped. The line number counts lines read so far.

    Args:
        lines: Iterable of lines (a text file, a list, ...).
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0

    def readline(self) -> str | None:
        """Read the next line, or None at the end of the input.

        Raises:
            StreamError: If the underlying source fails.
        """
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        except OSError as e:
            raise StreamError(f"Error reading input: {e}") from e
        self.line_number += 1
        return line.rstrip("\r\n")

    def require(self, what: str) -> str:
        """Read a line that must be present.

        Raises:
            StreamError: If the input ends first.
        """
        line = self.readline()
        if line is None:
            raise StreamError(f"Unexpected end of input, expected {what}")
        return line


class BlockHandler:
    """Base class for the block handlers of a V2000 molfile."""

    def __init__(self, reporter: ErrorReporter) -> None:
        self.reporter = reporter

    @property
    def options(self) -> ReaderOptions:
        return self.reporter.options

    @property
    def strict(self) -> bool:
        return self.reporter.options.strict

    def handle_error(self, *args, **kwargs) -> None:
        """See ErrorReporter.handle_error."""
        self.reporter.handle_error(*args, **kwargs)

    def read_coordinate(self, line: str, offset: int, line_number: int | None = None) -> float:
        """Read a coordinate field, reporting a misplaced decimal point."""
        if not fields.has_fixed_point(line, offset):
            self.handle_error(
                f"Bad coordinate format specified, expected 4 decimal places: {line[offset:]}",
                line_number,
                offset,
                offset + 10,
                line=line,
            )
        return fields.read_coordinate(line, offset)
