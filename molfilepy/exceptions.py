"""
Custom exceptions and warnings for molfilepy.

This module defines a hierarchy of exceptions for handling errors raised
while decoding MDL molfiles and SD files, and the warning categories used to
report problems that were tolerated in relaxed mode.
"""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for all chemistry-related errors."""

    pass


class ParseError(ChemError):
    """Error while decoding a line of a molfile.

    Attributes:
        message: Description of what went wrong.
        line: The offending input line, if known.
        line_number: 1-based line number within the record, if known.
        column: 0-based column where the problem starts, if known.
    """

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.line_number = line_number
        self.column = column

        parts = [message]
        if line_number is not None:
            parts.append(f" (line {line_number})")
        if line is not None and column is not None:
            parts.append(f"\n  {line}")
            parts.append(f"\n  {' ' * column}^")
        elif line is not None:
            parts.append(f" in: {line!r}")

        super().__init__("".join(parts))


class FormatError(ParseError):
    """Malformed fixed-column field, wrong dialect marker or invalid code."""

    pass


class ReferentialError(ParseError):
    """An atom, bond or Sgroup index that does not resolve.

    Attributes:
        index: The 1-based index found in the input.
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        line: str | None = None,
        line_number: int | None = None,
        column: int | None = None,
    ) -> None:
        self.index = index
        super().__init__(message, line, line_number, column)


class StreamError(ChemError):
    """I/O failure or premature end of the input.

    A stream error is never converted into a skipped record.
    """

    pass


class MolfileWarning(UserWarning):
    """A problem in the input that was tolerated."""

    pass


class TruncationWarning(MolfileWarning):
    """A line was shorter than its nominal width; missing fields defaulted."""

    pass


class RecordSkippedWarning(MolfileWarning):
    """An SD file record could not be decoded and was skipped."""

    pass
