"""
SD file data block decoder.

Reads ``> <NAME>`` data fields between ``M  END`` and ``$$$$`` into
molecule properties.
"""

from __future__ import annotations

from typing import Final

from ..types import Molecule
from .handler import BlockHandler, LineReader
from .keys import data_header, is_record_delimiter

# Width of a full data line; a line this long continues on the next line
MAX_LINE_WIDTH: Final[int] = 80


class DataBlockHandler(BlockHandler):
    """Reads the non-structural data fields of an SD file record."""

    def read(self, lines: LineReader, molecule: Molecule) -> None:
        """Read data fields into molecule properties up to the delimiter.

        Value lines are trimmed, except a lone ``" "`` line that opens a
        value. Blank lines are ignored. Lines are joined with newlines,
        except after a line exactly 80 characters wide, which is continued
        without a break.

        Args:
            lines: Line source positioned after ``M  END``.
            molecule: Molecule receiving one property per field.
        """
        header: str | None = None
        wrap = False
        data: list[str] = []

        while True:
            line = lines.readline()
            if line is None or is_record_delimiter(line):
                break

            new_header = data_header(line)
            if new_header is not None:
                if header is not None:
                    molecule.set_property(header, "".join(data))
                header = new_header
                wrap = False
                data = []
                continue

            if data or line != " ":
                line = line.strip()
            if not line:
                continue

            if not wrap and data:
                data.append("\n")
            data.append(line)
            wrap = len(line) == MAX_LINE_WIDTH

        if header is not None:
            molecule.set_property(header, "".join(data))
