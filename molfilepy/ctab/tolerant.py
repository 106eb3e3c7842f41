"""
Tolerant atom line decoding.

An alternative molecule block handler for atom blocks written by programs
that do not keep to the fixed V2000 layout. Each field is cut from its
columns and trimmed before it is converted, trailing whitespace is reported
and removed, and chemical shifts written after column 69 are kept as atom
properties.

    >>> from molfilepy.ctab.tolerant import TolerantMolfileReader
    >>> mol = TolerantMolfileReader().read(text)              # doctest: +SKIP
    >>> mol.atoms[0].properties["first shift"]                # doctest: +SKIP
    128.5
"""

from __future__ import annotations

from typing import Final

from ..elements import major_isotope
from ..exceptions import FormatError
from ..types import FIRST_SHIFT, SECOND_SHIFT, Atom
from .fields import CHARGE_CODES, to_int
from .molecule_block import MoleculeBlockHandler
from .reader import MolfileReader

# Property key -> (first column, end column, minimum line length)
SHIFT_COLUMNS: Final[dict[str, tuple[int, int, int]]] = {
    FIRST_SHIFT: (69, 79, 78),
    SECOND_SHIFT: (79, 87, 87),
}


class TolerantMoleculeBlockHandler(MoleculeBlockHandler):
    """Molecule block handler with a field-by-field atom line decoder.

    Blank numeric fields read as zero. Missing mass difference and charge
    fields are reported through the error policy, as is trailing
    whitespace; the bond block is read as by MoleculeBlockHandler.
    """

    def read_atom(self, line: str, line_number: int | None = None) -> Atom:
        """Decode an atom line field by field.

        Args:
            line: The atom line.
            line_number: 1-based line number for diagnostics.

        Returns:
            A new atom (or pseudo atom) with index -1. Shifts found after
            the atom fields are stored under ``"first shift"`` and
            ``"second shift"`` in its properties.

        Raises:
            FormatError: A coordinate is not a number; or any problem in
                strict mode.
        """
        stripped = line.rstrip()
        if len(stripped) != len(line):
            self.handle_error("Trailing space found", line_number, len(stripped), len(line), line=line)
            line = stripped

        x, y, z = (self._coordinate(line, start, line_number) for start in (0, 10, 20))

        symbol = line[31:34].strip()
        if len(line) < 34:
            self.handle_error(
                "Atom symbol must be three columns wide, padded with spaces",
                line_number,
                31,
                34,
                line=line,
            )

        atom = self.create_atom(symbol, line, line_number)
        atom.point3d = (x, y, z)

        if len(line) >= 36:
            mass_diff = self._field(line, 34, 36, "mass difference", line_number)
            if mass_diff and atom.atomic_number:
                major = major_isotope(atom.atomic_number)
                # unresolved until an M  ISO line supplies the mass
                atom.mass_number = -1 if major is None else major + mass_diff
        else:
            self.handle_error("Mass difference is missing", line_number, 34, 36, line=line)

        if len(line) >= 39:
            code = line[36:39].strip()
            if code and code not in CHARGE_CODES and code != "0":
                self.handle_error(f"Unknown charge code: {code}", line_number, 36, 39, line=line)
            atom.charge = CHARGE_CODES.get(code, 0)
        else:
            self.handle_error("Atom charge is missing", line_number, 36, 39, line=line)

        atom.stereo_parity = to_int(line[41]) if len(line) > 41 else 0

        if len(line) >= 51 and not atom.is_pseudo:
            digits = "".join(c for c in line[48:51] if c.isdigit())
            valence = int(digits) if digits else 0
            if 0 < valence < 16:
                atom.valence = 0 if valence == 15 else valence

        code = line[60:63].strip()
        if code:
            try:
                mapping = int(code)
            except ValueError:
                self.reporter.warn(f"Mapping number {code} is not an integer", line_number=line_number)
            else:
                if mapping != 0:
                    atom.mapping = mapping

        for key, (start, end, min_len) in SHIFT_COLUMNS.items():
            if len(line) < min_len:
                continue
            text = line[start:end].strip()
            try:
                atom.properties[key] = float(text)
            except ValueError:
                self.handle_error(f"Could not parse {key}: {text!r}", line_number, start, end, line=line)

        return atom

    def _coordinate(self, line: str, start: int, line_number: int | None) -> float:
        text = line[start:start + 10].strip()
        try:
            return float(text)
        except ValueError:
            raise FormatError(
                f"Could not parse coordinate: {text!r}",
                line=line,
                line_number=line_number,
                column=start,
            ) from None

    def _field(self, line: str, start: int, end: int, what: str, line_number: int | None) -> int:
        """Read a trimmed integer field; blank is zero."""
        text = line[start:end].strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            self.handle_error(f"Could not parse {what} field", line_number, start, end, line=line)
            return 0


class TolerantMolfileReader(MolfileReader):
    """MolfileReader that decodes atom lines with TolerantMoleculeBlockHandler.

    Register it with a ReaderFactory to read SD files the same way::

        factory.register(CTabVersion.V2000, TolerantMolfileReader)
    """

    def new_molecule_block_handler(self) -> MoleculeBlockHandler:
        return TolerantMoleculeBlockHandler(self.reporter)
