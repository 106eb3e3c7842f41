"""
Molecule block decoder.

Reads the header, counts line, atom block and bond block of a V2000
molfile into a Molecule, decides the coordinate dimensionality of the
record, and creates tetrahedral stereocenters from atom parities.
"""

from __future__ import annotations

from typing import Callable, Final

from ..elements import BondOrder, is_element, isotope, major_isotope
from ..exceptions import FormatError, ReferentialError, TruncationWarning
from ..stereo import TetrahedralChirality, Winding
from ..types import PROGRAM, REMARK, TITLE, Atom, Molecule, PseudoAtom, QueryBondType
from .fields import (
    is_pseudo_element,
    length,
    read_int3,
    read_uint,
    sign,
    to_charge,
    to_int,
    to_stereo,
)
from .handler import BlockHandler, ErrorReporter, LineReader
from .keys import CTabVersion, is_record_delimiter

# Widths of complete atom lines (each optional field adds 3 columns)
ATOM_LINE_LENGTHS: Final[frozenset[int]] = frozenset(
    {32, 33, 34, 36, 39, 42, 45, 48, 51, 54, 57, 60, 63, 66, 69}
)
BOND_LINE_LENGTHS: Final[frozenset[int]] = frozenset({9, 12, 15, 18, 21})

MAX_ATOM_LINE: Final[int] = 69
MAX_BOND_LINE: Final[int] = 21

# (minimum line length, field, decoder) for the optional atom line fields
ATOM_FIELDS: Final[tuple[tuple[int, str, Callable[[str], int]], ...]] = (
    (63, "mapping", lambda line: read_int3(line, 60)),
    (51, "valence", lambda line: read_int3(line, 48)),
    (42, "parity", lambda line: to_int(line[41])),
    (39, "charge", lambda line: to_charge(line[38])),
    (36, "mass_diff", lambda line: sign(line[34]) * to_int(line[35])),
)

QUERY_BOND_TYPES: Final[dict[int, QueryBondType]] = {
    5: QueryBondType.SINGLE_OR_DOUBLE,
    6: QueryBondType.SINGLE_OR_AROMATIC,
    7: QueryBondType.DOUBLE_OR_AROMATIC,
    8: QueryBondType.ANY,
}

CONCRETE_BOND_ORDERS: Final[dict[int, BondOrder]] = {
    1: BondOrder.SINGLE,
    2: BondOrder.DOUBLE,
    3: BondOrder.TRIPLE,
}


def is_3d_program(program: str) -> bool:
    """Check the dimensional code ("3D") at columns 20-21 of the program line."""
    return program[20:22] == "3D"


class MoleculeBlockHandler(BlockHandler):
    """Reads the header, atom block and bond block of one record.

    After ``read`` the handler exposes the record-local state needed by the
    later steps: ``atom_count``, ``bond_count``, ``explicit_valence`` (None
    marks an atom with an aromatic or query bond), ``has_query_bonds`` and
    the ``has_x``/``has_y``/``has_z`` coordinate flags.
    """

    def __init__(self, reporter: ErrorReporter) -> None:
        super().__init__(reporter)
        self._reset()

    def _reset(self) -> None:
        self.atom_count = 0
        self.bond_count = 0
        self.explicit_valence: list[int | None] = []
        self.has_query_bonds = False
        self.has_x = False
        self.has_y = False
        self.has_z = False
        self.parities: dict[int, int] = {}

    def read(self, lines: LineReader, molecule: Molecule) -> Molecule | None:
        """Read the molecule block of one record into a molecule.

        Args:
            lines: Line source positioned at the title line.
            molecule: Molecule to add atoms and bonds to; may already hold
                atoms from an earlier record.

        Returns:
            The molecule, or None if the input holds no record (end of input,
            a lone delimiter, or an empty counts line).

        Raises:
            FormatError: V3000 counts line, short atom or bond line, unknown
                bond type; or any problem in strict mode.
            ReferentialError: Bond endpoint outside the atom block.
            StreamError: Input ends inside the block.
        """
        self._reset()

        line = lines.readline()
        if line is None:
            return None
        if is_record_delimiter(line):
            return None

        title = line
        program = lines.require("program line")
        remark = lines.require("comment line")
        counts = lines.require("counts line")

        if not counts.strip():
            self.handle_error("Unexpected empty line", lines.line_number)
            while True:
                line = lines.readline()
                if line is None or is_record_delimiter(line):
                    return None

        version = CTabVersion.of_header(counts)
        if version is CTabVersion.V3000:
            self.reporter.report("This file must be read with a V3000 reader", lines.line_number)
            raise FormatError(
                "This file must be read with a V3000 reader",
                line=counts,
                line_number=lines.line_number,
                column=34,
            )
        if version is CTabVersion.UNSPECIFIED:
            self.handle_error(
                "Counts line has no V2000 version stamp",
                lines.line_number,
                34,
                39,
                line=counts,
            )

        self.atom_count = read_int3(counts, 0)
        self.bond_count = read_int3(counts, 3)
        self.explicit_valence = [0] * self.atom_count

        atoms: list[Atom] = []
        for i in range(self.atom_count):
            line = lines.require(f"atom line {i + 1}")
            atom = self.read_atom(line, lines.line_number)
            if atom.stereo_parity:
                self.parities[i] = atom.stereo_parity
            x, y, z = atom.point3d
            self.has_x = self.has_x or x != 0.0
            self.has_y = self.has_y or y != 0.0
            self.has_z = self.has_z or z != 0.0
            atoms.append(atom)

        self._assign_coordinates(atoms, program)

        offset = molecule.num_atoms
        for atom in atoms:
            molecule.append_atom(atom)

        for i in range(self.bond_count):
            line = lines.require(f"bond line {i + 1}")
            self.read_bond(line, lines.line_number, molecule, offset)

        if title:
            molecule.set_property(TITLE, title)
        if program:
            molecule.set_property(PROGRAM, program)
        if remark:
            molecule.set_property(REMARK, remark)
        if self.has_query_bonds:
            molecule.is_query = True

        if (
            self.options.add_stereo_elements
            and not self.has_query_bonds
            and (self.has_x or self.has_y or self.has_z)
        ):
            self._add_parity_stereo(molecule, offset)

        return molecule

    def _assign_coordinates(self, atoms: list[Atom], program: str) -> None:
        if not (self.has_x or self.has_y or self.has_z):
            if len(atoms) == 1:
                # a lone atom keeps its zero 3D point as well
                atoms[0].point2d = (0.0, 0.0)
                return
            for atom in atoms:
                atom.point3d = None
        elif not self.has_z:
            if is_3d_program(program):
                self.has_z = True
            elif not self.options.force_3d:
                for atom in atoms:
                    x, y, _ = atom.point3d
                    atom.point2d = (x, y)
                    atom.point3d = None

    def read_atom(self, line: str, line_number: int | None = None) -> Atom:
        """Decode an atom line.

        Fields past the end of a short line default to zero. The returned
        atom always has ``point3d`` set; the coordinate mode of the record
        is decided once all atoms are read.

        Args:
            line: The atom line.
            line_number: 1-based line number for diagnostics.

        Returns:
            A new atom (or pseudo atom) with index -1.

        Raises:
            FormatError: If the line is too short to hold a symbol.
        """
        n = min(length(line), MAX_ATOM_LINE)
        if n < 32:
            raise FormatError(
                f"invalid line length, {n}: atom line needs coordinates and a symbol",
                line=line,
                line_number=line_number,
            )
        if n not in ATOM_LINE_LENGTHS:
            self.reporter.warn(
                f"Atom line has non-standard length {n}",
                TruncationWarning,
                line_number,
            )

        values = {name: decode(line) if n >= min_len else 0 for min_len, name, decode in ATOM_FIELDS}

        x = self.read_coordinate(line, 0, line_number)
        y = self.read_coordinate(line, 10, line_number)
        z = self.read_coordinate(line, 20, line_number)
        symbol = line[31:34].strip()

        atom = self.create_atom(symbol, line, line_number)
        atom.point3d = (x, y, z)
        atom.charge = values["charge"]
        atom.stereo_parity = values["parity"]

        mass_diff = values["mass_diff"]
        if mass_diff != 0 and atom.atomic_number:
            major = major_isotope(atom.atomic_number)
            # unresolved until an M  ISO line supplies the mass
            atom.mass_number = -1 if major is None else major + mass_diff

        valence = values["valence"]
        if 0 < valence < 16:
            atom.valence = 0 if valence == 15 else valence

        if values["mapping"] != 0:
            atom.mapping = values["mapping"]

        return atom

    def create_atom(self, symbol: str, line: str = "", line_number: int | None = None) -> Atom:
        """Create an atom for a symbol from the symbol column.

        Args:
            symbol: Trimmed symbol.
            line: The atom line, for error messages.
            line_number: 1-based line number for diagnostics.

        Returns:
            An element atom, an isotopic hydrogen for ``D``/``T``, or a
            pseudo atom.

        Raises:
            FormatError: In strict mode, for ``D``/``T`` or an unknown symbol.
        """
        if is_element(symbol):
            return Atom(idx=-1, symbol=symbol)

        if symbol in ("D", "T") and self.options.interpret_hydrogen_isotopes:
            if self.strict:
                raise FormatError(f"invalid symbol: {symbol}", line=line, line_number=line_number)
            hydrogen = isotope("H", 2 if symbol == "D" else 3)
            return Atom(idx=-1, symbol="H", atomic_number=1, mass_number=hydrogen.mass_number)

        if not is_pseudo_element(symbol):
            self.handle_error(f"invalid symbol: {symbol}", line_number, 31, 34, line=line)

        if symbol == "R#":
            symbol = "R"
        return PseudoAtom(idx=-1, symbol=symbol, label=symbol)

    def read_bond(
        self,
        line: str,
        line_number: int | None,
        molecule: Molecule,
        offset: int = 0,
    ) -> int:
        """Decode a bond line and add the bond to the molecule.

        Args:
            line: The bond line.
            line_number: 1-based line number for diagnostics.
            molecule: Molecule holding the atoms of this record.
            offset: Index of the first atom of this record in the molecule.

        Returns:
            Index of the new bond.

        Raises:
            FormatError: Short line or unknown bond type.
            ReferentialError: An endpoint is not an atom of this record.
        """
        n = min(length(line), MAX_BOND_LINE)
        if n < 9:
            raise FormatError(f"invalid line length: {n}", line=line, line_number=line_number)
        if n not in BOND_LINE_LENGTHS:
            self.reporter.warn(
                f"Bond line has non-standard length {n}",
                TruncationWarning,
                line_number,
            )

        stereo = read_uint(line, 9, 3) if n >= 12 else 0
        u = read_int3(line, 0) - 1
        v = read_int3(line, 3) - 1
        bond_type = read_int3(line, 6)

        for end in (u, v):
            if not 0 <= end < self.atom_count:
                raise ReferentialError(
                    f"Bond references atom {end + 1}, record has {self.atom_count} atoms",
                    index=end + 1,
                    line=line,
                    line_number=line_number,
                )

        a1 = offset + u
        a2 = offset + v

        if bond_type in (1, 2):
            idx = molecule.add_bond(
                a1,
                a2,
                order=CONCRETE_BOND_ORDERS[bond_type],
                stereo=to_stereo(stereo, bond_type, self.strict),
            )
        elif bond_type == 3:
            idx = molecule.add_bond(a1, a2, order=BondOrder.TRIPLE)
        elif bond_type == 4:
            idx = molecule.add_bond(a1, a2, order=BondOrder.UNSET, is_aromatic=True)
            molecule.atoms[a1].is_aromatic = True
            molecule.atoms[a2].is_aromatic = True
        elif bond_type in QUERY_BOND_TYPES:
            idx = molecule.add_bond(a1, a2, order=BondOrder.UNSET, query=QUERY_BOND_TYPES[bond_type])
            self.has_query_bonds = True
        else:
            raise FormatError(
                f"unrecognised bond type: {bond_type}",
                line=line,
                line_number=line_number,
                column=6,
            )

        valence = self.explicit_valence
        if bond_type < 4:
            for end in (u, v):
                if valence[end] is not None:
                    valence[end] += bond_type
        else:
            valence[u] = valence[v] = None

        return idx

    def _add_parity_stereo(self, molecule: Molecule, offset: int) -> None:
        # Hydrogen is taken to be at the back, so an H in slot 0 or 2
        # inverts the winding given by the parity.
        for i, parity in self.parities.items():
            if parity not in (1, 2):
                continue
            focus = offset + i

            carriers: list[int] = []
            h_idx = -1
            too_many = False
            for nbr in molecule.connected_atoms(focus):
                if len(carriers) == 4:
                    too_many = True
                    break
                if nbr.atomic_number == 1:
                    if h_idx >= 0:
                        too_many = True
                        break
                    h_idx = len(carriers)
                carriers.append(nbr.idx)
            if too_many:
                continue

            if len(carriers) < 3 or (len(carriers) < 4 and h_idx >= 0):
                continue
            if len(carriers) == 3:
                carriers.append(focus)

            winding = Winding.CLOCKWISE if parity == 1 else Winding.ANTI_CLOCKWISE
            if h_idx in (0, 2):
                winding = winding.invert()
            molecule.stereo_elements.append(
                TetrahedralChirality(focus, tuple(carriers), winding)
            )
