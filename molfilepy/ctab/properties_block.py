"""
Properties block decoder.

Reads the property lines that follow the bond block up to ``M  END``.
Each line is classified by PropertyKey and passed to one handler method.
Unknown property lines are skipped. Sgroups are collected as records keyed
by their id and finalized into typed Sgroups once the block ends.
"""

from __future__ import annotations

from typing import Callable, Final, Iterator

from ..exceptions import FormatError, ReferentialError
from ..sgroup import (
    CONNECTIVITY_CODES,
    COPOLYMER_SUBTYPES,
    SgroupBracket,
    SgroupKey,
    SgroupRecord,
    SgroupType,
    finalize_sgroups,
    has_parent_cycle,
)
from ..types import (
    ABBREVIATION_ATTACHMENT,
    ACDLABS_LABEL,
    COMMENT,
    GROUP_ABBREVIATION,
    Atom,
    Molecule,
    PseudoAtom,
)
from .fields import read_int3, read_uint
from .handler import BlockHandler, ErrorReporter, LineReader
from .keys import PropertyKey

# M  RAD value -> single electrons (singlet, doublet, triplet)
RADICAL_ELECTRONS: Final[dict[int, int]] = {0: 0, 1: 2, 2: 1, 3: 2}


class PropertiesBlockHandler(BlockHandler):
    """Reads the properties block of one record.

    Atom and bond indices in property lines are 1-based and local to the
    record; they are shifted by the number of atoms (bonds) the molecule
    held before the record was read.
    """

    def __init__(self, reporter: ErrorReporter) -> None:
        super().__init__(reporter)
        # Handlers return True when the block ends early
        self._handlers: dict[PropertyKey, Callable[[str], bool | None]] = {
            PropertyKey.ATOM_ALIAS: self._handle_atom_alias,
            PropertyKey.ATOM_VALUE: self._handle_atom_value,
            PropertyKey.GROUP_ABBREVIATION: self._handle_group_abbreviation,
            PropertyKey.SKIP: self._handle_skip,
            PropertyKey.M_CHG: self._handle_chg,
            PropertyKey.M_ISO: self._handle_iso,
            PropertyKey.M_RAD: self._handle_rad,
            PropertyKey.M_RGP: self._handle_rgp,
            PropertyKey.M_ZZC: self._handle_zzc,
            PropertyKey.M_STY: self._handle_sty,
            PropertyKey.M_SST: self._handle_sst,
            PropertyKey.M_SAL: self._handle_sal,
            PropertyKey.M_SBL: self._handle_sbl,
            PropertyKey.M_SPA: self._handle_spa,
            PropertyKey.M_SPL: self._handle_spl,
            PropertyKey.M_SCN: self._handle_scn,
            PropertyKey.M_SDI: self._handle_sdi,
            PropertyKey.M_SMT: self._handle_smt,
            PropertyKey.M_SBT: self._handle_sbt,
            PropertyKey.M_SDS: self._handle_sds,
            PropertyKey.M_SNC: self._handle_snc,
        }
        self._lines: LineReader | None = None
        self._mol = Molecule()
        self._offset = 0
        self._bond_offset = 0
        self._sgroups: dict[int, SgroupRecord] = {}

    def read(
        self,
        lines: LineReader,
        molecule: Molecule,
        n_atoms: int,
        n_bonds: int,
    ) -> None:
        """Read property lines into a molecule until ``M  END``.

        Args:
            lines: Line source positioned after the bond block.
            molecule: Molecule holding the atoms and bonds of the record.
            n_atoms: Number of atoms in the record.
            n_bonds: Number of bonds in the record.

        Raises:
            FormatError: ``M  ZZC`` in strict mode, or any problem in strict
                mode.
            ReferentialError: Unresolved index or Sgroup id in strict mode.
        """
        self._lines = lines
        self._mol = molecule
        self._offset = molecule.num_atoms - n_atoms
        self._bond_offset = molecule.num_bonds - n_bonds
        self._sgroups = {}

        while True:
            line = lines.readline()
            if line is None:
                break
            key = PropertyKey.of(line)
            if key is PropertyKey.M_END:
                break
            handler = self._handlers.get(key)
            if handler is not None and handler(line):
                break

        for atom in molecule.atoms:
            if atom.mass_number is not None and atom.mass_number < 0:
                self.reporter.warn(
                    f"Unstable use of mass delta on {atom.symbol} please use M  ISO"
                )
                atom.mass_number = None

        if self._sgroups:
            molecule.sgroups.extend(finalize_sgroups(self._sgroups.values()))

    # -- index resolution ---------------------------------------------------

    def _atom_index(self, index: int, line: str) -> int | None:
        """Resolve a 0-based record-local atom index, or None if out of range."""
        idx = self._offset + index
        if index < 0 or idx >= self._mol.num_atoms:
            self.handle_error(
                f"Atom {index + 1} is not in the atom block",
                self._lines.line_number,
                line=line,
                error=ReferentialError,
            )
            return None
        return idx

    def _atom(self, index: int, line: str) -> Atom | None:
        idx = self._atom_index(index, line)
        return None if idx is None else self._mol.atoms[idx]

    def _bond_index(self, index: int, line: str) -> int | None:
        idx = self._bond_offset + index
        if index < 0 or idx >= self._mol.num_bonds:
            self.handle_error(
                f"Bond {index + 1} is not in the bond block",
                self._lines.line_number,
                line=line,
                error=ReferentialError,
            )
            return None
        return idx

    def _pairs(self, line: str) -> Iterator[tuple[int, int]]:
        """Yield (0-based index, value) pairs of a ``M  XXXnn8 aaa vvv`` line."""
        count = read_uint(line, 6, 3)
        st = 10
        for _ in range(count):
            if st + 7 > len(line):
                break
            yield read_int3(line, st) - 1, read_int3(line, st + 4)
            st += 8

    def _label(self, idx: int, label: str) -> None:
        """Relabel an atom, replacing it with a pseudo atom if needed."""
        atom = self._mol.atoms[idx]
        if isinstance(atom, PseudoAtom):
            atom.label = label
            return
        pseudo = PseudoAtom(
            idx=idx,
            symbol=label,
            charge=atom.charge,
            mass_number=atom.mass_number,
            is_aromatic=atom.is_aromatic,
            point2d=atom.point2d,
            point3d=atom.point3d,
            stereo_parity=atom.stereo_parity,
            valence=atom.valence,
            mapping=atom.mapping,
            properties=atom.properties,
            label=label,
        )
        self._mol.replace_atom(idx, pseudo)

    # -- atom properties ----------------------------------------------------

    def _handle_atom_alias(self, line: str) -> bool:
        # A  aaa
        # x...
        index = read_int3(line, 3) - 1
        alias = self._lines.readline()
        if alias is None:
            return True
        idx = self._atom_index(index, line)
        if idx is not None:
            self._label(idx, alias)
        return False

    def _handle_atom_value(self, line: str) -> None:
        # V  aaa v...
        atom = self._atom(read_int3(line, 3) - 1, line)
        if atom is not None:
            atom.properties[COMMENT] = line[7:]

    def _handle_group_abbreviation(self, line: str) -> bool:
        # G  aaappp
        # x...
        text = self._lines.readline()
        if text is None:
            return True
        atom = self._atom(read_int3(line, 3) - 1, line)
        if atom is not None:
            atom.properties[GROUP_ABBREVIATION] = text.strip()
            attach = read_int3(line, 6) - 1
            if attach >= 0:
                atom.properties[ABBREVIATION_ATTACHMENT] = self._offset + attach
        return False

    def _handle_skip(self, line: str) -> bool:
        # S  SKPnnn
        if line[3:6] != "SKP":
            return False
        for _ in range(read_int3(line, 6)):
            if self._lines.readline() is None:
                return True
        return False

    def _handle_chg(self, line: str) -> None:
        for index, charge in self._pairs(line):
            atom = self._atom(index, line)
            if atom is not None:
                atom.charge = charge

    def _handle_iso(self, line: str) -> None:
        for index, mass in self._pairs(line):
            atom = self._atom(index, line)
            if atom is None:
                continue
            if mass < 0:
                self.handle_error(
                    f"Absolute mass number should be >= 0, {line}",
                    self._lines.line_number,
                )
            else:
                atom.mass_number = mass

    def _handle_rad(self, line: str) -> None:
        for index, value in self._pairs(line):
            idx = self._atom_index(index, line)
            if idx is None:
                continue
            electrons = RADICAL_ELECTRONS.get(value)
            if electrons is None:
                self.handle_error(
                    f"Invalid radical value: {value}",
                    self._lines.line_number,
                    line=line,
                )
                continue
            for _ in range(electrons):
                self._mol.add_single_electron(idx)

    def _handle_rgp(self, line: str) -> None:
        for index, number in self._pairs(line):
            idx = self._atom_index(index, line)
            if idx is not None:
                self._label(idx, f"R{number}")

    def _handle_zzc(self, line: str) -> None:
        # M  ZZC aaa c...
        if self.strict:
            raise FormatError(
                "Atom property ZZC is illegal in STRICT mode",
                line=line,
                line_number=self._lines.line_number,
            )
        atom = self._atom(read_int3(line, 7) - 1, line)
        if atom is not None:
            # leading and trailing whitespace is part of the label
            atom.properties[ACDLABS_LABEL] = line[11:]

    # -- Sgroups ------------------------------------------------------------

    def _ensure_sgroup(self, sgroup_id: int, line: str, column: int) -> SgroupRecord:
        """Get the Sgroup with an id read at a column, creating a stub if needed."""
        record = self._sgroups.get(sgroup_id)
        if record is None:
            self.handle_error(
                f"Sgroup {sgroup_id} must first be defined by a STY property",
                self._lines.line_number,
                column,
                column + 3,
                line=line,
                error=ReferentialError,
            )
            record = SgroupRecord(sgroup_id, declared=False)
            self._sgroups[sgroup_id] = record
        return record

    def _handle_sty(self, line: str) -> None:
        # M  STYnn8 sss ttt ...
        count = read_int3(line, 6)
        for i in range(count):
            off = 10 + i * 8
            if off + 3 > len(line):
                break
            sgroup_id = read_int3(line, off)

            record = self._sgroups.get(sgroup_id)
            if record is not None and self.strict:
                self.handle_error(
                    "STY line must appear before any other line that supplies Sgroup information",
                    self._lines.line_number,
                    off,
                    off + 3,
                    line=line,
                )
            if record is None:
                record = SgroupRecord(sgroup_id)
                self._sgroups[sgroup_id] = record
            record.declared = True

            code = line[off + 4:off + 7]
            sgroup_type = SgroupType.from_ctab(code)
            if sgroup_type is None:
                self.handle_error(
                    f"Unknown Sgroup type: {code!r}",
                    self._lines.line_number,
                    off + 4,
                    off + 7,
                    line=line,
                )
                sgroup_type = SgroupType.GENERIC
            record.type = sgroup_type

    def _handle_sst(self, line: str) -> None:
        # M  SSTnn8 sss ttt ...
        count = read_int3(line, 6)
        st = 10
        for _ in range(count):
            if st + 7 > len(line):
                break
            record = self._ensure_sgroup(read_int3(line, st), line, st)
            if self.strict and record.type is not SgroupType.COPOLYMER:
                self.handle_error(
                    "SST (Sgroup Subtype) specified for a non co-polymer group",
                    self._lines.line_number,
                    st,
                    st + 3,
                    line=line,
                )
            subtype = line[st + 4:st + 7]
            if self.strict and subtype not in COPOLYMER_SUBTYPES:
                self.handle_error(
                    f"Invalid sgroup subtype: {subtype} expected (ALT, RAN, or BLO)",
                    self._lines.line_number,
                    st + 4,
                    st + 7,
                    line=line,
                )
            record.attributes[SgroupKey.SUBTYPE] = subtype
            st += 8

    def _index_list(self, line: str) -> tuple[SgroupRecord, list[int]]:
        """Read a ``M  XXX sssn15 aaa ...`` line as (Sgroup, 0-based indices)."""
        record = self._ensure_sgroup(read_int3(line, 7), line, 7)
        count = read_int3(line, 10)
        indices = []
        st = 14
        for _ in range(count):
            if st + 3 > len(line):
                break
            indices.append(read_int3(line, st) - 1)
            st += 4
        return record, indices

    def _handle_sal(self, line: str) -> None:
        record, indices = self._index_list(line)
        for index in indices:
            idx = self._atom_index(index, line)
            if idx is not None:
                record.atoms.append(idx)

    def _handle_sbl(self, line: str) -> None:
        record, indices = self._index_list(line)
        for index in indices:
            idx = self._bond_index(index, line)
            if idx is not None:
                record.bonds.append(idx)

    def _handle_spa(self, line: str) -> None:
        record, indices = self._index_list(line)
        parent_atoms = record.attributes.setdefault(SgroupKey.PARENT_ATOM_LIST, [])
        for index in indices:
            idx = self._atom_index(index, line)
            if idx is not None and idx not in parent_atoms:
                parent_atoms.append(idx)

    def _handle_spl(self, line: str) -> None:
        # M  SPLnn8 ccc ppp ...
        count = read_int3(line, 6)
        st = 10
        for _ in range(count):
            if st + 6 > len(line):
                break
            child = self._ensure_sgroup(read_int3(line, st), line, st)
            parent = self._ensure_sgroup(read_int3(line, st + 4), line, st + 4)
            if self.strict and has_parent_cycle(self._sgroups, child.id, parent.id):
                self.handle_error(
                    f"Sgroup {parent.id} cannot be a parent of Sgroup {child.id}: cycle",
                    self._lines.line_number,
                    st + 4,
                    st + 7,
                    line=line,
                    error=ReferentialError,
                )
            if parent.id not in child.parent_ids:
                child.parent_ids.append(parent.id)
            st += 8

    def _handle_scn(self, line: str) -> None:
        # M  SCNnn8 sss ttt ...
        count = read_int3(line, 6)
        st = 10
        for _ in range(count):
            if st + 6 > len(line):
                break
            record = self._ensure_sgroup(read_int3(line, st), line, st)
            connectivity = line[st + 4:min(len(line), st + 7)].strip()
            if self.strict and connectivity not in CONNECTIVITY_CODES:
                self.handle_error(
                    f"Unknown SCN type (expected: HH, HT, or EU) was {connectivity}",
                    self._lines.line_number,
                    st + 4,
                    st + 7,
                    line=line,
                )
            record.attributes[SgroupKey.CONNECTIVITY] = connectivity
            st += 8

    def _handle_sdi(self, line: str) -> None:
        # M  SDI sssnn4 x1 y1 x2 y2
        record = self._ensure_sgroup(read_int3(line, 7), line, 7)
        count = read_int3(line, 10)
        line_number = self._lines.line_number
        if count != 4:
            self.handle_error(
                f"SDI expects 4 coordinates, found {count}",
                line_number,
                10,
                13,
                line=line,
            )
        record.brackets.append(
            SgroupBracket(
                self.read_coordinate(line, 13, line_number),
                self.read_coordinate(line, 23, line_number),
                self.read_coordinate(line, 33, line_number),
                self.read_coordinate(line, 43, line_number),
            )
        )

    def _handle_smt(self, line: str) -> None:
        # M  SMT sss m...
        record = self._ensure_sgroup(read_int3(line, 7), line, 7)
        record.attributes[SgroupKey.SUBSCRIPT] = line[11:].strip()

    def _handle_sbt(self, line: str) -> None:
        # M  SBTnn8 sss ttt ...
        count = read_int3(line, 6)
        st = 10
        for _ in range(count):
            if st + 7 > len(line):
                break
            record = self._ensure_sgroup(read_int3(line, st), line, st)
            record.attributes[SgroupKey.BRACKET_STYLE] = read_int3(line, st + 4)
            st += 8

    def _handle_sds(self, line: str) -> None:
        # M  SDS EXPn15 sss ...
        if line[7:10] != "EXP":
            if self.strict:
                self.handle_error(
                    "Expected EXP to follow SDS tag",
                    self._lines.line_number,
                    7,
                    10,
                    line=line,
                )
            return
        count = read_int3(line, 10)
        st = 14
        for _ in range(count):
            if st + 3 > len(line):
                break
            record = self._ensure_sgroup(read_int3(line, st), line, st)
            record.attributes[SgroupKey.EXPANSION] = True
            st += 4

    def _handle_snc(self, line: str) -> None:
        # M  SNCnn8 sss ooo ...
        count = read_int3(line, 6)
        st = 10
        for _ in range(count):
            if st + 7 > len(line):
                break
            record = self._ensure_sgroup(read_int3(line, st), line, st)
            record.attributes[SgroupKey.COMPONENT_NUMBER] = read_int3(line, st + 4)
            st += 8
