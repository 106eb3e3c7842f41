"""Tests for the header, atom block and bond block of a molfile."""

import pytest

from molfilepy import (
    BondOrder,
    BondStereo,
    FormatError,
    Mode,
    MolfileReader,
    MolfileWarning,
    PseudoAtom,
    QueryBondType,
    ReaderOptions,
    ReferentialError,
    StreamError,
    TruncationWarning,
    Winding,
    read_molfile,
)
from molfilepy.ctab.handler import ErrorReporter
from molfilepy.ctab.molecule_block import MoleculeBlockHandler

STRICT = ReaderOptions(mode=Mode.STRICT)


def atom_handler(options=None):
    """Molecule block handler with its own reporter."""
    return MoleculeBlockHandler(ErrorReporter(options or ReaderOptions()))


class TestHeader:
    """Test the header and counts line."""

    def test_header_properties(self, mdl):
        text = mdl.molfile([mdl.atom("C")], title="methane", remark="a remark")
        mol = read_molfile(text)
        assert mol.title == "methane"
        assert mol.get_property("program") == "  molfilepy"
        assert mol.get_property("remark") == "a remark"

    def test_empty_header_lines_not_stored(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C")], title="", program=""))
        assert mol.title is None
        assert "program" not in mol.properties
        assert "remark" not in mol.properties

    def test_empty_input(self):
        assert read_molfile("") is None

    def test_lone_delimiter(self):
        assert read_molfile("$$$$\n") is None

    def test_empty_counts_line(self):
        """An empty counts line means there is no molecule."""
        text = "title\n  program\n\n\nmore\n$$$$\n"
        with pytest.warns(MolfileWarning, match="Unexpected empty line"):
            assert read_molfile(text) is None

    def test_v3000_rejected(self, mdl):
        """V3000 records fail in both modes."""
        text = mdl.molfile([], version="V3000")
        with pytest.raises(FormatError, match="V3000"):
            read_molfile(text)
        with pytest.raises(FormatError, match="V3000"):
            read_molfile(text, STRICT)

    def test_missing_version_stamp(self, mdl):
        text = mdl.molfile([mdl.atom("C")]).replace(" V2000", "")
        with pytest.warns(MolfileWarning, match="version stamp"):
            mol = read_molfile(text)
        assert mol.num_atoms == 1
        with pytest.raises(FormatError):
            read_molfile(text, STRICT)

    def test_truncated_record(self, mdl):
        """Input ending inside the atom block is a stream error."""
        text = "\n".join(mdl.molfile([mdl.atom("C"), mdl.atom("O")]).splitlines()[:5])
        with pytest.raises(StreamError, match="atom line 2"):
            read_molfile(text)


class TestAtomBlock:
    """Test atom line decoding."""

    def test_ethanol(self, ethanol_molfile):
        mol = read_molfile(ethanol_molfile)
        assert [a.symbol for a in mol.atoms] == ["C", "C", "O"]
        assert [a.atomic_number for a in mol.atoms] == [6, 6, 8]
        assert [a.idx for a in mol.atoms] == [0, 1, 2]
        assert mol.num_bonds == 2

    def test_charge_column(self, mdl):
        mol = read_molfile(mdl.molfile([
            mdl.atom("N", charge_code=3),
            mdl.atom("O", charge_code=5),
            mdl.atom("Fe", charge_code=2),
        ]))
        assert [a.charge for a in mol.atoms] == [1, -1, 2]

    def test_mass_difference(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C", mass_diff=1), mdl.atom("Cl", mass_diff=2)]))
        assert mol.atoms[0].mass_number == 13
        assert mol.atoms[1].mass_number == 37

    def test_unresolved_mass_difference(self, mdl):
        """A mass difference on an element without a major isotope is dropped."""
        with pytest.warns(MolfileWarning, match="M  ISO"):
            mol = read_molfile(mdl.molfile([mdl.atom("Tc", mass_diff=1)]))
        assert mol.atoms[0].mass_number is None

    def test_mass_difference_resolved_by_iso(self, mdl):
        mol = read_molfile(mdl.molfile(
            [mdl.atom("Tc", mass_diff=1)],
            properties=["M  ISO  1   1  99"],
        ))
        assert mol.atoms[0].mass_number == 99

    def test_mapping(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C", mapping=7), mdl.atom("C")]))
        assert mol.atoms[0].mapping == 7
        assert mol.atoms[1].mapping is None

    def test_valence_column(self, mdl):
        mol = read_molfile(mdl.molfile(
            [mdl.atom("C", valence=2), mdl.atom("C", valence=15), mdl.atom("C")],
            [mdl.bond(1, 2), mdl.bond(2, 3)],
        ))
        first, second, third = mol.atoms
        assert first.valence == 2
        assert first.implicit_hydrogens == 1
        assert second.valence == 0
        assert second.implicit_hydrogens == 0
        assert third.valence == 4
        assert third.implicit_hydrogens == 3

    def test_hydrogen_isotopes(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("D"), mdl.atom("T")]))
        assert [a.symbol for a in mol.atoms] == ["H", "H"]
        assert [a.mass_number for a in mol.atoms] == [2, 3]
        assert all(a.atomic_number == 1 for a in mol.atoms)

    def test_hydrogen_isotopes_strict(self, mdl):
        with pytest.raises(FormatError, match="invalid symbol: D"):
            read_molfile(mdl.molfile([mdl.atom("D")]), STRICT)

    def test_hydrogen_isotopes_disabled(self, mdl):
        options = ReaderOptions(interpret_hydrogen_isotopes=False)
        with pytest.warns(MolfileWarning, match="invalid symbol: D"):
            mol = read_molfile(mdl.molfile([mdl.atom("D")]), options)
        assert isinstance(mol.atoms[0], PseudoAtom)

    def test_pseudo_atoms(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("R#"), mdl.atom("R1"), mdl.atom("A"), mdl.atom("*")]))
        assert all(isinstance(a, PseudoAtom) for a in mol.atoms)
        assert [a.label for a in mol.atoms] == ["R", "R1", "A", "*"]
        assert [a.symbol for a in mol.atoms] == ["R", "R1", "A", "*"]
        assert all(a.atomic_number == 0 for a in mol.atoms)

    def test_unknown_symbol_relaxed(self, mdl):
        with pytest.warns(MolfileWarning, match="invalid symbol: Xx"):
            mol = read_molfile(mdl.molfile([mdl.atom("Xx")]))
        assert mol.atoms[0].is_pseudo
        assert mol.atoms[0].label == "Xx"

    def test_unknown_symbol_strict(self, mdl):
        with pytest.raises(FormatError, match="invalid symbol: Xx"):
            read_molfile(mdl.molfile([mdl.atom("Xx")]), STRICT)

    def test_short_atom_line(self):
        with pytest.raises(FormatError, match="invalid line length"):
            atom_handler().read_atom("    0.0000    0.0000    0.0000")

    def test_truncated_atom_line(self, mdl):
        """Missing optional fields default to zero."""
        atom = atom_handler().read_atom(mdl.atom("N")[:36] + "  3")
        assert atom.symbol == "N"
        assert atom.charge == 1
        assert atom.stereo_parity == 0

    def test_non_standard_length(self, mdl):
        with pytest.warns(TruncationWarning):
            atom = atom_handler().read_atom(mdl.atom("N")[:36] + " 3")
        assert atom.charge == 0

    def test_misplaced_decimal_point(self, mdl):
        line = "   1.50000    0.0000    0.0000" + mdl.atom("C")[30:]
        with pytest.warns(MolfileWarning, match="4 decimal places"):
            atom = atom_handler().read_atom(line)
        assert atom.point3d[0] == pytest.approx(1.5)
        with pytest.raises(FormatError):
            atom_handler(STRICT).read_atom(line)


class TestCoordinates:
    """Test the coordinate mode of a record."""

    def test_2d(self, ethanol_molfile):
        mol = read_molfile(ethanol_molfile)
        assert mol.atoms[1].point2d == pytest.approx((1.299, 0.75))
        assert all(a.point3d is None for a in mol.atoms)

    def test_3d(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C", 1.0, 2.0, 3.0), mdl.atom("O")]))
        assert mol.atoms[0].point3d == pytest.approx((1.0, 2.0, 3.0))
        assert mol.atoms[1].point3d == (0.0, 0.0, 0.0)
        assert all(a.point2d is None for a in mol.atoms)

    def test_3d_program_line(self, mdl):
        """A 3D dimensional code keeps flat coordinates as 3D."""
        program = f"{'  molfilepy':<20}3D"
        mol = read_molfile(mdl.molfile([mdl.atom("C", 1.0, 2.0)], program=program))
        assert mol.atoms[0].point3d == pytest.approx((1.0, 2.0, 0.0))
        assert mol.atoms[0].point2d is None

    def test_force_3d(self, ethanol_molfile):
        mol = read_molfile(ethanol_molfile, ReaderOptions(force_3d=True))
        assert mol.atoms[1].point3d == pytest.approx((1.299, 0.75, 0.0))
        assert mol.atoms[1].point2d is None

    def test_no_coordinates(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C"), mdl.atom("O")], [mdl.bond(1, 2)]))
        assert all(a.point2d is None and a.point3d is None for a in mol.atoms)

    def test_single_atom_at_origin(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C")]))
        assert mol.atoms[0].point2d == (0.0, 0.0)
        assert mol.atoms[0].point3d == (0.0, 0.0, 0.0)


class TestBondBlock:
    """Test bond line decoding."""

    def test_orders(self, mdl):
        mol = read_molfile(mdl.molfile(
            [mdl.atom("C"), mdl.atom("C"), mdl.atom("C"), mdl.atom("N")],
            [mdl.bond(1, 2, 1), mdl.bond(2, 3, 2), mdl.bond(3, 4, 3)],
        ))
        assert [b.order for b in mol.bonds] == [BondOrder.SINGLE, BondOrder.DOUBLE, BondOrder.TRIPLE]
        assert mol.bonds[1].stereo is BondStereo.E_Z_BY_COORDINATES
        assert mol.get_bond_between(2, 3).order is BondOrder.TRIPLE
        assert mol.atoms[3].bond_indices == [2]

    def test_wedges(self, mdl):
        mol = read_molfile(mdl.molfile(
            [mdl.atom("C", 0.0, 0.0), mdl.atom("F", 1.0, 0.0), mdl.atom("Cl", 0.0, 1.0)],
            [mdl.bond(1, 2, 1, 1), mdl.bond(1, 3, 1, 6)],
        ))
        assert mol.bonds[0].stereo is BondStereo.UP
        assert mol.bonds[1].stereo is BondStereo.DOWN

    def test_wedge_on_double_bond_strict(self, mdl):
        text = mdl.molfile([mdl.atom("C"), mdl.atom("O")], [mdl.bond(1, 2, 2, 1)])
        assert read_molfile(text).bonds[0].stereo is BondStereo.UP
        with pytest.raises(FormatError, match="bond order was 2"):
            read_molfile(text, STRICT)

    def test_aromatic_bonds(self, benzene_molfile):
        mol = read_molfile(benzene_molfile)
        assert mol.num_bonds == 6
        assert all(b.is_aromatic and b.order is BondOrder.UNSET for b in mol.bonds)
        assert all(a.is_aromatic for a in mol.atoms)
        assert not mol.is_query

    def test_query_bonds(self, mdl):
        mol = read_molfile(mdl.molfile(
            [mdl.atom("C"), mdl.atom("C"), mdl.atom("O")],
            [mdl.bond(1, 2, 5), mdl.bond(2, 3, 8)],
        ))
        assert mol.is_query
        assert mol.bonds[0].query is QueryBondType.SINGLE_OR_DOUBLE
        assert mol.bonds[1].query is QueryBondType.ANY
        assert mol.bonds[1].order is BondOrder.UNSET

    @pytest.mark.parametrize("options", [ReaderOptions(), STRICT])
    def test_unknown_bond_type(self, mdl, options):
        text = mdl.molfile([mdl.atom("C"), mdl.atom("C")], [mdl.bond(1, 2, 9)])
        with pytest.raises(FormatError, match="unrecognised bond type: 9"):
            read_molfile(text, options)

    @pytest.mark.parametrize("options", [ReaderOptions(), STRICT])
    def test_endpoint_out_of_range(self, mdl, options):
        text = mdl.molfile([mdl.atom("C"), mdl.atom("C")], [mdl.bond(1, 3)])
        with pytest.raises(ReferentialError) as excinfo:
            read_molfile(text, options)
        assert excinfo.value.index == 3

    def test_short_bond_line(self, mdl):
        text = mdl.molfile([mdl.atom("C"), mdl.atom("C")], ["  1  2"])
        with pytest.raises(FormatError, match="invalid line length"):
            read_molfile(text)

    def test_minimal_bond_line(self, mdl):
        mol = read_molfile(mdl.molfile([mdl.atom("C"), mdl.atom("C")], ["  1  2  2"]))
        assert mol.bonds[0].order is BondOrder.DOUBLE


class TestParityStereo:
    """Test stereocenters created from atom parities."""

    def chiral(self, mdl, first="F", parity=1, neighbors=4):
        """Carbon with a parity and up to four substituents."""
        symbols = [first, "Cl", "Br", "I"][:neighbors]
        points = [(1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0)]
        atoms = [mdl.atom("C", 0.1, 0.1, parity=parity)]
        atoms += [mdl.atom(s, x, y) for s, (x, y) in zip(symbols, points)]
        bonds = [mdl.bond(1, i + 2) for i in range(neighbors)]
        return mdl.molfile(atoms, bonds)

    def test_clockwise(self, mdl):
        mol = read_molfile(self.chiral(mdl))
        (center,) = mol.stereo_elements
        assert center.focus == 0
        assert center.ligands == (1, 2, 3, 4)
        assert center.winding is Winding.CLOCKWISE

    def test_anticlockwise(self, mdl):
        mol = read_molfile(self.chiral(mdl, parity=2))
        assert mol.stereo_elements[0].winding is Winding.ANTI_CLOCKWISE

    def test_explicit_hydrogen_inverts(self, mdl):
        """A hydrogen in the first position inverts the winding."""
        mol = read_molfile(self.chiral(mdl, first="H"))
        assert mol.stereo_elements[0].winding is Winding.ANTI_CLOCKWISE

    def test_implicit_hydrogen(self, mdl):
        """Three substituents: the focus stands in for the hydrogen."""
        mol = read_molfile(self.chiral(mdl, neighbors=3))
        assert mol.stereo_elements[0].ligands == (1, 2, 3, 0)

    def test_too_few_neighbors(self, mdl):
        assert read_molfile(self.chiral(mdl, neighbors=2)).stereo_elements == []

    def test_either_parity_ignored(self, mdl):
        assert read_molfile(self.chiral(mdl, parity=3)).stereo_elements == []

    def test_disabled(self, mdl):
        options = ReaderOptions(add_stereo_elements=False)
        assert read_molfile(self.chiral(mdl), options).stereo_elements == []

    def test_needs_coordinates(self, mdl):
        atoms = [mdl.atom("C", parity=1)] + [mdl.atom(s) for s in ("F", "Cl", "Br", "I")]
        text = mdl.molfile(atoms, [mdl.bond(1, i) for i in range(2, 6)])
        assert read_molfile(text).stereo_elements == []

    def test_stereo_perceiver_replaces(self, mdl):
        """A stereo perceiver gets the coordinate dimension of the record."""
        calls = []

        def perceiver(mol, dimension):
            calls.append(dimension)
            return []

        mol = read_molfile(self.chiral(mdl), stereo_perceiver=perceiver)
        assert calls == [2]
        assert mol.stereo_elements == []


class TestReaderState:
    """Test reader reuse and reading into an existing molecule."""

    def test_idempotent(self, charged_molfile):
        reader = MolfileReader()
        first = reader.read(charged_molfile)
        second = reader.read(charged_molfile)
        assert [(a.symbol, a.charge, a.implicit_hydrogens) for a in first.atoms] == \
            [(a.symbol, a.charge, a.implicit_hydrogens) for a in second.atoms]
        assert [(b.atom1_idx, b.atom2_idx, b.order) for b in first.bonds] == \
            [(b.atom1_idx, b.atom2_idx, b.order) for b in second.bonds]

    def test_read_into_molecule(self, ethanol_molfile, charged_molfile):
        reader = MolfileReader()
        mol = reader.read(ethanol_molfile)
        reader.read(charged_molfile, mol)
        assert mol.num_atoms == 8
        assert mol.num_bonds == 6
        assert (mol.bonds[2].atom1_idx, mol.bonds[2].atom2_idx) == (3, 4)
        # M  CHG indices are shifted past the first record
        assert mol.atoms[5].charge == -1
        assert mol.atoms[7].charge == 1
        assert mol.atoms[2].charge == 0
