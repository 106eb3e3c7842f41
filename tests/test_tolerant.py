"""Tests for the tolerant atom line decoder and chemical shift columns."""

import pytest

from molfilepy import (
    FormatError,
    Mode,
    MolfileWarning,
    ReaderFactory,
    ReaderOptions,
    TolerantMolfileReader,
    iter_sdf,
)
from molfilepy.ctab.handler import ErrorReporter
from molfilepy.ctab.keys import CTabVersion
from molfilepy.ctab.tolerant import TolerantMoleculeBlockHandler
from molfilepy.types import FIRST_SHIFT, SECOND_SHIFT

STRICT = ReaderOptions(mode=Mode.STRICT)

# Shift columns written after a full 69 column atom line
FIRST = f"{128.5:10.4f}"
SECOND = f"{3.25:8.3f}"


def handler(options=None):
    return TolerantMoleculeBlockHandler(ErrorReporter(options or ReaderOptions()))


class TestShifts:
    """Test chemical shifts after the atom fields."""

    def test_first_shift(self, mdl):
        atom = handler().read_atom(mdl.atom("C") + FIRST, 5)
        assert atom.properties[FIRST_SHIFT] == pytest.approx(128.5)
        assert SECOND_SHIFT not in atom.properties

    def test_both_shifts(self, mdl):
        atom = handler().read_atom(mdl.atom("C") + FIRST + SECOND, 5)
        assert atom.properties[FIRST_SHIFT] == pytest.approx(128.5)
        assert atom.properties[SECOND_SHIFT] == pytest.approx(3.25)

    def test_no_shifts(self, mdl):
        atom = handler().read_atom(mdl.atom("C"), 5)
        assert FIRST_SHIFT not in atom.properties

    def test_bad_shift(self, mdl):
        line = mdl.atom("C") + "      n/a1"
        with pytest.warns(MolfileWarning, match="first shift"):
            atom = handler().read_atom(line, 5)
        assert FIRST_SHIFT not in atom.properties
        with pytest.raises(FormatError, match="first shift"):
            handler(STRICT).read_atom(line, 5)


class TestAtomFields:
    """Test field-by-field atom line decoding."""

    def test_standard_fields(self, mdl):
        atom = handler().read_atom(mdl.atom("C", 1.5, -2.0, mass_diff=1, charge_code=3, valence=15, mapping=7), 5)
        assert atom.point3d == pytest.approx((1.5, -2.0, 0.0))
        assert atom.mass_number == 13
        assert atom.charge == 1
        assert atom.valence == 0
        assert atom.mapping == 7

    def test_free_format_coordinates(self):
        """Coordinates need not have the decimal point at column 5."""
        line = f"{'1.25':>10}{'-2.5':>10}{'0':>10} C   0  0"
        atom = handler().read_atom(line, 5)
        assert atom.point3d == pytest.approx((1.25, -2.5, 0.0))
        assert atom.symbol == "C"

    def test_bad_coordinate(self):
        line = f"{'abc':>10}{'0.0':>10}{'0.0':>10} C   0  0"
        with pytest.raises(FormatError, match="coordinate") as excinfo:
            handler().read_atom(line, 5)
        assert excinfo.value.column == 0

    def test_trailing_space(self, mdl):
        line = mdl.atom("N") + "   "
        with pytest.warns(MolfileWarning, match="Trailing space"):
            atom = handler().read_atom(line, 5)
        assert atom.symbol == "N"
        with pytest.raises(FormatError, match="Trailing space"):
            handler(STRICT).read_atom(line, 5)

    def test_missing_charge(self, mdl):
        line = mdl.atom("C")[:36]
        with pytest.warns(MolfileWarning, match="charge is missing"):
            atom = handler().read_atom(line, 5)
        assert atom.charge == 0
        with pytest.raises(FormatError, match="charge is missing"):
            handler(STRICT).read_atom(line, 5)

    def test_unknown_charge_code(self, mdl):
        line = mdl.atom("C", charge_code=9)
        with pytest.warns(MolfileWarning, match="charge code"):
            atom = handler().read_atom(line, 5)
        assert atom.charge == 0

    def test_pseudo_atom(self, mdl):
        atom = handler().read_atom(mdl.atom("R1", mass_diff=2, valence=3), 5)
        assert atom.is_pseudo
        assert atom.mass_number is None
        assert atom.valence is None


class TestTolerantReader:
    """Test reading whole records with the tolerant handler."""

    def test_read_record(self, mdl):
        text = mdl.molfile(
            [mdl.atom("C") + FIRST + SECOND, mdl.atom("O", 1.4, 0.0) + FIRST],
            [mdl.bond(1, 2)],
        )
        mol = TolerantMolfileReader().read(text)
        assert mol.atoms[0].properties[SECOND_SHIFT] == pytest.approx(3.25)
        assert mol.atoms[1].properties[FIRST_SHIFT] == pytest.approx(128.5)
        assert [a.implicit_hydrogens for a in mol.atoms] == [3, 1]

    def test_registered_with_factory(self, mdl):
        factory = ReaderFactory()
        factory.register(CTabVersion.V2000, TolerantMolfileReader)
        text = mdl.molfile([mdl.atom("C") + FIRST], title="shifted") + "\n$$$$\n"
        (mol,) = iter_sdf(text, factory=factory)
        assert mol.title == "shifted"
        assert mol.atoms[0].properties[FIRST_SHIFT] == pytest.approx(128.5)
