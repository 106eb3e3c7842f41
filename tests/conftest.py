"""Test configuration and fixtures for molfilepy tests."""

from __future__ import annotations

import pytest


class MolfileBuilder:
    """Builds fixed-column V2000 lines for tests."""

    @staticmethod
    def atom(
        symbol: str,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        mass_diff: int = 0,
        charge_code: int = 0,
        parity: int = 0,
        valence: int = 0,
        mapping: int = 0,
    ) -> str:
        """Full-width (69 column) atom line."""
        return (
            f"{x:10.4f}{y:10.4f}{z:10.4f} {symbol:<3}{mass_diff:2d}"
            f"{charge_code:3d}{parity:3d}  0  0{valence:3d}  0  0  0{mapping:3d}  0  0"
        )

    @staticmethod
    def bond(a1: int, a2: int, bond_type: int = 1, stereo: int = 0) -> str:
        """Full-width (21 column) bond line."""
        return f"{a1:3d}{a2:3d}{bond_type:3d}{stereo:3d}  0  0  0"

    @staticmethod
    def counts(n_atoms: int, n_bonds: int, version: str = "V2000") -> str:
        """Counts line with a version stamp at column 34."""
        return f"{n_atoms:3d}{n_bonds:3d}  0  0  0  0  0  0  0  0999 {version}"

    @classmethod
    def molfile(
        cls,
        atoms: list[str],
        bonds: list[str] = (),
        properties: list[str] = (),
        title: str = "test",
        program: str = "  molfilepy",
        remark: str = "",
        version: str = "V2000",
    ) -> str:
        """Complete molfile text ending with M  END."""
        lines = [title, program, remark, cls.counts(len(atoms), len(bonds), version)]
        lines.extend(atoms)
        lines.extend(bonds)
        lines.extend(properties)
        lines.append("M  END")
        return "\n".join(lines)


@pytest.fixture
def mdl() -> type[MolfileBuilder]:
    """Builder for fixed-column molfile lines."""
    return MolfileBuilder


@pytest.fixture
def ethanol_molfile(mdl) -> str:
    """Ethanol with 2D coordinates."""
    return mdl.molfile(
        [
            mdl.atom("C", 0.0, 0.0),
            mdl.atom("C", 1.2990, 0.75),
            mdl.atom("O", 2.5981, 0.0),
        ],
        [mdl.bond(1, 2), mdl.bond(2, 3)],
        title="ethanol",
    )


@pytest.fixture
def charged_molfile() -> str:
    """Five atoms, four bonds, charges from an M  CHG line."""
    return "\n".join([
        "charged",
        "  molfilepy",
        "",
        "  5  4  0  0000  0  0  0  0  0999 V2000",
        "    0.0000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0",
        "    1.2990    0.7500    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0",
        "    2.5981    0.0000    0.0000 O   0  0  0  0  0  0  0  0  0  0  0  0",
        "    3.8971    0.7500    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0",
        "    5.1962    0.0000    0.0000 N   0  0  0  0  0  0  0  0  0  0  0  0",
        "  1  2  1  0  0  0  0",
        "  2  3  1  0  0  0  0",
        "  3  4  1  0  0  0  0",
        "  4  5  1  0  0  0  0",
        "M  CHG  2   3  -1   5   1",
        "M  END",
    ])


@pytest.fixture
def benzene_molfile(mdl) -> str:
    """Benzene written with aromatic (type 4) bonds."""
    coords = [
        (0.0, 1.4), (1.2124, 0.7), (1.2124, -0.7),
        (0.0, -1.4), (-1.2124, -0.7), (-1.2124, 0.7),
    ]
    return mdl.molfile(
        [mdl.atom("C", x, y) for x, y in coords],
        [mdl.bond(i + 1, (i + 1) % 6 + 1, 4) for i in range(6)],
        title="benzene",
    )


@pytest.fixture
def sdf_text(mdl, ethanol_molfile, benzene_molfile) -> str:
    """Three-record SD file with data fields."""
    water = mdl.molfile([mdl.atom("O")], title="water")
    return "\n".join([
        ethanol_molfile,
        "> 1 <NAME>",
        "ethanol",
        "",
        "> 1 <MW>",
        "46.07",
        "",
        "$$$$",
        benzene_molfile,
        "> 2 <NAME>",
        "benzene",
        "",
        "$$$$",
        water,
        "> 3 <NAME>",
        "water",
        "",
        "$$$$",
    ]) + "\n"
