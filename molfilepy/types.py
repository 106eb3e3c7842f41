"""
Core molecular data types.

This module defines the molecular graph that the molfile readers populate:
Atom, PseudoAtom, Bond and Molecule, together with the bond stereo and query
enumerations and the property keys used for values read from a record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Iterator

from .elements import BondOrder, get_atomic_number

if TYPE_CHECKING:
    from .sgroup import Sgroup
    from .stereo import TetrahedralChirality


# Molecule-level property keys
TITLE: Final[str] = "title"
REMARK: Final[str] = "remark"
PROGRAM: Final[str] = "program"

# Atom-level property keys
COMMENT: Final[str] = "comment"
ACDLABS_LABEL: Final[str] = "acdlabs_label"
GROUP_ABBREVIATION: Final[str] = "group_abbreviation"
ABBREVIATION_ATTACHMENT: Final[str] = "abbreviation_attachment"
FIRST_SHIFT: Final[str] = "first shift"
SECOND_SHIFT: Final[str] = "second shift"


class BondStereo(Enum):
    """Bond stereo flag from the stereo column of a bond line."""

    NONE = "none"
    UP = "up"
    DOWN = "down"
    UP_OR_DOWN = "up_or_down"
    E_Z_BY_COORDINATES = "e_z_by_coordinates"
    E_OR_Z = "e_or_z"


class QueryBondType(Enum):
    """Query bond types (bond type codes 5-8)."""

    SINGLE_OR_DOUBLE = 5
    SINGLE_OR_AROMATIC = 6
    DOUBLE_OR_AROMATIC = 7
    ANY = 8


@dataclass(slots=True)
class Bond:
    """Represents a chemical bond between two atoms.

    Attributes:
        idx: Unique index of this bond in the molecule.
        atom1_idx: Index of the first atom.
        atom2_idx: Index of the second atom.
        order: Bond order; UNSET for aromatic and query bonds.
        is_aromatic: Whether this bond is aromatic (bond type 4).
        stereo: Stereo flag.
        query: Query bond type, or None for a concrete bond.
    """

    idx: int
    atom1_idx: int
    atom2_idx: int
    order: BondOrder = BondOrder.SINGLE
    is_aromatic: bool = False
    stereo: BondStereo = BondStereo.NONE
    query: QueryBondType | None = None

    def other_atom(self, atom_idx: int) -> int:
        """Get the index of the atom on the other end of this bond.

        Args:
            atom_idx: Index of one atom in the bond.

        Returns:
            Index of the other atom.

        Raises:
            ValueError: If atom_idx is not part of this bond.
        """
        if atom_idx == self.atom1_idx:
            return self.atom2_idx
        if atom_idx == self.atom2_idx:
            return self.atom1_idx
        raise ValueError(f"Atom {atom_idx} not in bond {self.idx}")

    def __contains__(self, atom_idx: int) -> bool:
        """Check if atom is part of this bond."""
        return atom_idx in (self.atom1_idx, self.atom2_idx)


@dataclass(slots=True)
class Atom:
    """Represents an atom in a molecule.

    Attributes:
        idx: Unique index of this atom in the molecule.
        symbol: Element symbol (e.g., "C", "N", "Cl").
        atomic_number: Atomic number; 0 for pseudo atoms.
        charge: Formal charge.
        mass_number: Mass number, or None for natural abundance. A negative
            value marks a mass difference that could not be resolved yet.
        is_aromatic: Whether this atom is aromatic.
        point2d: 2D coordinates, if the record has 2D coordinates.
        point3d: 3D coordinates, if the record has 3D coordinates.
        stereo_parity: Atom stereo parity (0 none, 1/2 winding, 3 either).
        valence: Valence override from the valence column.
        implicit_hydrogens: Implicit hydrogen count from the valence model.
        mapping: Atom-atom mapping number, or None.
        properties: Free-form atom properties.
        bond_indices: Indices of bonds connected to this atom.
    """

    idx: int
    symbol: str
    atomic_number: int | None = None
    charge: int = 0
    mass_number: int | None = None
    is_aromatic: bool = False
    point2d: tuple[float, float] | None = None
    point3d: tuple[float, float, float] | None = None
    stereo_parity: int = 0
    valence: int | None = None
    implicit_hydrogens: int | None = None
    mapping: int | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    bond_indices: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.atomic_number is None:
            self.atomic_number = get_atomic_number(self.symbol)

    @property
    def is_pseudo(self) -> bool:
        """Whether this atom is a pseudo atom."""
        return False

    def neighbors(self, mol: "Molecule") -> Iterator[int]:
        """Iterate over indices of neighboring atoms.

        Args:
            mol: Parent molecule.

        Yields:
            Indices of atoms bonded to this atom.
        """
        for bond_idx in self.bond_indices:
            bond = mol.bonds[bond_idx]
            yield bond.other_atom(self.idx)


@dataclass(slots=True)
class PseudoAtom(Atom):
    """An atom carrying a free-text label instead of an element.

    R-groups, query wildcards (``A``, ``Q``, ``L``, ``LP``, ``*``) and
    unrecognized symbols read in relaxed mode are pseudo atoms. The atomic
    number of a pseudo atom is always 0.

    Attributes:
        label: The pseudo atom label (e.g., "R1", "A", "*").
    """

    label: str = ""

    def __post_init__(self) -> None:
        self.atomic_number = 0

    @property
    def is_pseudo(self) -> bool:
        return True


@dataclass
class Molecule:
    """Represents a molecular structure read from a molfile.

    A molecule consists of atoms connected by bonds, plus the record level
    data that a molfile carries: free-form properties (title, SD data
    fields), single electrons, stereo elements and Sgroups.

    Attributes:
        atoms: List of atoms in the molecule.
        bonds: List of bonds in the molecule.
        properties: Molecule-level properties.
        single_electrons: Atom indices carrying one unpaired electron each.
        stereo_elements: Tetrahedral stereocenters.
        sgroups: Substructure groups.
        is_query: Whether the molecule contains query bonds.

    Example:
        >>> mol = Molecule()
        >>> c1 = mol.add_atom("C")
        >>> c2 = mol.add_atom("O")
        >>> mol.add_bond(c1, c2)
        0
        >>> len(mol)
        2
    """

    atoms: list[Atom] = field(default_factory=list)
    bonds: list[Bond] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    single_electrons: list[int] = field(default_factory=list)
    stereo_elements: list["TetrahedralChirality"] = field(default_factory=list)
    sgroups: list["Sgroup"] = field(default_factory=list)
    is_query: bool = False

    def __len__(self) -> int:
        """Return number of atoms."""
        return len(self.atoms)

    def __iter__(self) -> Iterator[Atom]:
        """Iterate over atoms."""
        return iter(self.atoms)

    def __getitem__(self, idx: int) -> Atom:
        """Get atom by index."""
        return self.atoms[idx]

    @property
    def num_atoms(self) -> int:
        """Number of atoms."""
        return len(self.atoms)

    @property
    def num_bonds(self) -> int:
        """Number of bonds."""
        return len(self.bonds)

    @property
    def title(self) -> str | None:
        """Title line of the record, if any."""
        return self.properties.get(TITLE)

    def add_atom(
        self,
        symbol: str,
        *,
        charge: int = 0,
        mass_number: int | None = None,
        is_aromatic: bool = False,
        point2d: tuple[float, float] | None = None,
        point3d: tuple[float, float, float] | None = None,
    ) -> int:
        """Add an atom to the molecule.

        Args:
            symbol: Element symbol.
            charge: Formal charge.
            is_aromatic: Whether atom is aromatic.
            mass_number: Mass number.
            point2d: 2D coordinates.
            point3d: 3D coordinates.

        Returns:
            Index of the newly added atom.
        """
        atom = Atom(
            idx=-1,
            symbol=symbol,
            charge=charge,
            mass_number=mass_number,
            is_aromatic=is_aromatic,
            point2d=point2d,
            point3d=point3d,
        )
        return self.append_atom(atom)

    def append_atom(self, atom: Atom) -> int:
        """Append an already constructed atom and assign its index.

        Args:
            atom: Atom to append.

        Returns:
            Index of the appended atom.
        """
        atom.idx = len(self.atoms)
        atom.bond_indices = []
        self.atoms.append(atom)
        return atom.idx

    def add_bond(
        self,
        atom1_idx: int,
        atom2_idx: int,
        *,
        order: BondOrder = BondOrder.SINGLE,
        is_aromatic: bool = False,
        stereo: BondStereo = BondStereo.NONE,
        query: QueryBondType | None = None,
    ) -> int:
        """Add a bond between two atoms.

        Args:
            atom1_idx: Index of the first atom.
            atom2_idx: Index of the second atom.
            order: Bond order.
            is_aromatic: Whether bond is aromatic.
            stereo: Stereo flag.
            query: Query bond type.

        Returns:
            Index of the newly added bond.

        Raises:
            IndexError: If atom indices are out of bounds.
        """
        n = len(self.atoms)
        if not (0 <= atom1_idx < n and 0 <= atom2_idx < n):
            raise IndexError(f"Atom index out of bounds: {atom1_idx}, {atom2_idx}")

        idx = len(self.bonds)
        bond = Bond(
            idx=idx,
            atom1_idx=atom1_idx,
            atom2_idx=atom2_idx,
            order=order,
            is_aromatic=is_aromatic,
            stereo=stereo,
            query=query,
        )
        self.bonds.append(bond)
        self.atoms[atom1_idx].bond_indices.append(idx)
        self.atoms[atom2_idx].bond_indices.append(idx)
        return idx

    def replace_atom(self, idx: int, atom: Atom) -> Atom:
        """Replace the atom at an index, keeping its index and bonds.

        Args:
            idx: Index of the atom to replace.
            atom: Replacement atom.

        Returns:
            The atom that was replaced.

        Raises:
            IndexError: If idx is out of bounds.
        """
        old = self.atoms[idx]
        atom.idx = idx
        atom.bond_indices = old.bond_indices
        self.atoms[idx] = atom
        return old

    def get_atom(self, idx: int) -> Atom:
        """Get atom by index (no negative indexing).

        Raises:
            IndexError: If idx is out of bounds.
        """
        if not 0 <= idx < len(self.atoms):
            raise IndexError(f"Atom index out of bounds: {idx}")
        return self.atoms[idx]

    def get_bond(self, idx: int) -> Bond:
        """Get bond by index (no negative indexing).

        Raises:
            IndexError: If idx is out of bounds.
        """
        if not 0 <= idx < len(self.bonds):
            raise IndexError(f"Bond index out of bounds: {idx}")
        return self.bonds[idx]

    def get_bond_between(self, atom1_idx: int, atom2_idx: int) -> Bond | None:
        """Find the bond between two atoms.

        Args:
            atom1_idx: Index of the first atom.
            atom2_idx: Index of the second atom.

        Returns:
            Bond object if found, None otherwise.
        """
        for bond_idx in self.atoms[atom1_idx].bond_indices:
            bond = self.bonds[bond_idx]
            if atom1_idx in bond and atom2_idx in bond:
                return bond
        return None

    def connected_atoms(self, idx: int) -> list[Atom]:
        """Get the neighbors of an atom in bond order."""
        return [self.atoms[n] for n in self.atoms[idx].neighbors(self)]

    def add_single_electron(self, idx: int) -> None:
        """Place one unpaired electron on an atom."""
        self.single_electrons.append(idx)

    def connected_single_electron_count(self, idx: int) -> int:
        """Count the unpaired electrons on an atom."""
        return self.single_electrons.count(idx)

    def set_property(self, key: str, value: Any) -> None:
        """Set a molecule-level property."""
        self.properties[key] = value

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a molecule-level property."""
        return self.properties.get(key, default)
