"""
Stereo elements created from molfile atom parities.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .types import Molecule


class Winding(Enum):
    """Winding of the three ligands following the first one."""

    CLOCKWISE = "clockwise"
    ANTI_CLOCKWISE = "anti_clockwise"

    def invert(self) -> "Winding":
        """Return the opposite winding."""
        if self is Winding.CLOCKWISE:
            return Winding.ANTI_CLOCKWISE
        return Winding.CLOCKWISE


@dataclass(frozen=True, slots=True)
class TetrahedralChirality:
    """A tetrahedral stereocenter.

    Looking from the first ligand, the remaining three ligands are arranged
    with the given winding. When the focus atom has only three neighbors it
    appears as its own fourth ligand.

    Attributes:
        focus: Index of the stereocenter atom.
        ligands: Indices of the four ligand atoms.
        winding: Winding of ligands 2-4 viewed from ligand 1.
    """

    focus: int
    ligands: tuple[int, int, int, int]
    winding: Winding


# Perceives stereo elements from coordinates: (molecule, dimension) -> elements
StereoPerceiver = Callable[["Molecule", int], list]
