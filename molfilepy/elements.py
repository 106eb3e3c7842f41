"""
Chemical elements, isotopes and the MDL valence model.

This module provides element data, major isotope mass numbers and the
valence table used to derive implicit hydrogen counts from the explicit
bond order sum of an atom read from a molfile.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Final


class BondOrder(IntEnum):
    """Bond order enumeration.

    Aromatic and query bonds from a molfile have no concrete order and are
    reported as ``UNSET``.
    """

    UNSET = 0
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Element:
    """Immutable element data.

    Attributes:
        atomic_number: Atomic number (proton count).
        symbol: Element symbol (e.g., "C", "Cl").
        name: Full element name.
        major_isotope: Mass number of the most abundant isotope, or None
            when the element has no naturally abundant isotope.
    """

    atomic_number: int
    symbol: str
    name: str
    major_isotope: int | None = None

    # Class-level registry
    _by_symbol: ClassVar[dict[str, "Element"]] = {}
    _by_number: ClassVar[dict[int, "Element"]] = {}

    def __post_init__(self) -> None:
        Element._by_symbol[self.symbol] = self
        Element._by_number[self.atomic_number] = self

    @classmethod
    def from_symbol(cls, symbol: str) -> "Element | None":
        """Look up element by symbol (falls back to capitalized form)."""
        if symbol in cls._by_symbol:
            return cls._by_symbol[symbol]
        return cls._by_symbol.get(symbol.capitalize())

    @classmethod
    def from_atomic_number(cls, num: int) -> "Element | None":
        """Look up element by atomic number."""
        return cls._by_number.get(num)


@dataclass(frozen=True, slots=True)
class Isotope:
    """A specific isotope of an element."""

    symbol: str
    atomic_number: int
    mass_number: int


# (atomic_number, symbol, name, major_isotope)
_ELEMENTS_DATA: Final[list[tuple[int, str, str, int | None]]] = [
    (1, "H", "Hydrogen", 1),
    (2, "He", "Helium", 4),
    (3, "Li", "Lithium", 7),
    (4, "Be", "Beryllium", 9),
    (5, "B", "Boron", 11),
    (6, "C", "Carbon", 12),
    (7, "N", "Nitrogen", 14),
    (8, "O", "Oxygen", 16),
    (9, "F", "Fluorine", 19),
    (10, "Ne", "Neon", 20),
    (11, "Na", "Sodium", 23),
    (12, "Mg", "Magnesium", 24),
    (13, "Al", "Aluminum", 27),
    (14, "Si", "Silicon", 28),
    (15, "P", "Phosphorus", 31),
    (16, "S", "Sulfur", 32),
    (17, "Cl", "Chlorine", 35),
    (18, "Ar", "Argon", 40),
    (19, "K", "Potassium", 39),
    (20, "Ca", "Calcium", 40),
    (21, "Sc", "Scandium", 45),
    (22, "Ti", "Titanium", 48),
    (23, "V", "Vanadium", 51),
    (24, "Cr", "Chromium", 52),
    (25, "Mn", "Manganese", 55),
    (26, "Fe", "Iron", 56),
    (27, "Co", "Cobalt", 59),
    (28, "Ni", "Nickel", 58),
    (29, "Cu", "Copper", 63),
    (30, "Zn", "Zinc", 64),
    (31, "Ga", "Gallium", 69),
    (32, "Ge", "Germanium", 74),
    (33, "As", "Arsenic", 75),
    (34, "Se", "Selenium", 80),
    (35, "Br", "Bromine", 79),
    (36, "Kr", "Krypton", 84),
    (37, "Rb", "Rubidium", 85),
    (38, "Sr", "Strontium", 88),
    (39, "Y", "Yttrium", 89),
    (40, "Zr", "Zirconium", 90),
    (41, "Nb", "Niobium", 93),
    (42, "Mo", "Molybdenum", 98),
    (43, "Tc", "Technetium", None),
    (44, "Ru", "Ruthenium", 102),
    (45, "Rh", "Rhodium", 103),
    (46, "Pd", "Palladium", 106),
    (47, "Ag", "Silver", 107),
    (48, "Cd", "Cadmium", 114),
    (49, "In", "Indium", 115),
    (50, "Sn", "Tin", 120),
    (51, "Sb", "Antimony", 121),
    (52, "Te", "Tellurium", 130),
    (53, "I", "Iodine", 127),
    (54, "Xe", "Xenon", 132),
    (55, "Cs", "Cesium", 133),
    (56, "Ba", "Barium", 138),
    (57, "La", "Lanthanum", 139),
    (58, "Ce", "Cerium", 140),
    (59, "Pr", "Praseodymium", 141),
    (60, "Nd", "Neodymium", 142),
    (61, "Pm", "Promethium", None),
    (62, "Sm", "Samarium", 152),
    (63, "Eu", "Europium", 153),
    (64, "Gd", "Gadolinium", 158),
    (65, "Tb", "Terbium", 159),
    (66, "Dy", "Dysprosium", 164),
    (67, "Ho", "Holmium", 165),
    (68, "Er", "Erbium", 166),
    (69, "Tm", "Thulium", 169),
    (70, "Yb", "Ytterbium", 174),
    (71, "Lu", "Lutetium", 175),
    (72, "Hf", "Hafnium", 180),
    (73, "Ta", "Tantalum", 181),
    (74, "W", "Tungsten", 184),
    (75, "Re", "Rhenium", 187),
    (76, "Os", "Osmium", 192),
    (77, "Ir", "Iridium", 193),
    (78, "Pt", "Platinum", 195),
    (79, "Au", "Gold", 197),
    (80, "Hg", "Mercury", 202),
    (81, "Tl", "Thallium", 205),
    (82, "Pb", "Lead", 208),
    (83, "Bi", "Bismuth", 209),
    (84, "Po", "Polonium", None),
    (85, "At", "Astatine", None),
    (86, "Rn", "Radon", None),
    (87, "Fr", "Francium", None),
    (88, "Ra", "Radium", None),
    (89, "Ac", "Actinium", None),
    (90, "Th", "Thorium", 232),
    (91, "Pa", "Protactinium", 231),
    (92, "U", "Uranium", 238),
    (93, "Np", "Neptunium", None),
    (94, "Pu", "Plutonium", None),
    (95, "Am", "Americium", None),
    (96, "Cm", "Curium", None),
    (97, "Bk", "Berkelium", None),
    (98, "Cf", "Californium", None),
    (99, "Es", "Einsteinium", None),
    (100, "Fm", "Fermium", None),
    (101, "Md", "Mendelevium", None),
    (102, "No", "Nobelium", None),
    (103, "Lr", "Lawrencium", None),
    (104, "Rf", "Rutherfordium", None),
    (105, "Db", "Dubnium", None),
    (106, "Sg", "Seaborgium", None),
    (107, "Bh", "Bohrium", None),
    (108, "Hs", "Hassium", None),
    (109, "Mt", "Meitnerium", None),
    (110, "Ds", "Darmstadtium", None),
    (111, "Rg", "Roentgenium", None),
    (112, "Cn", "Copernicium", None),
    (113, "Nh", "Nihonium", None),
    (114, "Fl", "Flerovium", None),
    (115, "Mc", "Moscovium", None),
    (116, "Lv", "Livermorium", None),
    (117, "Ts", "Tennessine", None),
    (118, "Og", "Oganesson", None),
]

# Initialize elements
ELEMENTS: Final[tuple[Element, ...]] = tuple(
    Element(num, sym, name, major)
    for num, sym, name, major in _ELEMENTS_DATA
)


def is_element(symbol: str) -> bool:
    """Check if symbol is a periodic table element, matching case exactly."""
    elem = Element._by_symbol.get(symbol)
    return elem is not None


def get_atomic_number(symbol: str) -> int:
    """Get atomic number for an element symbol.

    Args:
        symbol: Element symbol (e.g., "C", "Cl").

    Returns:
        Atomic number, or 0 if not found.
    """
    elem = Element.from_symbol(symbol)
    return elem.atomic_number if elem else 0


def major_isotope(atomic_num: int) -> int | None:
    """Get the mass number of the most abundant isotope of an element.

    Args:
        atomic_num: Atomic number.

    Returns:
        Mass number, or None if the element is unknown or has no naturally
        abundant isotope.
    """
    elem = Element.from_atomic_number(atomic_num)
    return elem.major_isotope if elem else None


def isotope(symbol: str, mass_number: int) -> Isotope | None:
    """Get a specific isotope of an element, or None for an unknown symbol."""
    elem = Element.from_symbol(symbol)
    if elem is None:
        return None
    return Isotope(elem.symbol, elem.atomic_number, mass_number)


# ============================================================================
# MDL Valence Model
# ============================================================================
#
# The implicit valence of an atom depends on its element and charge. A
# charged atom takes the valences of the isoelectronic neutral atom, so the
# table is keyed on the count of outer electrons left after the charge is
# applied (outer electrons - charge). The implicit valence is the smallest
# allowed valence that is not less than the explicit bond order sum.

# Neutral outer electron count for main-group elements
OUTER_ELECTRONS: Final[dict[int, int]] = {
    # Group 13
    5: 3, 13: 3, 31: 3, 49: 3, 81: 3,
    # Group 14
    6: 4, 14: 4, 32: 4, 50: 4, 82: 4,
    # Group 15
    7: 5, 15: 5, 33: 5, 51: 5, 83: 5,
    # Group 16
    8: 6, 16: 6, 34: 6, 52: 6, 84: 6,
    # Group 17
    9: 7, 17: 7, 35: 7, 53: 7, 85: 7,
}

# Second period elements cannot expand their octet
_SECOND_PERIOD: Final[frozenset[int]] = frozenset({5, 6, 7, 8, 9})

_SECOND_PERIOD_VALENCES: Final[dict[int, tuple[int, ...]]] = {
    1: (1,),
    2: (2,),
    3: (3,),
    4: (4,),
    5: (3, 5),
    6: (2,),
    7: (1,),
}

_HEAVY_VALENCES: Final[dict[int, tuple[int, ...]]] = {
    1: (1,),
    2: (2,),
    3: (3,),
    4: (4,),
    5: (3, 5),
    6: (2, 4, 6),
    7: (1, 3, 5, 7),
}

# Hydrogen and the alkali metals: monovalent when neutral
_GROUP_1: Final[frozenset[int]] = frozenset({1, 3, 11, 19, 37, 55, 87})

# Alkaline earth metals
_GROUP_2: Final[frozenset[int]] = frozenset({4, 12, 20, 38, 56, 88})


def allowed_valences(atomic_num: int, charge: int) -> tuple[int, ...]:
    """Get the allowed valences of an element in a given charge state.

    Args:
        atomic_num: Atomic number.
        charge: Formal charge.

    Returns:
        Allowed valences in ascending order; empty if the valence model has
        no entry for this element/charge.
    """
    if atomic_num in _GROUP_1:
        return (1,) if charge == 0 else ()
    if atomic_num in _GROUP_2:
        if charge == 0:
            return (2,)
        if charge == 1:
            return (1,)
        return ()

    outer = OUTER_ELECTRONS.get(atomic_num)
    if outer is None:
        return ()

    remaining = outer - charge
    if atomic_num in _SECOND_PERIOD:
        return _SECOND_PERIOD_VALENCES.get(remaining, ())
    return _HEAVY_VALENCES.get(remaining, ())


def implicit_valence(atomic_num: int, charge: int, explicit_valence: int) -> int:
    """Compute the MDL implicit valence of an atom.

    Args:
        atomic_num: Atomic number (0 for pseudo atoms).
        charge: Formal charge.
        explicit_valence: Sum of bond orders plus unpaired electrons.

    Returns:
        The smallest allowed valence >= explicit_valence, or the explicit
        valence itself when no allowed valence fits.

    Example:
        >>> implicit_valence(6, 0, 2)
        4
        >>> implicit_valence(7, 1, 3)
        4
    """
    for valence in allowed_valences(atomic_num, charge):
        if valence >= explicit_valence:
            return valence
    return explicit_valence
