"""
Molfilepy - Pure Python MDL molfile and SD file reader.

A zero-dependency library for reading V2000 molfiles and SD files into
molecular graphs, with strict and relaxed error handling.

    >>> from molfilepy import read_sdf_file
    >>> for mol in read_sdf_file("compounds.sdf"):   # doctest: +SKIP
    ...     print(mol.title, len(mol))

Submodules:
    molfilepy.ctab    - Molfile/SD file decoding (fields, blocks, readers)
    molfilepy.sgroup  - Substructure groups
    molfilepy.stereo  - Stereo elements
"""

__version__ = "0.1.0"

# Core types
from molfilepy.types import Atom, PseudoAtom, Bond, Molecule, BondStereo, QueryBondType

# Reading
from molfilepy.ctab import (
    MolfileReader,
    TolerantMolfileReader,
    SDFReader,
    ReaderFactory,
    read_molfile,
    iter_sdf,
    read_sdf_file,
    Diagnostic,
)

# Configuration
from molfilepy.options import Mode, ReaderOptions

# Exceptions and warnings
from molfilepy.exceptions import (
    ChemError,
    ParseError,
    FormatError,
    ReferentialError,
    StreamError,
    MolfileWarning,
    TruncationWarning,
    RecordSkippedWarning,
)

# Element data
from molfilepy.elements import Element, BondOrder, implicit_valence

# Sgroups and stereo
from molfilepy.sgroup import Sgroup, SgroupType, SgroupKey
from molfilepy.stereo import TetrahedralChirality, Winding

# Submodules
from molfilepy import ctab, sgroup, stereo

__all__ = [
    # Types
    "Atom", "PseudoAtom", "Bond", "Molecule", "BondStereo", "QueryBondType",
    # Reading
    "MolfileReader", "TolerantMolfileReader", "SDFReader", "ReaderFactory",
    "read_molfile", "iter_sdf", "read_sdf_file", "Diagnostic",
    # Configuration
    "Mode", "ReaderOptions",
    # Exceptions
    "ChemError", "ParseError", "FormatError", "ReferentialError", "StreamError",
    "MolfileWarning", "TruncationWarning", "RecordSkippedWarning",
    # Elements
    "Element", "BondOrder", "implicit_valence",
    # Sgroups and stereo
    "Sgroup", "SgroupType", "SgroupKey", "TetrahedralChirality", "Winding",
    # Submodules
    "ctab", "sgroup", "stereo",
]
