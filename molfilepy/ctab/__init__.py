"""V2000 connection table (CTab) decoding: molfiles and SD files."""

from molfilepy.ctab.fields import (
    read_int3,
    read_uint,
    read_coordinate,
    format_coordinate,
    to_charge,
    to_stereo,
)
from molfilepy.ctab.keys import PropertyKey, CTabVersion, data_header
from molfilepy.ctab.handler import Diagnostic, ErrorReporter, LineReader
from molfilepy.ctab.molecule_block import MoleculeBlockHandler
from molfilepy.ctab.properties_block import PropertiesBlockHandler
from molfilepy.ctab.data_block import DataBlockHandler
from molfilepy.ctab.reader import MolfileReader, read_molfile, apply_valence_model
from molfilepy.ctab.tolerant import TolerantMoleculeBlockHandler, TolerantMolfileReader
from molfilepy.ctab.factory import ReaderFactory
from molfilepy.ctab.iterator import SDFReader, iter_sdf, read_sdf_file, is_end_of_molecule

__all__ = [
    "read_int3",
    "read_uint",
    "read_coordinate",
    "format_coordinate",
    "to_charge",
    "to_stereo",
    "PropertyKey",
    "CTabVersion",
    "data_header",
    "Diagnostic",
    "ErrorReporter",
    "LineReader",
    "MoleculeBlockHandler",
    "PropertiesBlockHandler",
    "DataBlockHandler",
    "MolfileReader",
    "read_molfile",
    "apply_valence_model",
    "TolerantMoleculeBlockHandler",
    "TolerantMolfileReader",
    "ReaderFactory",
    "SDFReader",
    "iter_sdf",
    "read_sdf_file",
    "is_end_of_molecule",
]
