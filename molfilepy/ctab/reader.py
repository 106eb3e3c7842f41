"""
Single record V2000 molfile reader.

Composes the block handlers for one record: molecule block, properties
block and data block, followed by the valence model and optional stereo
perception from coordinates.

    >>> from molfilepy import read_molfile
    >>> mol = read_molfile(text)                          # doctest: +SKIP
    >>> mol.atoms[0].implicit_hydrogens                   # doctest: +SKIP
    3
"""

from __future__ import annotations

from typing import Iterable

from ..elements import implicit_valence
from ..options import ReaderOptions
from ..stereo import StereoPerceiver
from ..types import Atom, Molecule
from .data_block import DataBlockHandler
from .handler import Diagnostic, ErrorHandler, ErrorReporter, LineReader
from .molecule_block import MoleculeBlockHandler
from .properties_block import PropertiesBlockHandler


def as_lines(source: str | Iterable[str]) -> Iterable[str]:
    """Get lines from a string or pass an iterable of lines through."""
    if isinstance(source, str):
        return source.splitlines()
    return source


def apply_valence_model(atom: Atom, explicit_valence: int, unpaired: int) -> None:
    """Set the valence and implicit hydrogen count of an atom.

    A valence read from the valence column takes precedence; otherwise the
    MDL valence model picks the valence for the element and charge.

    Args:
        atom: Atom to update.
        explicit_valence: Bond order sum plus unpaired electrons.
        unpaired: Number of unpaired electrons on the atom.
    """
    if atom.valence is not None:
        if atom.valence >= explicit_valence:
            atom.implicit_hydrogens = atom.valence - (explicit_valence - unpaired)
        else:
            atom.implicit_hydrogens = 0
        return

    valence = implicit_valence(atom.atomic_number or 0, atom.charge, explicit_valence)
    if valence < explicit_valence:
        atom.valence = explicit_valence
        atom.implicit_hydrogens = 0
    else:
        atom.valence = valence
        atom.implicit_hydrogens = valence - explicit_valence


class MolfileReader:
    """Reads V2000 molfile records.

    A reader holds record-local scratch state in its block handlers; use one
    reader per thread.

    Args:
        options: Reader options (defaults to relaxed mode).
        error_handler: Called with every Diagnostic as it is reported.
        stereo_perceiver: Called as ``stereo_perceiver(molecule, dimension)``
            to create stereo elements from 2D or 3D coordinates. When given,
            its result replaces the stereo elements created from parities.

    Example:
        >>> reader = MolfileReader(ReaderOptions(mode=Mode.STRICT))  # doctest: +SKIP
        >>> mol = reader.read(open("benzene.mol"))                   # doctest: +SKIP
    """

    def __init__(
        self,
        options: ReaderOptions | None = None,
        *,
        error_handler: ErrorHandler | None = None,
        stereo_perceiver: StereoPerceiver | None = None,
    ) -> None:
        self.options = options if options is not None else ReaderOptions()
        self.reporter = ErrorReporter(self.options, error_handler)
        self.stereo_perceiver = stereo_perceiver
        self._molecule_block = self.new_molecule_block_handler()
        self._properties_block = self.new_properties_block_handler()
        self._data_block = self.new_data_block_handler()

    def new_molecule_block_handler(self) -> MoleculeBlockHandler:
        """Create the handler for the header, atom block and bond block.

        Subclasses override the three ``new_*_block_handler`` methods to read a
        block with another handler; each receives the reader's reporter.
        """
        return MoleculeBlockHandler(self.reporter)

    def new_properties_block_handler(self) -> PropertiesBlockHandler:
        return PropertiesBlockHandler(self.reporter)

    def new_data_block_handler(self) -> DataBlockHandler:
        return DataBlockHandler(self.reporter)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Problems reported while reading the last record."""
        return self.reporter.diagnostics

    def read(
        self,
        source: str | Iterable[str] | LineReader,
        molecule: Molecule | None = None,
    ) -> Molecule | None:
        """Read one record.

        Args:
            source: Molfile text, an iterable of lines (e.g. an open file),
                or a LineReader positioned at a title line.
            molecule: Molecule to read into; atoms already present are kept
                and the record's indices are shifted past them.

        Returns:
            The molecule, or None if the source holds no record.

        Raises:
            FormatError: Malformed record (any problem in strict mode).
            ReferentialError: Index that does not resolve.
            StreamError: Input failure or input ending inside the record.
        """
        lines = source if isinstance(source, LineReader) else LineReader(as_lines(source))
        if molecule is None:
            molecule = Molecule()

        self.reporter.clear()

        block = self._molecule_block
        result = block.read(lines, molecule)
        if result is None:
            return None

        self._properties_block.read(lines, molecule, block.atom_count, block.bond_count)
        self._data_block.read(lines, molecule)

        has_query_bonds = block.has_query_bonds
        offset = molecule.num_atoms - block.atom_count
        for i, valence in enumerate(block.explicit_valence):
            if valence is None:
                # aromatic bonds count as query bonds here
                has_query_bonds = True
                continue
            unpaired = molecule.connected_single_electron_count(offset + i)
            apply_valence_model(molecule.atoms[offset + i], valence + unpaired, unpaired)

        if (
            self.stereo_perceiver is not None
            and not has_query_bonds
            and self.options.add_stereo_elements
            and block.has_x
            and block.has_y
        ):
            if block.has_z:
                molecule.stereo_elements = list(self.stereo_perceiver(molecule, 3))
            elif not self.options.force_3d:
                molecule.stereo_elements = list(self.stereo_perceiver(molecule, 2))

        return molecule

    def read_data(self, lines: LineReader, molecule: Molecule) -> None:
        """Read SD data fields up to the record delimiter into a molecule."""
        self._data_block.read(lines, molecule)


def read_molfile(
    source: str | Iterable[str],
    options: ReaderOptions | None = None,
    **kwargs,
) -> Molecule | None:
    """Read a single molfile record.

    Args:
        source: Molfile text or an iterable of lines.
        options: Reader options (defaults to relaxed mode).
        **kwargs: ``error_handler`` and ``stereo_perceiver`` for MolfileReader.

    Returns:
        The molecule, or None if the source holds no record.

    Raises:
        FormatError: Malformed record (any problem in strict mode).
        ReferentialError: Index that does not resolve.
        StreamError: Input failure or truncated record.
    """
    return MolfileReader(options, **kwargs).read(source)
