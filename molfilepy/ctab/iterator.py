"""
SD file iteration.

SDFReader reads an SD file line by line, collects the structure of each
record up to ``M  END``, decodes it with the reader for the record's CTab
version and then reads the data fields that follow up to ``$$$$``.

    >>> from molfilepy import read_sdf_file
    >>> for mol in read_sdf_file("compounds.sdf.gz"):   # doctest: +SKIP
    ...     print(mol.title, mol.properties.get("NAME"))
"""

from __future__ import annotations

import gzip
import re
import warnings
from pathlib import Path
from typing import Callable, Final, Iterable, Iterator

from ..exceptions import ChemError, MolfileWarning, RecordSkippedWarning
from ..options import ReaderOptions
from ..stereo import StereoPerceiver
from ..types import Molecule
from .factory import ReaderFactory
from .handler import Diagnostic, ErrorHandler, LineReader
from .keys import CTabVersion, is_record_delimiter
from .reader import as_lines

VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[vV](2000|3000)")

# Counts line of a record (1-based)
COUNTS_LINE: Final[int] = 4


def is_end_of_molecule(line: str) -> bool:
    """Default end of structure test: the ``M  END`` line."""
    return line.startswith("M  END")


class SDFReader:
    """Iterator over the molecules of an SD file.

    Each record is decoded independently. A record that fails to decode
    stops the iteration, or is skipped when ``options.skip_on_error`` is set.
    Errors reading the input itself always propagate.

    Args:
        source: SD file text or an iterable of lines (e.g. an open file).
        options: Reader options (defaults to relaxed mode, no skipping).
        factory: Chooses the reader for each CTab version.
        end_of_molecule: Predicate marking the last line of a structure.
        error_handler: Passed to the readers built by the default factory.
        stereo_perceiver: Passed to the readers built by the default factory.

    Attributes:
        diagnostics: Records that failed to decode, one entry each.
        record_number: Number of records seen so far.

    Example:
        >>> mols = list(SDFReader(sdf_text))   # doctest: +SKIP
    """

    def __init__(
        self,
        source: str | Iterable[str],
        options: ReaderOptions | None = None,
        *,
        factory: ReaderFactory | None = None,
        end_of_molecule: Callable[[str], bool] = is_end_of_molecule,
        error_handler: ErrorHandler | None = None,
        stereo_perceiver: StereoPerceiver | None = None,
    ) -> None:
        self.options = options if options is not None else ReaderOptions()
        self.factory = factory if factory is not None else ReaderFactory(
            self.options,
            error_handler=error_handler,
            stereo_perceiver=stereo_perceiver,
        )
        self.end_of_molecule = end_of_molecule
        self.diagnostics: list[Diagnostic] = []
        self.record_number = 0
        self._lines = LineReader(as_lines(source))
        self._done = False

    def __iter__(self) -> Iterator[Molecule]:
        return self

    def __next__(self) -> Molecule:
        if self._done:
            raise StopIteration
        molecule = self._read_next()
        if molecule is None:
            self._done = True
            raise StopIteration
        return molecule

    def _read_next(self) -> Molecule | None:
        buffer: list[str] = []
        version = CTabVersion.UNSPECIFIED

        while True:
            line = self._lines.readline()
            if line is None:
                return None

            buffer.append(line)
            if len(buffer) == COUNTS_LINE:
                match = VERSION_PATTERN.search(line)
                if match:
                    version = CTabVersion.V2000 if match.group(1) == "2000" else CTabVersion.V3000

            if self.end_of_molecule(line):
                self.record_number += 1
                molecule = self._decode(buffer, version)
                if molecule is not None:
                    return molecule
                if not self.options.skip_on_error:
                    return None
                self._skip_record()
                buffer = []
                version = CTabVersion.UNSPECIFIED
            elif is_record_delimiter(line):
                buffer = []
                version = CTabVersion.UNSPECIFIED

    def _decode(self, buffer: list[str], version: CTabVersion) -> Molecule | None:
        """Decode a buffered structure and read its data fields.

        Returns None if the record could not be decoded; the failure is
        recorded in ``diagnostics``.
        """
        try:
            reader = self.factory.reader_for(version)
            molecule = reader.read(buffer)
        except ChemError as e:
            self._record_failure(str(e))
            return None

        if molecule is None:
            self._record_failure("Record holds no molecule")
            return None

        reader.read_data(self._lines, molecule)
        return molecule

    def _record_failure(self, message: str) -> None:
        diagnostic = Diagnostic(
            f"Error while reading record {self.record_number}: {message}",
            self._lines.line_number,
        )
        self.diagnostics.append(diagnostic)
        if self.options.skip_on_error:
            warnings.warn(f"Skipping record: {diagnostic}", RecordSkippedWarning, stacklevel=4)
        else:
            warnings.warn(f"Stopping at record: {diagnostic}", MolfileWarning, stacklevel=4)

    def _skip_record(self) -> None:
        while True:
            line = self._lines.readline()
            if line is None or is_record_delimiter(line):
                return


def iter_sdf(
    source: str | Iterable[str],
    options: ReaderOptions | None = None,
    **kwargs,
) -> Iterator[Molecule]:
    """Iterate over the molecules of SD file text or lines.

    Args:
        source: SD file text or an iterable of lines.
        options: Reader options.
        **kwargs: Passed to SDFReader.

    Returns:
        Iterator of molecules.
    """
    return SDFReader(source, options, **kwargs)


def _open_sdf(path: Path) -> Iterator[str]:
    if path.suffix == ".gz":
        with gzip.open(path, "rt", encoding="utf-8", errors="replace") as stream:
            yield from stream
    else:
        with path.open("r", encoding="utf-8", errors="replace") as stream:
            yield from stream


def read_sdf_file(
    path: str | Path,
    options: ReaderOptions | None = None,
    **kwargs,
) -> Iterator[Molecule]:
    """Iterate over the molecules of an SD file on disk.

    Files ending in ``.gz`` are decompressed on the fly. The file is closed
    when the iterator is exhausted or garbage collected.

    Args:
        path: Path to an ``.sdf`` or ``.sdf.gz`` file.
        options: Reader options.
        **kwargs: Passed to SDFReader.

    Yields:
        Molecules in file order.

    Raises:
        StreamError: If the file cannot be read.
    """
    yield from SDFReader(_open_sdf(Path(path)), options, **kwargs)
