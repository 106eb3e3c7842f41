"""
Reader selection by CTab version.

The SD file iterator asks the factory for a reader per record. Readers are
built on first use and cached for the rest of the session.
"""

from __future__ import annotations

from typing import Any, Callable

from ..exceptions import FormatError
from ..options import ReaderOptions
from ..stereo import StereoPerceiver
from .handler import ErrorHandler
from .keys import CTabVersion
from .reader import MolfileReader

# Builds a record reader from the session options. A record reader has
# ``read(source, molecule=None)``, ``read_data(lines, molecule)`` and
# ``diagnostics`` like MolfileReader.
ReaderBuilder = Callable[[ReaderOptions], Any]


class ReaderFactory:
    """Creates and caches one reader per CTab version.

    V2000 and unversioned records are read with MolfileReader. There is no
    built-in V3000 reader; register one to read V3000 records.

    Args:
        options: Options for every reader built by this factory.
        error_handler: Passed to the built-in reader.
        stereo_perceiver: Passed to the built-in reader.
    """

    def __init__(
        self,
        options: ReaderOptions | None = None,
        *,
        error_handler: ErrorHandler | None = None,
        stereo_perceiver: StereoPerceiver | None = None,
    ) -> None:
        self.options = options if options is not None else ReaderOptions()

        def build_v2000(opts: ReaderOptions) -> MolfileReader:
            return MolfileReader(
                opts,
                error_handler=error_handler,
                stereo_perceiver=stereo_perceiver,
            )

        self._builders: dict[CTabVersion, ReaderBuilder] = {
            CTabVersion.V2000: build_v2000,
            CTabVersion.UNSPECIFIED: build_v2000,
        }
        self._readers: dict[CTabVersion, Any] = {}

    def register(self, version: CTabVersion, builder: ReaderBuilder) -> None:
        """Use a builder for records of a CTab version.

        Drops a cached reader for that version.
        """
        self._builders[version] = builder
        self._readers.pop(version, None)

    def reader_for(self, version: CTabVersion) -> Any:
        """Get the cached reader for a CTab version, building it if needed.

        Raises:
            FormatError: If no reader is registered for the version.
        """
        reader = self._readers.get(version)
        if reader is None:
            builder = self._builders.get(version)
            if builder is None:
                raise FormatError(f"No reader available for {version.value} records")
            reader = builder(self.options)
            self._readers[version] = reader
        return reader
