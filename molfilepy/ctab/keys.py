"""
Line classification: property keys, CTab versions and SD data headers.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class PropertyKey(Enum):
    """Kind of a properties block line.

    ``M  XXX`` keys are named ``M_XXX`` and their value is the 3-letter tag.
    """

    ATOM_ALIAS = "A"
    ATOM_VALUE = "V"
    GROUP_ABBREVIATION = "G"
    SKIP = "S"

    # Generic
    M_CHG = "CHG"
    M_RAD = "RAD"
    M_ISO = "ISO"
    # Query
    M_RBC = "RBC"
    M_SUB = "SUB"
    M_UNS = "UNS"
    M_LIN = "LIN"
    M_ALS = "ALS"
    # Rgroup
    M_APO = "APO"
    M_AAL = "AAL"
    M_RGP = "RGP"
    M_LOG = "LOG"
    # Sgroup
    M_STY = "STY"
    M_SST = "SST"
    M_SLB = "SLB"
    M_SCN = "SCN"
    M_SDS = "SDS"
    M_SAL = "SAL"
    M_SBL = "SBL"
    M_SPA = "SPA"
    M_SMT = "SMT"
    M_CRS = "CRS"
    M_SDI = "SDI"
    M_SBV = "SBV"
    M_SDT = "SDT"
    M_SDD = "SDD"
    M_SCD = "SCD"
    M_SED = "SED"
    M_SPL = "SPL"
    M_SNC = "SNC"
    M_SBT = "SBT"
    # 3D features
    M_3D = "$3D"
    # ACD/Labs atom label
    M_ZZC = "ZZC"

    M_END = "END"

    UNKNOWN = ""

    @classmethod
    def of(cls, line: str) -> "PropertyKey":
        """Classify a properties block line by its leading characters.

        Args:
            line: A line from the properties block.

        Returns:
            The property key; UNKNOWN for anything not recognized.

        Example:
            >>> PropertyKey.of("M  CHG  1   1  -1")
            <PropertyKey.M_CHG: 'CHG'>
        """
        if len(line) < 5:
            return cls.UNKNOWN
        if line[1:3] != "  ":
            return cls.UNKNOWN

        first = line[0]
        if first == "M":
            return _M_SUFFIX.get(line[3:6], cls.UNKNOWN)
        return _SINGLE_LETTER.get(first, cls.UNKNOWN)


_M_SUFFIX: Final[dict[str, PropertyKey]] = {
    key.value: key for key in PropertyKey if key.name.startswith("M_")
}

_SINGLE_LETTER: Final[dict[str, PropertyKey]] = {
    key.value: key
    for key in (
        PropertyKey.ATOM_ALIAS,
        PropertyKey.ATOM_VALUE,
        PropertyKey.GROUP_ABBREVIATION,
        PropertyKey.SKIP,
    )
}


class CTabVersion(Enum):
    """Connection table version from the counts line."""

    V2000 = "V2000"
    V3000 = "V3000"
    UNSPECIFIED = "unspecified"

    @classmethod
    def of_header(cls, header: str) -> "CTabVersion":
        """Get the version stamped at column 34 of a counts line.

        Example:
            >>> CTabVersion.of_header("  5  4  0  0  0  0  0  0  0  0999 V2000")
            <CTabVersion.V2000: 'V2000'>
        """
        if len(header) < 39:
            return cls.UNSPECIFIED
        if header[34] not in "vV":
            return cls.UNSPECIFIED
        if header[35] == "2":
            return cls.V2000
        if header[35] == "3":
            return cls.V3000
        return cls.UNSPECIFIED


def data_header(line: str) -> str | None:
    """Get the field name of an SD data header line.

    A header starts with ``>`` and names the field between angle brackets,
    e.g. ``> 1 <NAME>`` or ``>  <NAME>  (1)``.

    Returns:
        The field name, or None if the line is not a data header.
    """
    if not line.startswith(">"):
        return None
    i = line.find("<", 1)
    if i < 0:
        return None
    j = line.find(">", i)
    if j < 0:
        return None
    return line[i + 1:j]


def is_record_delimiter(line: str) -> bool:
    """Check if a line ends an SD file record."""
    return line.startswith("$$$$")
