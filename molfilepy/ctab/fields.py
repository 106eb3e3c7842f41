"""
Fixed-column field decoding.

V2000 molfiles are made of fixed-width fields at fixed character offsets.
The functions here decode integers, coordinates, charge codes and bond
stereo codes from a line without tokenizing it. Lines may be shorter than
their nominal width; columns past the end of a line read as blanks.
"""

from __future__ import annotations

from typing import Final

from ..exceptions import FormatError
from ..types import BondStereo

DIGITS: Final[str] = "0123456789"

# Atom symbols that are not elements but are allowed in the symbol column
PSEUDO_LABELS: Final[frozenset[str]] = frozenset({
    "*", "A", "Q", "L", "LP", "R", "R#",
})

# Charge column code -> formal charge (4 is a legacy doublet radical)
CHARGE_CODES: Final[dict[str, int]] = {
    "1": 3,
    "2": 2,
    "3": 1,
    "4": 0,
    "5": -1,
    "6": -2,
    "7": -3,
}


def char_at(line: str, index: int) -> str:
    """Get the character at an index, or a space past the end of the line."""
    return line[index] if index < len(line) else " "


def length(line: str) -> int:
    """Length of a line ignoring trailing spaces."""
    return len(line.rstrip(" "))


def is_pseudo_element(symbol: str) -> bool:
    """Check if symbol is one of the accepted pseudo atom labels.

    Numbered R-groups (``R1``, ``R12``) are accepted too.
    """
    if symbol in PSEUDO_LABELS:
        return True
    return len(symbol) > 1 and symbol[0] == "R" and all(c in DIGITS for c in symbol[1:])


def read_int3(line: str, index: int) -> int:
    """Read an optionally signed integer from a 3-character field.

    The field may be padded with spaces on either side and the sign may be
    in the first or second column. Reading stops at the first blank after a
    nonzero digit or at any other non-digit character.

    Args:
        line: Input line.
        index: Offset of the first character of the field.

    Returns:
        The value; 0 for a blank field.

    Example:
        >>> read_int3("  5", 0), read_int3(" -5", 0), read_int3("999", 0)
        (5, -5, 999)
    """
    text = line[index:index + 3].ljust(3)
    sign = 1
    result = 0

    c = text[0]
    if c == "-":
        sign = -1
    elif c in DIGITS:
        result = ord(c) - 48
    elif c != " ":
        return 0

    for c in text[1:]:
        if c == " ":
            if result > 0:
                return sign * result
        elif c == "-":
            if result > 0:
                return sign * result
            sign = -1
        elif c in DIGITS:
            result = result * 10 + (ord(c) - 48)
        else:
            return sign * result

    return sign * result


def to_int(c: str) -> int:
    """Value of a digit character; 0 for anything else (e.g. a space)."""
    return ord(c) - 48 if c and c in DIGITS else 0


def read_uint(line: str, index: int, digits: int) -> int:
    """Read an unsigned integer of a fixed number of digits.

    Non-digit and missing characters count as zero digits.
    """
    result = 0
    for i in range(index, index + digits):
        result = result * 10 + to_int(char_at(line, i))
    return result


def sign(c: str) -> int:
    """-1 for a minus character, +1 otherwise."""
    return -1 if c == "-" else 1


def to_charge(c: str) -> int:
    """Convert a charge column code to a formal charge.

    Codes 1-3 are +3..+1, 5-7 are -1..-3, anything else is 0.
    """
    return CHARGE_CODES.get(c, 0)


def has_fixed_point(line: str, offset: int) -> bool:
    """Check if a coordinate field has its decimal point at column 5."""
    return char_at(line, offset + 5) == "."


def read_coordinate(line: str, offset: int) -> float:
    """Read a 10-character ``xxxxx.xxxx`` coordinate.

    The integral and fractional parts are read as integers and combined
    without floating point parsing. When the decimal point is not at the
    expected column the field is parsed leniently instead.

    Args:
        line: Input line.
        offset: Offset of the first character of the field.

    Returns:
        The coordinate value; 0.0 for an empty field.

    Raises:
        FormatError: If a field without a fixed decimal point is not a number.
    """
    if not has_fixed_point(line, offset):
        return _read_free_coordinate(line, offset)

    start = offset
    end = offset + 5
    while start < end and line[start] == " ":
        start += 1
    s = sign(char_at(line, start))
    if s < 0:
        start += 1
    integral = read_uint(line, start, end - start)
    fraction = read_uint(line, offset + 6, 4)
    return s * (integral * 10000 + fraction) / 10000.0


def _read_free_coordinate(line: str, offset: int) -> float:
    text = line[offset:offset + 10].strip()
    if not text:
        return 0.0

    dot = text.find(".")
    if dot == -1:
        try:
            return float(text)
        except ValueError:
            raise FormatError(f"Invalid coordinate: {text!r}", line=line, column=offset) from None

    s = sign(text[0])
    body = text[1:] if text[0] in "+-" else text
    dot = body.find(".")
    whole, frac = body[:dot], body[dot + 1:]
    if not all(c in DIGITS for c in whole + frac):
        raise FormatError(f"Invalid coordinate: {text!r}", line=line, column=offset)
    integral = int(whole) if whole else 0
    fraction = int(frac) if frac else 0
    scale = 10 ** len(frac)
    return s * (integral * scale + fraction) / scale


def format_coordinate(value: float) -> str:
    """Format a coordinate as a 10-character ``xxxxx.xxxx`` field."""
    return f"{value:10.4f}"


def to_stereo(code: int, bond_type: int, strict: bool = False) -> BondStereo:
    """Convert a bond stereo code to a BondStereo.

    Args:
        code: Stereo column value.
        bond_type: Bond type column value (1 single, 2 double).
        strict: Raise on combinations that make no chemical sense.

    Returns:
        The bond stereo; NONE for unknown codes in relaxed mode.

    Raises:
        FormatError: In strict mode, for an unknown code or a code that
            does not fit the bond order (e.g. a wedge on a double bond).
    """
    if code == 0:
        return BondStereo.E_Z_BY_COORDINATES if bond_type == 2 else BondStereo.NONE
    if code == 1:
        if strict and bond_type == 2:
            raise FormatError("stereo flag was 'up' but bond order was 2")
        return BondStereo.UP
    if code == 3:
        if strict and bond_type == 1:
            raise FormatError("stereo flag was 'cis/trans' but bond order was 1")
        return BondStereo.E_OR_Z
    if code == 4:
        if strict and bond_type == 2:
            raise FormatError("stereo flag was 'up/down' but bond order was 2")
        return BondStereo.UP_OR_DOWN
    if code == 6:
        if strict and bond_type == 2:
            raise FormatError("stereo flag was 'down' but bond order was 2")
        return BondStereo.DOWN
    if strict:
        raise FormatError(f"unknown bond stereo type: {code}")
    return BondStereo.NONE
