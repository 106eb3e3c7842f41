"""
Substructure groups (Sgroups).

While a properties block is read, each Sgroup is collected into a mutable
SgroupRecord keyed by its record-local id. Parent links are kept as ids.
At the end of the block the records are finalized into typed Sgroup views
(Superatom, MultipleGroup, RepeatUnit or the generic Sgroup) and parent ids
are resolved to the finalized instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Iterable


class SgroupType(Enum):
    """Sgroup types keyed by their 3-letter CTab code."""

    SUPERATOM = "SUP"
    MULTIPLE = "MUL"
    REPEAT_UNIT = "SRU"
    MONOMER = "MON"
    MER = "MER"
    COPOLYMER = "COP"
    CROSSLINK = "CRO"
    MODIFIED = "MOD"
    GRAFT = "GRA"
    COMPONENT = "COM"
    MIXTURE = "MIX"
    FORMULATION = "FOR"
    DATA = "DAT"
    ANY_POLYMER = "ANY"
    GENERIC = "GEN"

    @classmethod
    def from_ctab(cls, key: str) -> "SgroupType | None":
        """Look up a type by CTab code, or None if unknown."""
        try:
            return cls(key)
        except ValueError:
            return None


class SgroupKey(Enum):
    """Attribute keys collected from Sgroup property lines."""

    SUBTYPE = "subtype"
    CONNECTIVITY = "connectivity"
    SUBSCRIPT = "subscript"
    EXPANSION = "expansion"
    BRACKET_STYLE = "bracket_style"
    COMPONENT_NUMBER = "component_number"
    PARENT_ATOM_LIST = "parent_atom_list"


# Allowed values checked in strict mode
COPOLYMER_SUBTYPES: Final[frozenset[str]] = frozenset({"ALT", "RAN", "BLO"})
CONNECTIVITY_CODES: Final[frozenset[str]] = frozenset({"HH", "HT", "EU"})

POLYMER_TYPES: Final[frozenset[SgroupType]] = frozenset({
    SgroupType.REPEAT_UNIT,
    SgroupType.MONOMER,
    SgroupType.MER,
    SgroupType.COPOLYMER,
    SgroupType.CROSSLINK,
    SgroupType.MODIFIED,
    SgroupType.GRAFT,
    SgroupType.ANY_POLYMER,
})


@dataclass(frozen=True, slots=True)
class SgroupBracket:
    """A bracket drawn from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(slots=True)
class SgroupRecord:
    """Mutable Sgroup data collected while a properties block is read.

    Attributes:
        id: Record-local Sgroup id.
        type: Sgroup type.
        atoms: Member atom indices (0-based).
        bonds: Crossing/member bond indices (0-based).
        parent_ids: Ids of parent Sgroups.
        brackets: Bracket coordinates.
        attributes: Collected attributes.
        declared: False for a stub created for an id with no STY line.
    """

    id: int
    type: SgroupType = SgroupType.GENERIC
    atoms: list[int] = field(default_factory=list)
    bonds: list[int] = field(default_factory=list)
    parent_ids: list[int] = field(default_factory=list)
    brackets: list[SgroupBracket] = field(default_factory=list)
    attributes: dict[SgroupKey, Any] = field(default_factory=dict)
    declared: bool = True


@dataclass(eq=False)
class Sgroup:
    """A finalized Sgroup.

    Attributes:
        id: Record-local Sgroup id.
        type: Sgroup type.
        atoms: Member atom indices (0-based).
        bonds: Bond indices (0-based).
        brackets: Bracket coordinates.
        attributes: Attribute values by key.
        parents: Parent Sgroups.
    """

    id: int
    type: SgroupType
    atoms: tuple[int, ...] = ()
    bonds: tuple[int, ...] = ()
    brackets: tuple[SgroupBracket, ...] = ()
    attributes: dict[SgroupKey, Any] = field(default_factory=dict)
    parents: list["Sgroup"] = field(default_factory=list, repr=False)

    def get(self, key: SgroupKey, default: Any = None) -> Any:
        """Get an attribute value."""
        return self.attributes.get(key, default)

    @property
    def subscript(self) -> str | None:
        return self.attributes.get(SgroupKey.SUBSCRIPT)


class Superatom(Sgroup):
    """Abbreviation (SUP) Sgroup."""

    @property
    def label(self) -> str | None:
        """Abbreviation label, e.g. "Ph"."""
        return self.subscript

    @property
    def expanded(self) -> bool:
        return bool(self.attributes.get(SgroupKey.EXPANSION, False))


class MultipleGroup(Sgroup):
    """Multiple group (MUL) Sgroup."""

    @property
    def multiplier(self) -> int | None:
        """Repeat count from the subscript, if numeric."""
        text = self.subscript
        if text is not None and text.isdigit():
            return int(text)
        return None

    @property
    def parent_atoms(self) -> tuple[int, ...]:
        return tuple(self.attributes.get(SgroupKey.PARENT_ATOM_LIST, ()))


class RepeatUnit(Sgroup):
    """Polymer Sgroup (SRU, COP, MON and other repeating structures)."""

    @property
    def connectivity(self) -> str | None:
        """Head-to-head, head-to-tail or either-unknown ("HH", "HT", "EU")."""
        return self.attributes.get(SgroupKey.CONNECTIVITY)

    @property
    def subtype(self) -> str | None:
        return self.attributes.get(SgroupKey.SUBTYPE)

    @property
    def bracket_style(self) -> int | None:
        return self.attributes.get(SgroupKey.BRACKET_STYLE)


def _view_class(sgroup_type: SgroupType) -> type[Sgroup]:
    if sgroup_type is SgroupType.SUPERATOM:
        return Superatom
    if sgroup_type is SgroupType.MULTIPLE:
        return MultipleGroup
    if sgroup_type in POLYMER_TYPES:
        return RepeatUnit
    return Sgroup


def finalize_sgroups(records: Iterable[SgroupRecord]) -> list[Sgroup]:
    """Convert Sgroup records to typed Sgroups.

    Records are emitted in ascending id order. Parent ids are resolved to
    the finalized instances; ids that name no record are dropped.

    Args:
        records: Collected Sgroup records.

    Returns:
        Finalized Sgroups.
    """
    ordered = sorted(records, key=lambda r: r.id)
    by_id: dict[int, Sgroup] = {}

    for record in ordered:
        cls = _view_class(record.type)
        by_id[record.id] = cls(
            id=record.id,
            type=record.type,
            atoms=tuple(record.atoms),
            bonds=tuple(record.bonds),
            brackets=tuple(record.brackets),
            attributes=dict(record.attributes),
        )

    for record in ordered:
        sgroup = by_id[record.id]
        sgroup.parents = [by_id[p] for p in record.parent_ids if p in by_id]

    return [by_id[r.id] for r in ordered]


def has_parent_cycle(records: dict[int, SgroupRecord], child: int, parent: int) -> bool:
    """Check if linking child -> parent would create a cycle.

    Args:
        records: Sgroup records by id.
        child: Id of the child Sgroup.
        parent: Id of the proposed parent.

    Returns:
        True if child is reachable from parent through parent links.
    """
    stack = [parent]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if current == child:
            return True
        if current in seen:
            continue
        seen.add(current)
        record = records.get(current)
        if record is not None:
            stack.extend(record.parent_ids)
    return False
