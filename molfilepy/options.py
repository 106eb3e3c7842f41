"""
Reader configuration.

Options are immutable and passed explicitly into every reader; a parse
session never changes them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace as _replace
from enum import Enum
from typing import Any, Final, Mapping


class Mode(Enum):
    """Error policy of a reader.

    STRICT raises on every recoverable problem. RELAXED reports the problem
    as a warning and continues with a default.
    """

    STRICT = "strict"
    RELAXED = "relaxed"


# Historical setting names -> ReaderOptions field
SETTING_NAMES: Final[dict[str, str]] = {
    "ForceReadAs3DCoordinates": "force_3d",
    "InterpretHydrogenIsotopes": "interpret_hydrogen_isotopes",
    "AddStereoElements": "add_stereo_elements",
}


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError(f"Setting {name!r} expects a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class ReaderOptions:
    """Options controlling how molfiles and SD files are read.

    Attributes:
        mode: Error policy (default RELAXED).
        force_3d: Treat coordinates as 3D even when every z is zero.
        interpret_hydrogen_isotopes: Read ``D`` and ``T`` as hydrogen with
            mass number 2 and 3.
        add_stereo_elements: Create tetrahedral stereocenters from atom
            parities (and from coordinates when a perceiver is supplied).
        skip_on_error: Skip SD file records that fail to decode instead of
            stopping.
    """

    mode: Mode = Mode.RELAXED
    force_3d: bool = False
    interpret_hydrogen_isotopes: bool = True
    add_stereo_elements: bool = True
    skip_on_error: bool = False

    @property
    def strict(self) -> bool:
        """Whether the error policy is STRICT."""
        return self.mode is Mode.STRICT

    def replace(self, **changes: Any) -> "ReaderOptions":
        """Return a copy with some options changed."""
        return _replace(self, **changes)

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any],
        **overrides: Any,
    ) -> "ReaderOptions":
        """Build options from named reader settings.

        Args:
            settings: Mapping of setting name to a boolean or the strings
                ``"true"``/``"false"``. Both the historical names (e.g.
                ``ForceReadAs3DCoordinates``) and field names are accepted.
            **overrides: Field values applied after the settings.

        Returns:
            New ReaderOptions.

        Raises:
            ValueError: If a setting name is unknown or a value is not boolean.

        Example:
            >>> ReaderOptions.from_settings({"ForceReadAs3DCoordinates": "true"}).force_3d
            True
        """
        fields: dict[str, Any] = {}
        for name, value in settings.items():
            field_name = SETTING_NAMES.get(name, name)
            if field_name == "mode":
                fields["mode"] = value if isinstance(value, Mode) else Mode(str(value).lower())
                continue
            if field_name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown reader setting: {name!r}")
            fields[field_name] = _as_bool(name, value)
        fields.update(overrides)
        return cls(**fields)
