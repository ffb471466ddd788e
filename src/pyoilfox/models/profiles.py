"""Display/unit profiles for named values.

Profiles are keyed by a small fixed classifier set. The field-to-profile
tables are versioned alongside the mapper: the newer schema generation
has no forecast or price fields and therefore no entries for them.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict

from pyoilfox._constants import SchemaVersion


class ValueType(IntEnum):
    BOOLEAN = 0
    INTEGER = 1
    FLOAT = 2
    STRING = 3


class ProfileKind(StrEnum):
    """Profile classifier; the value is the profile identifier in the sink."""

    CURRENCY = "Price"
    VOLUME_LITERS = "Liter"
    DISTANCE = "Distance"
    PERCENTAGE_INTENSITY = "~Intensity.100"
    PERCENTAGE_BATTERY = "~Battery.100"


class VariableProfile(BaseModel):
    """Formatting metadata the sink attaches to a named value."""

    model_config = ConfigDict(frozen=True)

    kind: ProfileKind
    value_type: ValueType
    digits: int = 0
    prefix: str = ""
    suffix: str = ""
    icon: str = ""
    builtin: bool = False
    """Built-in profiles already exist in the sink and are only referenced."""


PROFILES: dict[ProfileKind, VariableProfile] = {
    ProfileKind.CURRENCY: VariableProfile(
        kind=ProfileKind.CURRENCY,
        value_type=ValueType.FLOAT,
        digits=2,
        suffix=" €",
        icon="Euro",
    ),
    ProfileKind.VOLUME_LITERS: VariableProfile(
        kind=ProfileKind.VOLUME_LITERS,
        value_type=ValueType.FLOAT,
        digits=0,
        suffix=" Liter",
        icon="Drops",
    ),
    ProfileKind.DISTANCE: VariableProfile(
        kind=ProfileKind.DISTANCE,
        value_type=ValueType.INTEGER,
        suffix=" cm",
        icon="Gauge",
    ),
    ProfileKind.PERCENTAGE_INTENSITY: VariableProfile(
        kind=ProfileKind.PERCENTAGE_INTENSITY,
        value_type=ValueType.INTEGER,
        suffix=" %",
        icon="Intensity",
        builtin=True,
    ),
    ProfileKind.PERCENTAGE_BATTERY: VariableProfile(
        kind=ProfileKind.PERCENTAGE_BATTERY,
        value_type=ValueType.INTEGER,
        suffix=" %",
        icon="Battery",
        builtin=True,
    ),
}

_COMMON_MAPPINGS: dict[str, ProfileKind] = {
    "Current Level (L)": ProfileKind.VOLUME_LITERS,
    "Current Level (%)": ProfileKind.PERCENTAGE_INTENSITY,
    "Battery": ProfileKind.PERCENTAGE_BATTERY,
    "Volume": ProfileKind.VOLUME_LITERS,
    "Tank Height": ProfileKind.DISTANCE,
    "Filling Height": ProfileKind.DISTANCE,
    "Empty Height": ProfileKind.DISTANCE,
}

PROFILE_MAPPINGS: dict[SchemaVersion, dict[str, ProfileKind]] = {
    SchemaVersion.V1: {
        **_COMMON_MAPPINGS,
        "Level next month (L)": ProfileKind.VOLUME_LITERS,
        "Level next month (%)": ProfileKind.PERCENTAGE_INTENSITY,
        "Current Price": ProfileKind.CURRENCY,
    },
    SchemaVersion.V2: dict(_COMMON_MAPPINGS),
}


def profile_for(schema_version: SchemaVersion, field_name: str) -> VariableProfile | None:
    """Return the profile for *field_name*, or ``None`` for unformatted fields."""
    kind = PROFILE_MAPPINGS[schema_version].get(field_name)
    return PROFILES[kind] if kind is not None else None
