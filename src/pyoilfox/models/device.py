"""Normalized per-device record."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeviceRecord(BaseModel):
    """Uniform view of one tank, independent of the schema generation.

    Field declaration order is the display order in the named-value sink.
    Each field's alias is the name of the named value it becomes.

    The optional fields (``oil_type``, the forecast pair and
    ``current_price``) are part of the record's field set only when the
    mapper sets them explicitly; a mapper that leaves them unset produces
    a record without those named values at all, which is different from
    setting them to ``None`` or zero.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_id: str = Field(exclude=True)
    """Vendor-assigned device identifier; the reconciliation key."""

    name: str = Field(alias="Name")
    oil_type: str | None = Field(default=None, alias="Oil Type")
    volume: float = Field(alias="Volume")
    tank_height: int = Field(alias="Tank Height")
    empty_height: int = Field(alias="Empty Height")
    filling_height: int = Field(alias="Filling Height")
    current_liters: float = Field(alias="Current Level (L)")
    current_percent: int = Field(alias="Current Level (%)")
    forecast_liters: float | None = Field(default=None, alias="Level next month (L)")
    forecast_percent: int | None = Field(default=None, alias="Level next month (%)")
    battery: int = Field(alias="Battery")
    current_price: float | None = Field(default=None, alias="Current Price")

    def named_values(self) -> list[tuple[str, Any]]:
        """Return ``(field name, value)`` pairs in declaration order."""
        return list(self.model_dump(by_alias=True, exclude_unset=True).items())

    @property
    def field_names(self) -> list[str]:
        return [name for name, _value in self.named_values()]
