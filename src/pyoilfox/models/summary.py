"""Raw ``summary`` response shapes, one model family per schema generation.

The two generations are modelled as separate response types rather than
one model with conditional fields; :func:`pyoilfox.ingestion.summary.map_summary`
dispatches on the response type.
"""

from __future__ import annotations

from typing import Annotated, ClassVar

from pydantic import Field

from pyoilfox._constants import SchemaVersion
from pyoilfox.models._base import LenientList, OilFoxBaseModel, OptionalStr, ZeroFloat, ZeroInt


class Metering(OilFoxBaseModel):
    """A single level measurement reported by the device."""

    value: ZeroInt = 0
    """Distance from sensor to oil surface (empty height) in cm."""
    current_oil_height: ZeroInt = 0
    """Oil column height (filling height) in cm."""
    liters: ZeroFloat = 0.0
    """Current content in liters."""
    filling_percentage: ZeroInt = 0
    """Current content as percentage of the tank volume."""
    battery: ZeroInt = 0
    """Battery level in percent."""


class PrimaryProduct(OilFoxBaseModel):
    name: OptionalStr = None


class Partner(OilFoxBaseModel):
    """Dealer metadata attached to a device (older schema only)."""

    primary_products: Annotated[list[PrimaryProduct], LenientList] = Field(default_factory=list)


class PricePoint(OilFoxBaseModel):
    price: ZeroFloat = 0.0


class ForecastPoint(OilFoxBaseModel):
    liters: ZeroFloat = 0.0
    filling_percentage: ZeroInt = 0


class ChartData(OilFoxBaseModel):
    """History and forecast series; price history is oldest-first."""

    price_data: Annotated[list[PricePoint], LenientList] = Field(default_factory=list)
    forecast_data: Annotated[list[ForecastPoint], LenientList] = Field(default_factory=list)


class DeviceV1(OilFoxBaseModel):
    """Device entry of the older (``v3``) summary."""

    device_id: OptionalStr = Field(default=None, alias="id")
    hwid: OptionalStr = None
    name: OptionalStr = None
    tank_volume: ZeroFloat = 0.0
    tank_height: ZeroInt = 0
    metering: Metering = Field(default_factory=Metering)
    chart_data: ChartData = Field(default_factory=ChartData)
    partner: Partner = Field(default_factory=Partner)


class Tank(OilFoxBaseModel):
    volume: ZeroFloat = 0.0
    height: ZeroInt = 0


class DeviceV2(OilFoxBaseModel):
    """Device entry of the newer (``v4``) summary."""

    device_id: OptionalStr = Field(default=None, alias="id")
    hwid: OptionalStr = None
    name: OptionalStr = None
    tank: Tank = Field(default_factory=Tank)
    last_metering: Metering = Field(default_factory=Metering)


class SummaryV1Response(OilFoxBaseModel):
    schema_version: ClassVar[SchemaVersion] = SchemaVersion.V1

    devices: list[DeviceV1]


class SummaryV2Response(OilFoxBaseModel):
    schema_version: ClassVar[SchemaVersion] = SchemaVersion.V2

    devices: list[DeviceV2]


SummaryResponse = SummaryV1Response | SummaryV2Response

RESPONSE_MODELS: dict[SchemaVersion, type[SummaryV1Response] | type[SummaryV2Response]] = {
    SchemaVersion.V1: SummaryV1Response,
    SchemaVersion.V2: SummaryV2Response,
}
