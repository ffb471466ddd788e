"""Summary response mapping.

Translates the vendor ``summary`` payload of either schema generation into
an ordered list of :class:`~pyoilfox.models.device.DeviceRecord`:

- parse the raw JSON into the schema-specific response model
- map each device entry with the generation's mapping function
- keep the vendor's entry order as record order

Individual fields never fail: missing or malformed values become the
type's zero value.  Only a missing or malformed top-level ``devices`` list
is fatal and raises :class:`~pyoilfox.exceptions.OilFoxFormatError`.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyoilfox._constants import SchemaVersion
from pyoilfox.exceptions import OilFoxFormatError
from pyoilfox.models.device import DeviceRecord
from pyoilfox.models.summary import RESPONSE_MODELS, DeviceV1, DeviceV2, SummaryResponse

_logger = logging.getLogger(__name__)


def parse_summary(raw: Any, schema_version: SchemaVersion) -> SummaryResponse:
    """Validate *raw* into the response model of *schema_version*.

    Raises
    ------
    OilFoxFormatError
        If the payload has no usable ``devices`` list.
    """
    model = RESPONSE_MODELS[SchemaVersion(schema_version)]
    if not isinstance(raw, dict) or not isinstance(raw.get("devices"), list):
        raise OilFoxFormatError(f"Summary response ({schema_version}) has no 'devices' list")
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise OilFoxFormatError(f"Summary response ({schema_version}) could not be parsed: {exc}") from exc


def _display_name(device_id: str, name: str | None, hwid: str | None) -> str:
    return name or hwid or device_id


def map_device_v1(device: DeviceV1, device_id: str) -> DeviceRecord:
    """Map an older-schema entry; populates oil type, forecast and price."""
    products = device.partner.primary_products
    prices = device.chart_data.price_data
    forecasts = device.chart_data.forecast_data
    metering = device.metering

    return DeviceRecord(
        device_id=device_id,
        name=_display_name(device_id, device.name, device.hwid),
        oil_type=products[0].name if products else None,
        volume=device.tank_volume,
        tank_height=device.tank_height,
        empty_height=metering.value,
        filling_height=metering.current_oil_height,
        current_liters=metering.liters,
        current_percent=metering.filling_percentage,
        # Forecast list is ordered nearest-first; price history oldest-first.
        forecast_liters=forecasts[0].liters if forecasts else 0.0,
        forecast_percent=forecasts[0].filling_percentage if forecasts else 0,
        battery=metering.battery,
        current_price=prices[-1].price if prices else 0.0,
    )


def map_device_v2(device: DeviceV2, device_id: str) -> DeviceRecord:
    """Map a newer-schema entry; oil type, forecast and price stay unset."""
    metering = device.last_metering

    return DeviceRecord(
        device_id=device_id,
        name=_display_name(device_id, device.name, device.hwid),
        volume=device.tank.volume,
        tank_height=device.tank.height,
        empty_height=metering.value,
        filling_height=metering.current_oil_height,
        current_liters=metering.liters,
        current_percent=metering.filling_percentage,
        battery=metering.battery,
    )


def map_summary(response: SummaryResponse) -> list[DeviceRecord]:
    """Map a parsed summary into device records in vendor order.

    Entries without an identifier are skipped.  When an identifier repeats,
    the later entry replaces the earlier one but keeps its position.
    """
    records: dict[str, DeviceRecord] = {}
    for index, device in enumerate(response.devices):
        device_id = device.device_id
        if not device_id:
            _logger.warning("Skipping device entry %d without id in %s summary", index, response.schema_version)
            continue

        if isinstance(device, DeviceV1):
            record = map_device_v1(device, device_id)
        else:
            record = map_device_v2(device, device_id)

        if device_id in records:
            _logger.warning("Device %s listed more than once; keeping the last entry", device_id)
        records[device_id] = record
    return list(records.values())


def normalize_summary(raw: Any, schema_version: SchemaVersion) -> list[DeviceRecord]:
    """Parse and map a raw summary payload in one step."""
    return map_summary(parse_summary(raw, schema_version))
