"""Internal constants shared across the library."""

from __future__ import annotations

from enum import IntEnum, StrEnum

BASE_URL = "https://api.oilfox.io"
USER_AGENT = "okhttp/3.2.0"
LOGIN_ENDPOINT = "/v3/login"
REQUEST_TIMEOUT: float = 10.0
DEFAULT_INTERVAL_MINUTES = 60
DEFAULT_PARENT_SCOPE = "oilfox"


class SchemaVersion(StrEnum):
    """Generation of the vendor summary response.

    ``v1`` is the older shape with nested ``chartData`` price/forecast
    arrays, ``v2`` the newer one with a flattened ``lastMetering`` object.
    """

    V1 = "v1"
    V2 = "v2"


#: API version prefix per schema generation.
API_VERSION: dict[SchemaVersion, str] = {
    SchemaVersion.V1: "v3",
    SchemaVersion.V2: "v4",
}

#: Summary endpoint per schema generation (relative to the API version prefix).
SUMMARY_PATH: dict[SchemaVersion, str] = {
    SchemaVersion.V1: "user/summary",
    SchemaVersion.V2: "summary",
}


class InstanceStatus(IntEnum):
    """Health codes reported to the status sink."""

    ACTIVE = 102
    INVALID_CREDENTIALS = 201
    CONNECTION_FAILED = 202
    INVALID_RESPONSE = 203
    STORAGE_FAILED = 204
