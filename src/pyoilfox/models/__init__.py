"""Data models for OilFox API responses and normalized device records."""

from pyoilfox.models.device import DeviceRecord
from pyoilfox.models.profiles import PROFILE_MAPPINGS, PROFILES, ProfileKind, ValueType, VariableProfile, profile_for
from pyoilfox.models.summary import (
    DeviceV1,
    DeviceV2,
    Metering,
    SummaryResponse,
    SummaryV1Response,
    SummaryV2Response,
)
from pyoilfox.models.token import AuthToken

__all__ = [
    "PROFILES",
    "PROFILE_MAPPINGS",
    "AuthToken",
    "DeviceRecord",
    "DeviceV1",
    "DeviceV2",
    "Metering",
    "ProfileKind",
    "SummaryResponse",
    "SummaryV1Response",
    "SummaryV2Response",
    "ValueType",
    "VariableProfile",
    "profile_for",
]
