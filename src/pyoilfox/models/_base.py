"""Base model and lenient field types for OilFox API responses.

Every raw response model inherits from :class:`OilFoxBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that turns a non-object payload
  into an empty one and drops ``null`` values, so field defaults are
  used instead of raising.

Scalar fields use the ``Zero*`` annotated types, which coerce missing or
unparseable values to the type's zero value.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from pyoilfox.ingestion.normalize import as_list, float_or_zero, int_or_zero, safe_str

ZeroFloat = Annotated[float, BeforeValidator(float_or_zero)]
"""Float that coerces missing/invalid input to ``0.0``."""

ZeroInt = Annotated[int, BeforeValidator(int_or_zero)]
"""Integer that coerces missing/invalid input to ``0``."""

OptionalStr = Annotated[str | None, BeforeValidator(safe_str)]
"""String that coerces empty/non-scalar input to ``None``."""

LenientList = BeforeValidator(as_list)
"""Validator for list fields: anything but a list becomes ``[]``."""


class OilFoxBaseModel(BaseModel):
    """Base for OilFox raw response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Replace non-object payloads with ``{}`` and drop ``null`` values."""
        if isinstance(values, BaseModel):
            return values
        if not isinstance(values, dict):
            return {}
        return {key: value for key, value in values.items() if value is not None}
