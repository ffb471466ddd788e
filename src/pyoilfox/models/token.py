"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthToken(BaseModel):
    """Token returned after successful login.

    Parameters
    ----------
    access_token : str
        Opaque bearer token for data requests.
    raw : dict
        Full decoded login response for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
