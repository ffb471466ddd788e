"""Client configuration for pyoilfox."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyoilfox._constants import (
    BASE_URL,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_PARENT_SCOPE,
    REQUEST_TIMEOUT,
    SchemaVersion,
)
from pyoilfox.exceptions import OilFoxConfigError


@dataclasses.dataclass(frozen=True)
class Credentials:
    """Account credentials, immutable for the lifetime of a run."""

    email: str
    password: str = dataclasses.field(repr=False)

    @property
    def is_complete(self) -> bool:
        """Whether both email and password are set."""
        return bool(self.email) and bool(self.password)


@dataclasses.dataclass(frozen=True)
class OilFoxConfig:
    """Client configuration.

    Parameters
    ----------
    email : str
        OilFox account email.
    password : str
        OilFox account password.
    interval : int
        Poll interval in minutes.
    schema_version : SchemaVersion
        Generation of the summary response the account is served.
        Selects both the API version prefix and the mapping rules.
    base_url : str
        API host. Defaults to the public OilFox endpoint.
    timeout : float
        Total per-request timeout in seconds.
    parent_scope : str
        Scope under which device groups are created in the named-value
        sink. Two runs sharing a scope share their groups.
    """

    email: str
    password: str = dataclasses.field(repr=False)
    interval: int = DEFAULT_INTERVAL_MINUTES
    schema_version: SchemaVersion = SchemaVersion.V1
    base_url: str = BASE_URL
    timeout: float = REQUEST_TIMEOUT
    parent_scope: str = DEFAULT_PARENT_SCOPE

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "schema_version", SchemaVersion(self.schema_version))
        except ValueError as exc:
            raise OilFoxConfigError(f"Unknown schema version: {self.schema_version!r}") from exc
        try:
            interval = int(self.interval)
            timeout = float(self.timeout)
        except (TypeError, ValueError) as exc:
            raise OilFoxConfigError(
                f"interval and timeout must be numeric, got {self.interval!r} and {self.timeout!r}"
            ) from exc
        if interval < 1:
            raise OilFoxConfigError(f"interval must be at least 1 minute, got {self.interval}")
        if timeout <= 0:
            raise OilFoxConfigError(f"timeout must be positive, got {self.timeout}")
        object.__setattr__(self, "interval", interval)
        object.__setattr__(self, "timeout", timeout)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)

    @property
    def interval_seconds(self) -> float:
        return float(self.interval) * 60.0

    @classmethod
    def from_env(cls, **overrides: Any) -> OilFoxConfig:
        """Create configuration from environment variables.

        Reads ``OILFOX_EMAIL``, ``OILFOX_PASSWORD`` and the optional
        ``OILFOX_*`` variables below. Explicit keyword arguments override
        environment values.

        Raises
        ------
        OilFoxConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "OILFOX_EMAIL": "email",
            "OILFOX_PASSWORD": "password",
            "OILFOX_SCHEMA_VERSION": "schema_version",
            "OILFOX_BASE_URL": "base_url",
            "OILFOX_PARENT_SCOPE": "parent_scope",
        }
        config_kwargs: dict[str, Any] = {"email": "", "password": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("OILFOX_INTERVAL")
        if interval_env is not None and "interval" not in overrides:
            try:
                config_kwargs["interval"] = int(interval_env)
            except ValueError as exc:
                raise OilFoxConfigError(f"OILFOX_INTERVAL is not an integer: {interval_env!r}") from exc

        timeout_env = env.get("OILFOX_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            try:
                config_kwargs["timeout"] = float(timeout_env)
            except ValueError as exc:
                raise OilFoxConfigError(f"OILFOX_TIMEOUT is not a number: {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
