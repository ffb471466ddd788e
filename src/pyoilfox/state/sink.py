"""Sink interfaces consumed by the session manager, reconciler and engine.

Implementations live in :mod:`pyoilfox.state.tokens`,
:mod:`pyoilfox.state.store` and :mod:`pyoilfox.state.status`; hosts may
supply their own as long as they honor the idempotence contract below.
"""

from __future__ import annotations

from typing import Any, Protocol

from pyoilfox._constants import InstanceStatus
from pyoilfox.models.profiles import VariableProfile

GroupHandle = int


class TokenStore(Protocol):
    """Process-wide persisted slot for the access token."""

    def get_token(self) -> str | None: ...

    def set_token(self, token: str) -> None: ...


class NamedValueSink(Protocol):
    """Two-level tree of device groups and named values.

    Both ``resolve_or_create_*`` calls are idempotent: repeating a call
    with the same key returns the existing entry (updated in place) and
    never creates a duplicate.  Implementations raise
    :class:`~pyoilfox.exceptions.OilFoxSinkError` on rejection.
    """

    def ensure_profile(self, profile: VariableProfile) -> None: ...

    def resolve_or_create_group(self, parent_scope: str, external_id: str, label: str) -> GroupHandle: ...

    def resolve_or_create_value(
        self,
        group: GroupHandle,
        field_name: str,
        value: Any,
        ordinal: int,
        profile: VariableProfile | None = None,
    ) -> int: ...


class StatusSink(Protocol):
    def set_status(self, code: InstanceStatus) -> None: ...
