"""Idempotent reconciliation of device records into a named-value sink.

This is the only component allowed to write mapped device records into
the sink.  For every record, in order, it resolves the device group and
then each named value with its ordinal position.  Named values that a
record no longer carries are left in place; the sink tree only grows.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from pyoilfox._constants import SchemaVersion
from pyoilfox.models.device import DeviceRecord
from pyoilfox.models.profiles import ProfileKind, profile_for
from pyoilfox.state.sink import GroupHandle, NamedValueSink

_logger = logging.getLogger(__name__)


class ReconcileResult(BaseModel):
    """Outcome of one :meth:`Reconciler.apply` call."""

    model_config = ConfigDict(frozen=True)

    groups: dict[str, GroupHandle] = Field(default_factory=dict)
    """Device identifier -> group handle, in record order."""
    values_written: int = 0


class Reconciler:
    """Write device records into *sink* under *parent_scope*.

    Any :class:`~pyoilfox.exceptions.OilFoxSinkError` raised by the sink
    propagates unchanged; records reconciled before the failure stay
    written.
    """

    def __init__(
        self,
        sink: NamedValueSink,
        *,
        parent_scope: str,
        schema_version: SchemaVersion,
    ) -> None:
        self._sink = sink
        self._parent_scope = parent_scope
        self._schema_version = SchemaVersion(schema_version)
        self._profiles_ready: set[ProfileKind] = set()

    def apply(self, records: Sequence[DeviceRecord]) -> ReconcileResult:
        groups: dict[str, GroupHandle] = {}
        written = 0

        for record in records:
            group = self._sink.resolve_or_create_group(self._parent_scope, record.device_id, record.name)
            groups[record.device_id] = group

            for position, (field_name, value) in enumerate(record.named_values()):
                profile = profile_for(self._schema_version, field_name)
                if profile is not None and profile.kind not in self._profiles_ready:
                    self._sink.ensure_profile(profile)
                    self._profiles_ready.add(profile.kind)
                self._sink.resolve_or_create_value(group, field_name, value, position, profile)
                written += 1

            _logger.debug("Reconciled device %s into group %d", record.device_id, group)

        return ReconcileResult(groups=groups, values_written=written)
