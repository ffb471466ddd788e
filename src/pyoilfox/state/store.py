"""Named-value stores.

:class:`NamedValueStore` keeps the device-group/named-value tree in memory;
:class:`JsonFileNamedValueStore` adds a JSON document on disk so the tree,
and the handles in it, survive process restarts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pyoilfox.exceptions import OilFoxSinkError
from pyoilfox.models.profiles import ProfileKind, VariableProfile

_logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


class Group(BaseModel):
    model_config = ConfigDict(extra="forbid")

    handle: int
    parent_scope: str
    external_id: str
    label: str


class NamedValue(BaseModel):
    model_config = ConfigDict(extra="forbid")

    handle: int
    group: int
    name: str
    value: str | bool | int | float | None = None
    position: int = 0
    profile: ProfileKind | None = None


class StoreSnapshot(BaseModel):
    """Serializable content of a store.

    Handles are allocated from ``next_handle`` and never reused.
    """

    model_config = ConfigDict(extra="forbid")

    next_handle: int = 1
    profiles: dict[ProfileKind, VariableProfile] = Field(default_factory=dict)
    groups: list[Group] = Field(default_factory=list)
    values: list[NamedValue] = Field(default_factory=list)


class NamedValueStore:
    """In-memory named-value sink.

    Groups are keyed by ``(parent_scope, external_id)`` and values by
    ``(group handle, name)``; resolving an existing key updates the entry
    in place and returns its original handle.
    """

    def __init__(self, snapshot: StoreSnapshot | None = None) -> None:
        self._snapshot = snapshot.model_copy(deep=True) if snapshot is not None else StoreSnapshot()
        self._groups: dict[tuple[str, str], Group] = {}
        self._groups_by_handle: dict[int, Group] = {}
        self._values: dict[tuple[int, str], NamedValue] = {}
        for group in self._snapshot.groups:
            self._groups[(group.parent_scope, group.external_id)] = group
            self._groups_by_handle[group.handle] = group
        for named in self._snapshot.values:
            self._values[(named.group, named.name)] = named

    def _allocate_handle(self) -> int:
        handle = self._snapshot.next_handle
        self._snapshot.next_handle += 1
        return handle

    def _commit(self) -> None:
        """Hook called after every mutation."""

    def ensure_profile(self, profile: VariableProfile) -> None:
        if self._snapshot.profiles.get(profile.kind) == profile:
            return
        self._snapshot.profiles[profile.kind] = profile
        _logger.debug("Registered profile %s", profile.kind.value)
        self._commit()

    def resolve_or_create_group(self, parent_scope: str, external_id: str, label: str) -> int:
        if not external_id:
            raise OilFoxSinkError("Group external id must be non-empty")

        group = self._groups.get((parent_scope, external_id))
        if group is None:
            group = Group(
                handle=self._allocate_handle(),
                parent_scope=parent_scope,
                external_id=external_id,
                label=label,
            )
            self._snapshot.groups.append(group)
            self._groups[(parent_scope, external_id)] = group
            self._groups_by_handle[group.handle] = group
            _logger.debug("Created group %d for %s/%s (%s)", group.handle, parent_scope, external_id, label)
        elif group.label == label:
            return group.handle
        else:
            group.label = label
        self._commit()
        return group.handle

    def resolve_or_create_value(
        self,
        group: int,
        field_name: str,
        value: Any,
        ordinal: int,
        profile: VariableProfile | None = None,
    ) -> int:
        if group not in self._groups_by_handle:
            raise OilFoxSinkError(f"Unknown group handle {group}")
        if not field_name:
            raise OilFoxSinkError(f"Named value in group {group} needs a name")
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise OilFoxSinkError(f"Unsupported value type {type(value).__name__} for {field_name!r}")
        if ordinal < 0:
            raise OilFoxSinkError(f"Position of {field_name!r} must not be negative")

        profile_kind = profile.kind if profile is not None else None
        named = self._values.get((group, field_name))
        if named is None:
            named = NamedValue(
                handle=self._allocate_handle(),
                group=group,
                name=field_name,
                value=value,
                position=ordinal,
                profile=profile_kind,
            )
            self._snapshot.values.append(named)
            self._values[(group, field_name)] = named
        else:
            unchanged = (
                type(named.value) is type(value)
                and named.value == value
                and named.position == ordinal
                and named.profile == profile_kind
            )
            if unchanged:
                return named.handle
            named.value = value
            named.position = ordinal
            named.profile = profile_kind
        self._commit()
        return named.handle

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def snapshot(self) -> StoreSnapshot:
        """Deep copy of the current content."""
        return self._snapshot.model_copy(deep=True)

    def get_group(self, parent_scope: str, external_id: str) -> Group | None:
        return self._groups.get((parent_scope, external_id))

    def groups(self) -> list[Group]:
        """Groups in creation order."""
        return list(self._snapshot.groups)

    def values(self, group: int) -> list[NamedValue]:
        """Named values of *group*, ordered by position."""
        return sorted(
            (named for named in self._snapshot.values if named.group == group),
            key=lambda named: (named.position, named.handle),
        )

    def as_dict(self, group: int) -> dict[str, Any]:
        return {named.name: named.value for named in self.values(group)}


class JsonFileNamedValueStore(NamedValueStore):
    """Named-value sink persisted to a JSON document after every mutation."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        super().__init__(self._load(self._path))

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _load(path: Path) -> StoreSnapshot | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise OilFoxSinkError(f"Could not read store {path}: {exc}") from exc
        try:
            return StoreSnapshot.model_validate_json(text)
        except ValidationError as exc:
            raise OilFoxSinkError(f"Store {path} is corrupt: {exc}") from exc

    def _commit(self) -> None:
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(self._snapshot.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise OilFoxSinkError(f"Could not write store {self._path}: {exc}") from exc
