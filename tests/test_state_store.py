from __future__ import annotations

from pathlib import Path

import pytest

from pyoilfox._constants import InstanceStatus
from pyoilfox.exceptions import OilFoxSinkError
from pyoilfox.models.profiles import PROFILES, ProfileKind
from pyoilfox.state.status import StatusRecorder
from pyoilfox.state.store import JsonFileNamedValueStore, NamedValueStore
from pyoilfox.state.tokens import FileTokenStore, MemoryTokenStore


def test_group_resolution_is_idempotent_and_scoped() -> None:
    store = NamedValueStore()

    first = store.resolve_or_create_group("scope-a", "dev-1", "Cellar")
    again = store.resolve_or_create_group("scope-a", "dev-1", "Cellar")
    other_scope = store.resolve_or_create_group("scope-b", "dev-1", "Cellar")

    assert first == again
    assert other_scope != first
    assert len(store.groups()) == 2


def test_group_label_follows_latest_display_name() -> None:
    store = NamedValueStore()
    handle = store.resolve_or_create_group("scope", "dev-1", "HW-1")

    assert store.resolve_or_create_group("scope", "dev-1", "Garage") == handle

    group = store.get_group("scope", "dev-1")
    assert group is not None
    assert group.label == "Garage"


def test_value_resolution_updates_in_place() -> None:
    store = NamedValueStore()
    group = store.resolve_or_create_group("scope", "dev-1", "Cellar")

    handle = store.resolve_or_create_value(group, "Battery", 95, 10)
    assert store.resolve_or_create_value(group, "Battery", 80, 10) == handle

    (named,) = store.values(group)
    assert named.value == 80
    assert named.position == 10


def test_int_and_float_values_keep_their_type() -> None:
    store = NamedValueStore()
    group = store.resolve_or_create_group("scope", "dev-1", "Cellar")

    store.resolve_or_create_value(group, "Volume", 1000, 0)
    store.resolve_or_create_value(group, "Volume", 1000.0, 0)

    assert isinstance(store.as_dict(group)["Volume"], float)


def test_values_are_listed_by_position() -> None:
    store = NamedValueStore()
    group = store.resolve_or_create_group("scope", "dev-1", "Cellar")
    store.resolve_or_create_value(group, "Battery", 90, 2)
    store.resolve_or_create_value(group, "Name", "Cellar", 0)
    store.resolve_or_create_value(group, "Volume", 1000.0, 1)

    assert list(store.as_dict(group)) == ["Name", "Volume", "Battery"]


@pytest.mark.parametrize(
    ("group_offset", "name", "value", "ordinal"),
    [
        (1, "Battery", 90, 0),
        (0, "", 90, 0),
        (0, "Battery", {"nested": 1}, 0),
        (0, "Battery", 90, -1),
    ],
)
def test_invalid_values_are_rejected(group_offset: int, name: str, value: object, ordinal: int) -> None:
    store = NamedValueStore()
    group = store.resolve_or_create_group("scope", "dev-1", "Cellar")

    with pytest.raises(OilFoxSinkError):
        store.resolve_or_create_value(group + group_offset, name, value, ordinal)


def test_empty_external_id_is_rejected() -> None:
    with pytest.raises(OilFoxSinkError):
        NamedValueStore().resolve_or_create_group("scope", "", "label")


def test_json_store_survives_restart(tmp_path: Path) -> None:
    path = tmp_path / "state" / "values.json"
    store = JsonFileNamedValueStore(path)
    store.ensure_profile(PROFILES[ProfileKind.VOLUME_LITERS])
    group = store.resolve_or_create_group("scope", "dev-1", "Cellar")
    value = store.resolve_or_create_value(group, "Volume", 1000.0, 2, PROFILES[ProfileKind.VOLUME_LITERS])

    reopened = JsonFileNamedValueStore(path)

    assert reopened.snapshot() == store.snapshot()
    assert reopened.resolve_or_create_group("scope", "dev-1", "Cellar") == group
    assert reopened.resolve_or_create_value(group, "Volume", 1000.0, 2, PROFILES[ProfileKind.VOLUME_LITERS]) == value
    # New handles continue after the persisted ones.
    assert reopened.resolve_or_create_group("scope", "dev-2", "Garage") > value


def test_json_store_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "values.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(OilFoxSinkError):
        JsonFileNamedValueStore(path)


def test_memory_token_store_round_trip() -> None:
    store = MemoryTokenStore()
    assert store.get_token() is None

    store.set_token("abc")

    assert store.get_token() == "abc"


def test_file_token_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "token.json"
    assert FileTokenStore(path).get_token() is None

    FileTokenStore(path).set_token("abc")

    assert FileTokenStore(path).get_token() == "abc"


def test_file_token_store_ignores_unreadable_content(tmp_path: Path) -> None:
    path = tmp_path / "token.json"
    path.write_text("garbage", encoding="utf-8")

    assert FileTokenStore(path).get_token() is None


def test_status_recorder_tracks_transitions() -> None:
    status = StatusRecorder()

    status.set_status(InstanceStatus.ACTIVE)
    status.set_status(InstanceStatus.ACTIVE)
    status.set_status(InstanceStatus.INVALID_CREDENTIALS)

    assert status.status is InstanceStatus.INVALID_CREDENTIALS
    assert status.history == [InstanceStatus.ACTIVE, InstanceStatus.INVALID_CREDENTIALS]
