"""Tests for record-level conflict detection and resolution."""

import pytest

from rindang.sync.conflict_resolver import (
    ConflictResolutionError,
    detect_conflict,
    find_conflicting_fields,
    format_conflict_for_display,
    merge_data,
    resolve_conflict,
)

LAST_SYNC = 1_000_000.0


def local(**fields):
    return {"id": "p1", "updated_at": 2_000_000, **fields}


def server(**fields):
    return {"id": "p1", "updated_at": 3_000_000, **fields}


class TestDetect:
    def test_both_changed_and_differ(self):
        conflict = detect_conflict(
            local(status="growing"), server(status="harvested"),
            LAST_SYNC, table="productions",
        )
        assert conflict is not None
        assert conflict.record_id == "p1"
        assert conflict.table == "productions"
        assert [cf.field for cf in conflict.conflicting_fields] == ["status"]

    def test_server_unchanged_since_sync(self):
        srv = {"id": "p1", "updated_at": 500_000, "status": "harvested"}
        assert detect_conflict(local(status="growing"), srv, LAST_SYNC) is None

    def test_local_unchanged_since_sync(self):
        loc = {"id": "p1", "updated_at": 500_000, "status": "growing"}
        assert detect_conflict(loc, server(status="x"), LAST_SYNC) is None

    def test_identical_values_are_not_a_conflict(self):
        assert detect_conflict(
            local(status="growing"), server(status="growing"), LAST_SYNC
        ) is None

    def test_iso_timestamps(self):
        conflict = detect_conflict(
            {"id": "p1", "updated_at": "2024-03-01T10:00:00Z", "notes": "a"},
            {"id": "p1", "updated_at": "2024-03-01T11:00:00+00:00",
             "notes": "b"},
            last_sync_timestamp=0,
        )
        assert conflict.server_timestamp - conflict.local_timestamp == 3_600_000

    def test_bookkeeping_fields_ignored(self):
        fields_ = find_conflicting_fields(
            {"id": "a", "_synced": False, "user_id": "u1", "notes": "x"},
            {"id": "b", "_synced": True, "user_id": "u2", "notes": "x"},
        )
        assert fields_ == []


class TestResolve:
    @pytest.fixture
    def conflict(self):
        return detect_conflict(
            local(status="growing", seed_count=120, tags=["organic"],
                  irrigated=True),
            server(status="harvested", seed_count=100, tags=["export"],
                   irrigated=False),
            LAST_SYNC,
        )

    def test_local_wins(self, conflict):
        data = resolve_conflict(conflict, "local_wins").resolved_data
        assert data["status"] == "growing"
        assert data["seed_count"] == 120

    def test_server_wins(self, conflict):
        data = resolve_conflict(conflict, "server_wins").resolved_data
        assert data["status"] == "harvested"
        assert data["updated_at"] == 3_000_000

    def test_merge(self, conflict):
        data = merge_data(conflict)
        assert data["seed_count"] == 120
        assert data["tags"] == ["export", "organic"]
        assert data["irrigated"] is True
        # Server changed last, so plain values follow it
        assert data["status"] == "harvested"

    def test_manual(self, conflict):
        resolution = resolve_conflict(
            conflict, "manual", {"status": "growing"}
        )
        assert resolution.strategy == "manual"
        assert resolution.resolved_data["status"] == "growing"
        assert resolution.resolved_data["seed_count"] == 100

    def test_manual_without_values_raises(self, conflict):
        with pytest.raises(ConflictResolutionError, match="Manual"):
            resolve_conflict(conflict, "manual")

    def test_unknown_strategy_raises(self, conflict):
        with pytest.raises(ConflictResolutionError, match="Unknown"):
            resolve_conflict(conflict, "coin_flip")


def test_format_for_display():
    conflict = detect_conflict(
        local(status="growing"), server(status="harvested"),
        LAST_SYNC, table="productions",
    )
    text = format_conflict_for_display(conflict)
    assert "Record ID: p1" in text
    assert "Table: productions" in text
    assert "status: Local = 'growing', Server = 'harvested'" in text
