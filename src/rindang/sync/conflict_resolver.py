"""Record-level conflicts between an offline edit and the server copy.

A conflict exists when both the local and the server copy changed after
the last successful sync and at least one user-visible field differs.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from rindang.sync.remote import SyncError
from rindang.utils.constants import CONFLICT_STRATEGIES

# Bookkeeping columns never compared between copies
IGNORED_FIELDS = {
    "id", "created_at", "updated_at", "_synced", "_localId",
    "user_id", "created_by", "updated_by",
}


class ConflictResolutionError(SyncError):
    """A conflict could not be resolved with the requested strategy."""


@dataclass
class ConflictField:
    field: str
    local_value: object
    server_value: object


@dataclass
class RecordConflict:
    record_id: str
    table: str
    local_timestamp: float
    server_timestamp: float
    conflicting_fields: list[ConflictField] = field(default_factory=list)
    local_data: dict = field(default_factory=dict)
    server_data: dict = field(default_factory=dict)


@dataclass
class ConflictResolution:
    strategy: str
    resolved_data: dict


def _to_ms(value) -> float:
    """Epoch milliseconds from a number, datetime or ISO string."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return 0.0
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp() * 1000


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def find_conflicting_fields(local_data: dict,
                            server_data: dict) -> list[ConflictField]:
    """Fields whose local value differs from the server value."""
    conflicts = []
    for name, local_value in local_data.items():
        if name in IGNORED_FIELDS or name.startswith("_"):
            continue
        server_value = server_data.get(name)
        if local_value != server_value:
            conflicts.append(ConflictField(name, local_value, server_value))
    return conflicts


def detect_conflict(local_data: dict, server_data: dict,
                    last_sync_timestamp: float,
                    table: str = "") -> RecordConflict | None:
    """Return a conflict when both copies moved since the last sync."""
    local_ts = _to_ms(
        local_data.get("updated_at") or local_data.get("_updated_at")
    )
    server_ts = _to_ms(server_data.get("updated_at"))

    if server_ts <= last_sync_timestamp:
        return None
    if local_ts <= last_sync_timestamp:
        return None

    fields_ = find_conflicting_fields(local_data, server_data)
    if not fields_:
        return None

    return RecordConflict(
        record_id=local_data.get("id") or server_data.get("id"),
        table=table,
        local_timestamp=local_ts,
        server_timestamp=server_ts,
        conflicting_fields=fields_,
        local_data=local_data,
        server_data=server_data,
    )


def merge_data(conflict: RecordConflict) -> dict:
    """Field-by-field merge.

    Numbers keep the larger value, lists are unioned, booleans keep the
    local choice, everything else takes whichever side changed last.
    """
    merged = dict(conflict.server_data)
    local_is_newer = conflict.local_timestamp > conflict.server_timestamp

    for cf in conflict.conflicting_fields:
        local_value, server_value = cf.local_value, cf.server_value
        if isinstance(local_value, bool) and isinstance(server_value, bool):
            merged[cf.field] = local_value
        elif (isinstance(local_value, (int, float))
              and isinstance(server_value, (int, float))):
            merged[cf.field] = max(local_value, server_value)
        elif isinstance(local_value, list) and isinstance(server_value, list):
            union = list(server_value)
            union.extend(v for v in local_value if v not in union)
            merged[cf.field] = union
        elif local_is_newer:
            merged[cf.field] = local_value

    merged["updated_at"] = _now_iso()
    return merged


def resolve_conflict(conflict: RecordConflict, strategy: str,
                     manual_resolutions: dict = None) -> ConflictResolution:
    if strategy not in CONFLICT_STRATEGIES:
        raise ConflictResolutionError(f"Unknown resolution strategy: {strategy}")

    if strategy == "local_wins":
        resolved = {**conflict.server_data, **conflict.local_data,
                    "updated_at": _now_iso()}
    elif strategy == "server_wins":
        resolved = {**conflict.local_data, **conflict.server_data}
    elif strategy == "merge":
        resolved = merge_data(conflict)
    else:
        if not manual_resolutions:
            raise ConflictResolutionError(
                "Manual resolutions required for manual strategy"
            )
        resolved = {**conflict.server_data, **manual_resolutions,
                    "updated_at": _now_iso()}
    return ConflictResolution(strategy=strategy, resolved_data=resolved)


def format_conflict_for_display(conflict: RecordConflict) -> str:
    lines = [
        f"Record ID: {conflict.record_id}",
        f"Table: {conflict.table}",
        "",
        "Conflicting Fields:",
    ]
    for cf in conflict.conflicting_fields:
        lines.append(
            f"  {cf.field}: Local = {cf.local_value!r}, "
            f"Server = {cf.server_value!r}"
        )
    return "\n".join(lines)
