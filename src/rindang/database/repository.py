"""Repository layer: offline cache tables and the sync queue."""

import json
import re
import time
from typing import Optional

from rindang.sync.entities import EntityKind, spec_for
from rindang.utils.constants import (
    PENDING_DELETE_FLAG,
    SYNC_OPERATIONS,
    SYNCED_FLAG,
)

from .connection import DatabaseConnection
from .models import SyncQueueItem

# Relation objects the remote API embeds in rows; never cached
_RELATION_KEYS = ("land", "production")

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _now_ms() -> float:
    return time.time() * 1000


class LocalTable:
    """Key-value view over one cache table, keyed by record id.

    Records are plain dicts. The bookkeeping flags ``_synced`` and
    ``_pending_delete`` are stored as columns and merged back into the dict
    on read.
    """

    def __init__(self, db: DatabaseConnection, kind: EntityKind):
        self.db = db
        self.kind = kind
        self.name = spec_for(kind).local_table

    def _to_dict(self, row) -> dict:
        try:
            record = json.loads(row["data"]) if row["data"] else {}
        except (json.JSONDecodeError, TypeError):
            record = {}
        record["id"] = row["id"]
        record[SYNCED_FLAG] = bool(row["_synced"])
        record[PENDING_DELETE_FLAG] = bool(row["_pending_delete"])
        return record

    @staticmethod
    def _payload(record: dict) -> str:
        data = {
            k: v for k, v in record.items()
            if k not in (SYNCED_FLAG, PENDING_DELETE_FLAG)
            and k not in _RELATION_KEYS
        }
        return json.dumps(data, default=str)

    def put(self, record: dict):
        """Insert or fully replace a record."""
        record_id = record.get("id")
        if not record_id:
            raise ValueError(f"{self.name}: cannot cache a record without an id")
        now = _now_ms()
        with self.db.get_connection() as conn:
            existing = conn.execute(
                f"SELECT created_at FROM {self.name} WHERE id = ?",  # noqa: S608
                (str(record_id),),
            ).fetchone()
            created_at = existing["created_at"] if existing else now
            conn.execute(
                f"INSERT OR REPLACE INTO {self.name} "  # noqa: S608
                "(id, data, _synced, _pending_delete, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    str(record_id),
                    self._payload(record),
                    int(bool(record.get(SYNCED_FLAG, True))),
                    int(bool(record.get(PENDING_DELETE_FLAG, False))),
                    created_at,
                    now,
                ),
            )

    def bulk_put(self, records: list[dict]):
        for record in records:
            self.put(record)

    def update(self, record_id: str, patch: dict) -> bool:
        """Merge ``patch`` into an existing record.

        Returns False (and writes nothing) when the record is not cached.
        """
        with self.db.get_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {self.name} WHERE id = ?",  # noqa: S608
                (str(record_id),),
            ).fetchone()
            if row is None:
                return False

            record = self._to_dict(row)
            record.update(patch)
            record["id"] = row["id"]
            conn.execute(
                f"UPDATE {self.name} SET data = ?, _synced = ?, "  # noqa: S608
                "_pending_delete = ?, updated_at = ? WHERE id = ?",
                (
                    self._payload(record),
                    int(bool(record[SYNCED_FLAG])),
                    int(bool(record[PENDING_DELETE_FLAG])),
                    _now_ms(),
                    row["id"],
                ),
            )
            return True

    def delete(self, record_id: str) -> bool:
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                f"DELETE FROM {self.name} WHERE id = ?",  # noqa: S608
                (str(record_id),),
            )
            return cursor.rowcount > 0

    def get(self, record_id: str) -> Optional[dict]:
        rows = self.db.execute(
            f"SELECT * FROM {self.name} WHERE id = ?",  # noqa: S608
            (str(record_id),),
        )
        return self._to_dict(rows[0]) if rows else None

    def all(self) -> list[dict]:
        rows = self.db.execute(
            f"SELECT * FROM {self.name} ORDER BY created_at, id"  # noqa: S608
        )
        return [self._to_dict(r) for r in rows]

    def where(self, field_name: str, value) -> list[dict]:
        """Records whose JSON field equals ``value``.

        The path is inlined so SQLite can use the expression indexes built
        for the kind's ``index_fields``.
        """
        if not _FIELD_NAME.match(field_name):
            raise ValueError(f"{self.name}: invalid field name {field_name!r}")
        rows = self.db.execute(
            f"SELECT * FROM {self.name} "  # noqa: S608
            f"WHERE json_extract(data, '$.{field_name}') = ? "
            "ORDER BY created_at, id",
            (value,),
        )
        return [self._to_dict(r) for r in rows]

    def unsynced(self) -> list[dict]:
        rows = self.db.execute(
            f"SELECT * FROM {self.name} WHERE _synced = 0 "  # noqa: S608
            "ORDER BY updated_at, id"
        )
        return [self._to_dict(r) for r in rows]

    def count(self) -> int:
        rows = self.db.execute(
            f"SELECT COUNT(*) AS cnt FROM {self.name}"  # noqa: S608
        )
        return rows[0]["cnt"] if rows else 0

    def clear(self):
        with self.db.get_connection() as conn:
            conn.execute(f"DELETE FROM {self.name}")  # noqa: S608


class OfflineRepository:
    """Provides all offline cache and sync queue operations."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def table(self, kind) -> LocalTable:
        return LocalTable(self.db, EntityKind.parse(kind))

    # ── Sync queue ──────────────────────────────────────────────

    def queue_operation(self, kind, operation: str, record_id: str,
                        data: dict) -> int:
        """Append a pending mutation. Returns the queue item id."""
        kind = EntityKind.parse(kind)
        if operation not in SYNC_OPERATIONS:
            raise ValueError(f"Unknown sync operation: {operation!r}")
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO sync_queue (table_name, operation, record_id, "
                "data, retry_count, enqueued_at) VALUES (?, ?, ?, ?, 0, ?)",
                (kind.value, operation, str(record_id),
                 json.dumps(data or {}, default=str), _now_ms()),
            )
            return cursor.lastrowid

    def get_pending_sync_items(self) -> list[SyncQueueItem]:
        """All queued items in FIFO order, dead ones included."""
        rows = self.db.execute(
            "SELECT * FROM sync_queue ORDER BY enqueued_at, id"
        )
        return [SyncQueueItem.from_row(r) for r in rows]

    def get_pending_sync_count(self) -> int:
        rows = self.db.execute("SELECT COUNT(*) AS cnt FROM sync_queue")
        return rows[0]["cnt"] if rows else 0

    def get_sync_item(self, item_id: int) -> Optional[SyncQueueItem]:
        rows = self.db.execute(
            "SELECT * FROM sync_queue WHERE id = ?", (item_id,)
        )
        return SyncQueueItem.from_row(rows[0]) if rows else None

    def update_sync_item(self, item: SyncQueueItem):
        """Persist the retry bookkeeping of a queue item."""
        with self.db.get_connection() as conn:
            conn.execute(
                "UPDATE sync_queue SET retry_count = ?, last_error = ? "
                "WHERE id = ?",
                (item.retry_count, item.last_error, item.id),
            )

    def remove_sync_item(self, item_id: int):
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM sync_queue WHERE id = ?", (item_id,))

    def count_pending_for_record(self, kind, record_id: str) -> int:
        """Queued items (any state) that still target one record."""
        rows = self.db.execute(
            "SELECT COUNT(*) AS cnt FROM sync_queue "
            "WHERE table_name = ? AND record_id = ?",
            (EntityKind.parse(kind).value, str(record_id)),
        )
        return rows[0]["cnt"] if rows else 0

    def get_dead_items(self, max_retry_count: int) -> list[SyncQueueItem]:
        rows = self.db.execute(
            "SELECT * FROM sync_queue WHERE retry_count >= ? "
            "ORDER BY enqueued_at, id",
            (max_retry_count,),
        )
        return [SyncQueueItem.from_row(r) for r in rows]

    def purge_dead_items(self, max_retry_count: int) -> int:
        """Delete items that exhausted their retries. Returns count removed."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM sync_queue WHERE retry_count >= ?",
                (max_retry_count,),
            )
            return cursor.rowcount

    def clear_sync_queue(self):
        """Drop every pending item (use with caution)."""
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM sync_queue")

    # ── Cache ───────────────────────────────────────────────────

    def _cache_rows(self, kind: EntityKind, rows: list[dict]):
        table = self.table(kind)
        for row in rows:
            record = dict(row)
            record[SYNCED_FLAG] = True
            record[PENDING_DELETE_FLAG] = False
            table.put(record)

    def cache_lands(self, lands: list[dict]):
        """Store server rows as synced mirrors."""
        self._cache_rows(EntityKind.LANDS, lands)

    def cache_productions(self, productions: list[dict]):
        self._cache_rows(EntityKind.PRODUCTIONS, productions)

    def cache_activities(self, activities: list[dict]):
        self._cache_rows(EntityKind.ACTIVITIES, activities)

    def get_cached_lands(self, user_id: str = None) -> list[dict]:
        table = self.table(EntityKind.LANDS)
        return table.where("user_id", user_id) if user_id else table.all()

    def get_cached_productions(self, land_id: str = None) -> list[dict]:
        table = self.table(EntityKind.PRODUCTIONS)
        return table.where("land_id", land_id) if land_id else table.all()

    def get_cached_activities(self, production_id: str = None) -> list[dict]:
        table = self.table(EntityKind.ACTIVITIES)
        if production_id:
            return table.where("production_id", production_id)
        return table.all()

    def clear_cache(self):
        """Clear every cache table. The sync queue is left alone."""
        for kind in EntityKind:
            self.table(kind).clear()
