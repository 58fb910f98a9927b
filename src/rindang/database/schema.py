"""Offline cache schema definition and initialization."""

from rindang.sync.entities import ENTITY_REGISTRY

SCHEMA_VERSION = 2

# Each statement is a separate string to avoid executescript issues
_SCHEMA_STATEMENTS = [
    """CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY
    )""",

    # Pending mutations, replayed in FIFO order
    """CREATE TABLE IF NOT EXISTS sync_queue (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        table_name TEXT NOT NULL,
        operation TEXT NOT NULL
            CHECK (operation IN ('create', 'update', 'delete')),
        record_id TEXT NOT NULL,
        data TEXT NOT NULL DEFAULT '{}',
        retry_count INTEGER NOT NULL DEFAULT 0 CHECK (retry_count >= 0),
        last_error TEXT,
        enqueued_at REAL NOT NULL
    )""",

    "CREATE INDEX IF NOT EXISTS idx_sync_queue_order "
    "ON sync_queue(enqueued_at, id)",
    "CREATE INDEX IF NOT EXISTS idx_sync_queue_retry "
    "ON sync_queue(retry_count)",
]


def _cache_table_statements(table: str,
                             index_fields: tuple = ()) -> list[str]:
    """Mirror table: the record lives as JSON, flags as real columns."""
    statements = [
        f"""CREATE TABLE IF NOT EXISTS {table} (
            id TEXT PRIMARY KEY,
            data TEXT NOT NULL DEFAULT '{{}}',
            _synced INTEGER NOT NULL DEFAULT 1,
            _pending_delete INTEGER NOT NULL DEFAULT 0,
            created_at REAL,
            updated_at REAL
        )""",
        f"CREATE INDEX IF NOT EXISTS idx_{table}_synced ON {table}(_synced)",
    ]
    # Expression indexes must match the path literal LocalTable.where uses
    for name in index_fields:
        statements.append(
            f"CREATE INDEX IF NOT EXISTS idx_{table}_{name} "
            f"ON {table}(json_extract(data, '$.{name}'))"
        )
    return statements


def _get_schema_version(conn) -> int:
    """Get the current schema version, or 0 if no schema exists."""
    try:
        row = conn.execute(
            "SELECT MAX(version) as v FROM schema_version"
        ).fetchone()
        return row["v"] if row and row["v"] else 0
    except Exception:
        return 0


def initialize_database(db_connection):
    """Create the queue and one cache table per entity kind.

    Safe to call on every start; all statements are idempotent.
    """
    with db_connection.get_connection() as conn:
        version = _get_schema_version(conn)
        if version >= SCHEMA_VERSION:
            return

        for stmt in _SCHEMA_STATEMENTS:
            conn.execute(stmt)
        for spec in ENTITY_REGISTRY.values():
            for stmt in _cache_table_statements(spec.local_table,
                                                spec.index_fields):
                conn.execute(stmt)
        conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
