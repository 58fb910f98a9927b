"""SyncCoordinator: offline-first replication of local edits.

Every create/update/delete made while using the app goes through here:
1. The local cache is written first (optimistic state)
2. The mutation is appended to the durable sync queue
3. If the device is online, the queue is replayed against the remote store

Replay runs one FIFO pass at a time. A failed item keeps its place in the
queue with ``retry_count`` bumped; once it reaches ``MAX_RETRY_COUNT`` it is
skipped until an operator retries or purges it.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from rindang.config import Config
from rindang.database.models import SyncQueueItem
from rindang.database.repository import OfflineRepository
from rindang.sync.connectivity import ONLINE, ConnectivitySignal
from rindang.sync.entities import EntityKind
from rindang.sync.remote import RemoteStoreError
from rindang.sync.state import (
    SyncResult,
    apply_failure,
    apply_forced_retry,
    is_dead,
)
from rindang.utils.constants import PENDING_DELETE_FLAG, SYNCED_FLAG
from rindang.utils.formatters import (
    format_failed_message,
    format_synced_message,
    format_time_since,
)

logger = logging.getLogger(__name__)

# (level, message); level is one of: info, success, warning, error
EventSink = Callable[[str, str], None]


def _log_event(level: str, message: str):
    if level in ("warning", "error"):
        logger.warning(message)
    else:
        logger.info(message)


class SyncCoordinator:
    """Owns the offline queue, the local cache and the connectivity hook."""

    def __init__(self, repo: OfflineRepository, remote,
                 connectivity: ConnectivitySignal = None,
                 notify: EventSink = None,
                 max_retry_count: int = None,
                 auto_sync: bool = None):
        self.repo = repo
        self.remote = remote
        self.connectivity = connectivity or ConnectivitySignal(initial=True)
        self._notify = notify or _log_event
        self.max_retry_count = (
            Config.MAX_RETRY_COUNT if max_retry_count is None
            else max_retry_count
        )
        self.auto_sync = Config.AUTO_SYNC if auto_sync is None else auto_sync
        self._syncing = False
        self._last_sync: datetime | None = None
        self._unsubscribe = self.connectivity.subscribe(
            self._on_connectivity_change
        )

    # ── State ──────────────────────────────────────────────────

    @property
    def is_online(self) -> bool:
        return self.connectivity.is_online

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    @property
    def last_sync_time(self) -> datetime | None:
        return self._last_sync

    @property
    def pending_count(self) -> int:
        return self.repo.get_pending_sync_count()

    def get_status(self) -> dict:
        """Snapshot for status bars and offline indicators."""
        return {
            "online": self.is_online,
            "syncing": self._syncing,
            "pending_count": self.pending_count,
            "dead_count": len(self.repo.get_dead_items(self.max_retry_count)),
            "max_retry_count": self.max_retry_count,
            "last_sync": (
                self._last_sync.isoformat() if self._last_sync else None
            ),
            "last_sync_human": format_time_since(self._last_sync),
        }

    # ── Local write path ───────────────────────────────────────

    def queue_create(self, kind, record_id: str, data: dict) -> int:
        """Cache a new record, queue its insert, then try to sync."""
        kind = EntityKind.parse(kind)
        record = dict(data)
        record["id"] = record_id
        # Cache write must land before the queue append
        self.repo.table(kind).put({
            **record,
            SYNCED_FLAG: False,
            PENDING_DELETE_FLAG: False,
        })
        item_id = self.repo.queue_operation(kind, "create", record_id, record)
        self._after_enqueue()
        return item_id

    def queue_update(self, kind, record_id: str, data: dict) -> int:
        """Patch the cached fields given, queue the update, then sync."""
        kind = EntityKind.parse(kind)
        cached = self.repo.table(kind).update(
            record_id, {**data, SYNCED_FLAG: False}
        )
        if not cached:
            logger.debug(f"{kind.value}/{record_id} not cached; queueing anyway")
        item_id = self.repo.queue_operation(kind, "update", record_id, data)
        self._after_enqueue()
        return item_id

    def queue_delete(self, kind, record_id: str) -> int:
        """Tombstone the cached record and queue its remote delete.

        The record stays readable in the cache until the delete is
        confirmed by a successful sync pass.
        """
        kind = EntityKind.parse(kind)
        self.repo.table(kind).update(
            record_id, {SYNCED_FLAG: False, PENDING_DELETE_FLAG: True}
        )
        item_id = self.repo.queue_operation(kind, "delete", record_id, {})
        self._after_enqueue()
        return item_id

    def _after_enqueue(self):
        if self.auto_sync and self.is_online:
            self.sync_now()

    # ── Replay ─────────────────────────────────────────────────

    def sync_now(self) -> SyncResult | None:
        """Replay the queue once, in FIFO order.

        Returns None without doing anything when offline or when a pass
        is already running.
        """
        if not self.is_online or self._syncing:
            return None

        self._syncing = True
        succeeded = failed = skipped = 0
        try:
            for item in self.repo.get_pending_sync_items():
                if is_dead(item, self.max_retry_count):
                    failed += 1
                    skipped += 1
                    continue

                try:
                    self._replay(item)
                except RemoteStoreError as e:
                    logger.warning(
                        f"Sync of {item.table.value}/{item.record_id} "
                        f"({item.operation}) failed: {e}"
                    )
                    self.repo.update_sync_item(apply_failure(item, str(e)))
                    failed += 1
                    continue
                except Exception as e:
                    logger.exception(
                        f"Unexpected error syncing {item.table.value}/"
                        f"{item.record_id} ({item.operation})"
                    )
                    self.repo.update_sync_item(
                        apply_failure(item, f"{type(e).__name__}: {e}")
                    )
                    failed += 1
                    continue

                self.repo.remove_sync_item(item.id)
                self._confirm_local(item)
                succeeded += 1
        finally:
            self._syncing = False

        self._last_sync = datetime.now(timezone.utc)
        result = SyncResult(succeeded=succeeded, failed=failed,
                            skipped=skipped)
        logger.info(
            f"Sync pass done: {succeeded} synced, {failed} failed "
            f"({skipped} past retry limit)"
        )
        if succeeded:
            self._notify("success", format_synced_message(succeeded))
        if failed:
            self._notify("error", format_failed_message(failed))
        return result

    def _replay(self, item: SyncQueueItem):
        if item.operation == "create":
            self.remote.insert(item.table, {**item.data, "id": item.record_id})
        elif item.operation == "update":
            self.remote.update(item.table, item.record_id, item.data)
        elif item.operation == "delete":
            self.remote.delete(item.table, item.record_id)
        else:
            raise RemoteStoreError(f"Unknown operation {item.operation!r}")

    def _confirm_local(self, item: SyncQueueItem):
        """Reflect a confirmed replay in the local cache."""
        table = self.repo.table(item.table)
        if item.operation == "delete":
            table.delete(item.record_id)
        elif not self.repo.count_pending_for_record(item.table, item.record_id):
            table.update(item.record_id, {SYNCED_FLAG: True})

    # ── Operator actions ───────────────────────────────────────

    def get_dead_items(self) -> list[SyncQueueItem]:
        return self.repo.get_dead_items(self.max_retry_count)

    def retry_dead_items(self) -> int:
        """Reset retry counters of dead items and sync if possible."""
        dead = self.repo.get_dead_items(self.max_retry_count)
        for item in dead:
            self.repo.update_sync_item(apply_forced_retry(item))
        if dead:
            logger.info(f"Re-armed {len(dead)} dead sync item(s)")
            if self.is_online:
                self.sync_now()
        return len(dead)

    def purge_dead_items(self) -> int:
        """Drop dead items. Their cached records stay flagged unsynced."""
        removed = self.repo.purge_dead_items(self.max_retry_count)
        if removed:
            logger.warning(f"Purged {removed} dead sync item(s)")
            self._notify("warning", f"Discarded {removed} unsyncable change(s)")
        return removed

    # ── Connectivity ───────────────────────────────────────────

    def _on_connectivity_change(self, event: str):
        if event == ONLINE:
            self._notify("success", "Back online! Pending changes will be synced.")
            if self.auto_sync and self.pending_count > 0:
                self.sync_now()
        else:
            self._notify(
                "warning", "You are offline. Changes will be saved locally."
            )

    def shutdown(self):
        """Stop listening for connectivity changes. Safe to call twice."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
