"""Queue item state transitions.

An item is ``pending`` while ``retry_count < max_retry_count`` and ``dead``
once it reaches the ceiling. Successful replay is not a state: the item is
deleted. Every function here returns a new item and leaves its input alone.
"""

from dataclasses import dataclass, replace

from rindang.database.models import SyncQueueItem

PENDING = "pending"
DEAD = "dead"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync pass."""

    succeeded: int = 0
    failed: int = 0
    # Dead items passed over this round; already included in ``failed``
    skipped: int = 0

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed - self.skipped


def is_dead(item: SyncQueueItem, max_retry_count: int) -> bool:
    return item.retry_count >= max_retry_count


def item_state(item: SyncQueueItem, max_retry_count: int) -> str:
    return DEAD if is_dead(item, max_retry_count) else PENDING


def apply_failure(item: SyncQueueItem, error: str) -> SyncQueueItem:
    """Record a failed replay attempt."""
    return replace(item, retry_count=item.retry_count + 1, last_error=error)


def apply_forced_retry(item: SyncQueueItem) -> SyncQueueItem:
    """Operator override: give a dead item a fresh set of attempts."""
    return replace(item, retry_count=0, last_error=None)
