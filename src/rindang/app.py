"""Application entry point. Wires the offline cache to the remote store."""

import argparse
import json
import logging
import sys

from rindang.config import Config
from rindang.database.connection import DatabaseConnection
from rindang.database.repository import OfflineRepository
from rindang.database.schema import initialize_database
from rindang.sync.connectivity import ConnectivitySignal
from rindang.sync.remote import InMemoryRemoteStore, SupabaseRemoteStore
from rindang.sync.sync_manager import SyncCoordinator
from rindang.utils.constants import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_coordinator(db_path=None, remote=None,
                       connectivity: ConnectivitySignal = None,
                       notify=None) -> SyncCoordinator:
    """Build a SyncCoordinator from Config.

    Without Supabase credentials the coordinator replays into an in-memory
    store, which keeps the app usable for local-only demos.
    """
    db = DatabaseConnection(db_path or Config.DATABASE_PATH)
    initialize_database(db)
    repo = OfflineRepository(db)

    if remote is None:
        if Config.is_remote_configured():
            remote = SupabaseRemoteStore()
        else:
            logger.warning("Supabase not configured; using in-memory store")
            remote = InMemoryRemoteStore()

    if connectivity is None:
        connectivity = ConnectivitySignal(initial=False)
        connectivity.refresh(remote)

    return SyncCoordinator(repo, remote, connectivity=connectivity,
                           notify=notify)


def main(argv: list[str] | None = None) -> int:
    """Run one sync pass (or an operator action) and print the status."""
    parser = argparse.ArgumentParser(
        prog="rindang-sync",
        description=f"Replay pending offline changes to the {APP_NAME} backend.",
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {APP_VERSION}")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true",
                       help="only print the queue status")
    group.add_argument("--retry-dead", action="store_true",
                       help="re-arm items that exhausted their retries")
    group.add_argument("--purge-dead", action="store_true",
                       help="discard items that exhausted their retries")
    args = parser.parse_args(argv)

    configure_logging()
    coordinator = create_coordinator()
    try:
        if args.retry_dead:
            coordinator.retry_dead_items()
        elif args.purge_dead:
            coordinator.purge_dead_items()
        elif not args.status:
            if coordinator.sync_now() is None:
                logger.warning("Offline or already syncing; nothing replayed")
        print(json.dumps(coordinator.get_status(), indent=2))
        return 0 if not coordinator.get_dead_items() else 1
    finally:
        coordinator.shutdown()


if __name__ == "__main__":
    sys.exit(main())
