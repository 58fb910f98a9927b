"""Offline cache backup script: creates a timestamped SQLite copy.

Uses SQLite's online backup API so the copy is consistent even while the
app has the cache open.
"""

import sqlite3
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rindang.config import Config

KEEP_BACKUPS = 10


def backup_database():
    """Copy the offline cache to the backup directory with a timestamp."""
    db_path = Config.DATABASE_PATH
    backup_dir = Config.BACKUP_PATH
    backup_dir.mkdir(parents=True, exist_ok=True)

    if not db_path.exists():
        print(f"Offline cache not found at {db_path}")
        return None

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_file = backup_dir / f"rindang_offline_{timestamp}.db"
    source = sqlite3.connect(str(db_path))
    target = sqlite3.connect(str(backup_file))
    try:
        source.backup(target)
    finally:
        target.close()
        source.close()
    print(f"Backup created: {backup_file}")

    backups = sorted(backup_dir.glob("rindang_offline_*.db"), reverse=True)
    for old in backups[KEEP_BACKUPS:]:
        old.unlink()
        print(f"Removed old backup: {old.name}")
    return backup_file


if __name__ == "__main__":
    backup_database()
