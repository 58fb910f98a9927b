"""Print the season calendar for the cached productions of one year.

Shows each land's productions with their bar geometry and flags schedule
conflicts, the same data the planning calendar renders.

Run:
    python execution/season_report.py 2024
"""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rindang.config import Config
from rindang.database.connection import DatabaseConnection
from rindang.database.models import Land, Production
from rindang.database.repository import OfflineRepository
from rindang.database.schema import initialize_database
from rindang.planning.conflicts import (
    format_conflict_message,
    get_all_conflicts,
    group_productions_by_land,
)
from rindang.planning.season_calendar import get_production_bar_position
from rindang.utils.formatters import format_percentage


def main():
    year = int(sys.argv[1]) if len(sys.argv) > 1 else date.today().year

    db = DatabaseConnection(Config.DATABASE_PATH)
    initialize_database(db)
    repo = OfflineRepository(db)

    # Tombstoned records are on their way out; leave them off the plan
    productions = [
        Production.from_dict(r) for r in repo.get_cached_productions()
        if not r.get("_pending_delete")
    ]
    lands = [Land.from_dict(r) for r in repo.get_cached_lands()]

    conflicts = get_all_conflicts(productions)
    for group in group_productions_by_land(productions, lands, conflicts):
        marker = "  [CONFLICT]" if group.has_conflicts else ""
        print(f"{group.land.name}{marker}")
        for entry in group.productions:
            bar = get_production_bar_position(entry.date_range, year)
            if not bar.visible:
                continue
            prod = entry.production
            print(
                f"  {prod.commodity:<10} {entry.date_range.start} → "
                f"{entry.date_range.end}  left={format_percentage(bar.left)} "
                f"width={format_percentage(bar.width)}"
            )
            for conflict in conflicts.get(prod.id, []):
                print(f"      ! {format_conflict_message(conflict)}")


if __name__ == "__main__":
    main()
