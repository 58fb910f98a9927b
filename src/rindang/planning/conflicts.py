"""Schedule conflict detection for season planning.

Two productions conflict when they sit on the same land and their
planting-to-harvest windows share at least one day.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from .dates import (
    DateRange,
    calculate_overlap_days,
    field_of,
    parse_day,
    ranges_overlap,
    to_date_range,
)


@dataclass(frozen=True)
class Conflict:
    production: object
    overlap_days: int
    type: str = "overlap"

    @property
    def production_id(self) -> str:
        return field_of(self.production, "id")


@dataclass(frozen=True)
class ProductionWithRange:
    production: object
    date_range: DateRange | None


@dataclass
class LandProductionGroup:
    land: object
    productions: list[ProductionWithRange]
    has_conflicts: bool = False


def get_all_conflicts(productions) -> dict[str, list[Conflict]]:
    """Map each conflicting production id to the productions it overlaps.

    The relation is symmetric. Productions without a land, or whose dates
    cannot be read at all, never conflict. Status is not considered.
    Entries are unordered; treat each list as a set.
    """
    by_land: dict[object, list[tuple]] = defaultdict(list)
    for production in productions:
        land_id = field_of(production, "land_id")
        if not land_id:
            continue
        date_range = to_date_range(production)
        if date_range is None:
            continue
        by_land[land_id].append((production, date_range))

    conflicts: dict[str, list[Conflict]] = {}
    for entries in by_land.values():
        for i in range(len(entries)):
            a, range_a = entries[i]
            a_id = field_of(a, "id")
            for j in range(i + 1, len(entries)):
                b, range_b = entries[j]
                b_id = field_of(b, "id")
                if a_id == b_id or not ranges_overlap(range_a, range_b):
                    continue
                days = calculate_overlap_days(range_a, range_b)
                conflicts.setdefault(a_id, []).append(Conflict(b, days))
                conflicts.setdefault(b_id, []).append(Conflict(a, days))
    return conflicts


def detect_conflicts(land_id: str, start, end, productions,
                     exclude_production_id: str = None) -> list[Conflict]:
    """Check a proposed planting window against a land's productions.

    Used before saving a new or edited production. ``start``/``end`` are
    date-like; a missing end means a single-day window.
    """
    start_day = parse_day(start)
    end_day = parse_day(end)
    if start_day is None and end_day is None:
        return []
    start_day = start_day or end_day
    if end_day is None or end_day < start_day:
        end_day = start_day
    proposed = DateRange(start_day, end_day)

    found = []
    for production in productions:
        if field_of(production, "land_id") != land_id:
            continue
        if exclude_production_id and field_of(production, "id") == exclude_production_id:
            continue
        existing = to_date_range(production)
        if existing is None:
            continue
        days = calculate_overlap_days(proposed, existing)
        if days > 0:
            found.append(Conflict(production, days))
    return found


def group_productions_by_land(productions, lands,
                              conflicts: dict) -> list[LandProductionGroup]:
    """One group per land that has at least one production.

    ``conflicts`` is the map from ``get_all_conflicts``; it is only read.
    Productions on lands not present in ``lands`` are left out.
    """
    lands_by_id = {field_of(land, "id"): land for land in lands}
    groups: dict[object, LandProductionGroup] = {}

    for production in productions:
        land = lands_by_id.get(field_of(production, "land_id"))
        if land is None:
            continue
        land_id = field_of(land, "id")
        group = groups.get(land_id)
        if group is None:
            group = groups[land_id] = LandProductionGroup(land, [])
        group.productions.append(
            ProductionWithRange(production, to_date_range(production))
        )
        if conflicts.get(field_of(production, "id")):
            group.has_conflicts = True

    for group in groups.values():
        group.productions.sort(key=_start_key)
    return sorted(
        groups.values(),
        key=lambda g: str(field_of(g.land, "name") or "").lower(),
    )


def _start_key(entry: ProductionWithRange):
    # Undated productions go last
    if entry.date_range is None:
        return (1, date.max)
    return (0, entry.date_range.start)


def format_conflict_message(conflict: Conflict) -> str:
    commodity = field_of(conflict.production, "commodity") or "another crop"
    days = conflict.overlap_days
    return f"Overlaps {days} day{'s' if days != 1 else ''} with {commodity}"
