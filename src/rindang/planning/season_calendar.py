"""Season calendar geometry: where a production bar sits within a year."""

import calendar
from dataclasses import dataclass
from datetime import date

from rindang.utils.constants import MONTHS

from .dates import DateRange


@dataclass(frozen=True)
class BarPosition:
    visible: bool
    left: float = 0.0   # percent of the year's width
    width: float = 0.0  # percent; 0 means a single-day marker


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def month_offsets(year: int) -> list[tuple[str, float]]:
    """Left offset (percent) of each month label in the calendar header."""
    total = days_in_year(year)
    return [
        (label, round((date(year, month, 1) - date(year, 1, 1)).days
                      / total * 100, 2))
        for month, label in enumerate(MONTHS, start=1)
    ]


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def get_production_bar_position(date_range: DateRange | None,
                                year: int) -> BarPosition:
    """Map a production's range onto the Jan 1 - Dec 31 axis of ``year``.

    Ranges that miss the year entirely are not visible. Otherwise the range
    is clipped to the year and converted to percentages of the year's
    length; anything running past Dec 31 extends to the right edge.
    """
    if date_range is None:
        return BarPosition(visible=False)

    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    if date_range.end < year_start or date_range.start > year_end:
        return BarPosition(visible=False)

    total = days_in_year(year)
    start_index = max((date_range.start - year_start).days, 0)
    if date_range.end > year_end:
        end_index = total
    else:
        end_index = (date_range.end - year_start).days

    left = round(_clamp(start_index / total * 100), 2)
    width = round((end_index - start_index) / total * 100, 2)
    width = _clamp(width, high=round(100.0 - left, 2))
    return BarPosition(visible=True, left=left, width=width)
