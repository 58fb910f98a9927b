"""Tests for season calendar bar geometry."""

from datetime import date

import pytest

from rindang.planning.dates import DateRange, to_date_range
from rindang.planning.season_calendar import (
    days_in_year,
    get_production_bar_position,
    month_offsets,
)


class TestYearHelpers:
    def test_days_in_year(self):
        assert days_in_year(2024) == 366
        assert days_in_year(2023) == 365
        assert days_in_year(1900) == 365
        assert days_in_year(2000) == 366

    def test_month_offsets(self):
        offsets = month_offsets(2024)
        assert len(offsets) == 12
        assert offsets[0] == ("Jan", 0.0)
        assert offsets[2] == ("Mar", 16.39)
        assert all(a[1] < b[1] for a, b in zip(offsets, offsets[1:]))


class TestBarPosition:
    def test_first_quarter_production(self):
        rng = to_date_range({
            "planting_date": "2024-01-01", "harvest_date": "2024-03-01",
        })
        bar = get_production_bar_position(rng, 2024)
        assert bar.visible is True
        assert bar.left == 0.0
        assert bar.width == 16.39

    def test_starts_in_previous_year(self):
        rng = DateRange(date(2023, 12, 31), date(2024, 1, 1))
        bar = get_production_bar_position(rng, 2024)
        assert bar.visible is True
        assert bar.left == 0.0
        assert bar.width == 0.0

    def test_entirely_other_year(self):
        rng = DateRange(date(2023, 3, 1), date(2023, 6, 1))
        assert get_production_bar_position(rng, 2024).visible is False

    def test_none_range_invisible(self):
        assert get_production_bar_position(None, 2024).visible is False

    def test_runs_past_year_end(self):
        rng = DateRange(date(2024, 11, 1), date(2025, 2, 1))
        bar = get_production_bar_position(rng, 2024)
        assert bar.left + bar.width == pytest.approx(100.0, abs=0.01)

    def test_single_day_marker(self):
        rng = DateRange(date(2024, 7, 1), date(2024, 7, 1))
        bar = get_production_bar_position(rng, 2024)
        assert bar.visible is True
        assert bar.width == 0.0
        assert 0 < bar.left < 100

    def test_whole_year(self):
        rng = DateRange(date(2023, 6, 1), date(2025, 6, 1))
        bar = get_production_bar_position(rng, 2024)
        assert bar.left == 0.0
        assert bar.width == 100.0

    def test_dec_31_is_visible(self):
        rng = DateRange(date(2024, 12, 31), date(2024, 12, 31))
        bar = get_production_bar_position(rng, 2024)
        assert bar.visible is True
        assert bar.left < 100


BOUNDARY_RANGES = [
    (date(2022, 1, 1), date(2022, 12, 31)),
    (date(2023, 6, 1), date(2024, 3, 1)),
    (date(2023, 12, 31), date(2024, 1, 1)),
    (date(2024, 1, 1), date(2024, 1, 1)),
    (date(2024, 2, 28), date(2024, 3, 1)),
    (date(2024, 12, 30), date(2025, 1, 2)),
    (date(2024, 12, 31), date(2024, 12, 31)),
    (date(2023, 1, 1), date(2026, 1, 1)),
    (date(2025, 1, 1), date(2025, 6, 1)),
]


class TestBarBounds:
    @pytest.mark.parametrize("year", [2023, 2024, 2025])
    @pytest.mark.parametrize("start,end", BOUNDARY_RANGES)
    def test_percentages_stay_in_bounds(self, start, end, year):
        bar = get_production_bar_position(DateRange(start, end), year)
        if not bar.visible:
            assert end < date(year, 1, 1) or start > date(year, 12, 31)
            return
        assert 0 <= bar.left <= 100
        assert 0 <= bar.width
        assert bar.left + bar.width <= 100 + 1e-9
